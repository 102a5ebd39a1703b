"""Automatic end-of-match status updates"""
from datetime import datetime, timedelta
from typing import Callable

from ..storage.match_store import MatchStore, StoreError
from ..utils.logger import setup_logger
from ..utils.timezone import now_utc

logger = setup_logger(__name__)


class StatusUpdater:
    """Marks long-running active matches as ended"""
    
    def __init__(
        self,
        store: MatchStore,
        end_after_hours: int = 2,
        ended_status: str = "ended",
        clock: Callable[[], datetime] = now_utc
    ):
        self.store = store
        self.end_after = timedelta(hours=end_after_hours)
        self.ended_status = ended_status
        self.clock = clock
    
    def update_match_statuses(self) -> int:
        """
        Set the ended status on every active match older than the cutoff
        
        Returns:
            Number of matches updated (0 on failure)
        """
        cutoff = self.clock() - self.end_after
        
        try:
            updated = self.store.mark_ended(cutoff, self.ended_status)
        except StoreError as e:
            logger.error(f"Error updating match statuses: {e}")
            return 0
        
        if updated:
            logger.info(f"Marked {updated} match(es) as {self.ended_status}")
        return updated
