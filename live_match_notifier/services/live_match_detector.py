"""Detection of matches that have just gone live"""
from datetime import datetime, timedelta
from typing import Callable

from ..storage.match_store import MatchStore, StoreError
from ..services.notification_service import NotificationService
from ..utils.logger import setup_logger
from ..utils.timezone import now_utc

logger = setup_logger(__name__)


class LiveMatchDetector:
    """Finds matches inside the live window and dispatches their notifications"""
    
    def __init__(
        self,
        store: MatchStore,
        notification_service: NotificationService,
        live_window_minutes: int = 5,
        clock: Callable[[], datetime] = now_utc
    ):
        """
        Initialize detector
        
        Args:
            store: Match store instance
            notification_service: Dispatcher for live notifications
            live_window_minutes: How long after kickoff a match stays eligible
            clock: Source of the current UTC time
        """
        self.store = store
        self.notification_service = notification_service
        self.live_window = timedelta(minutes=live_window_minutes)
        self.clock = clock
    
    def check_live_matches(self) -> int:
        """
        Dispatch notifications for matches that just started
        
        Returns:
            Number of matches a notification was dispatched for
        """
        now = self.clock()
        window_start = now - self.live_window
        
        try:
            matches = self.store.get_live_candidates(window_start, now)
        except StoreError as e:
            logger.error(f"Error fetching matches: {e}")
            return 0
        
        if not matches:
            logger.info("No new live matches")
            return 0
        
        logger.info(f"Found {len(matches)} new live match(es)")
        
        # One at a time so each dispatch gets its own recipient count
        dispatched = 0
        for match in matches:
            try:
                if self.notification_service.send_live_notification(match):
                    dispatched += 1
            except Exception as e:
                logger.error(f"Error sending notification for match {match.id}: {e}")
        
        return dispatched
