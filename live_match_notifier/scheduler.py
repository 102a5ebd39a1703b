"""Sequential tick loop"""
import asyncio
from typing import Awaitable, Callable, Optional

from .services.live_match_detector import LiveMatchDetector
from .services.status_updater import StatusUpdater
from .utils.logger import setup_logger
from .utils.timezone import now_utc

logger = setup_logger(__name__)


class Scheduler:
    """Runs the detector and updater once per interval, never overlapping"""
    
    def __init__(
        self,
        detector: LiveMatchDetector,
        updater: StatusUpdater,
        interval: int = 60,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        """
        Initialize scheduler
        
        Args:
            detector: Live match detector
            updater: Match status updater
            interval: Seconds to wait after a tick completes before the next one
            sleep: Awaitable sleep function
        """
        self.detector = detector
        self.updater = updater
        self.interval = interval
        self._sleep = sleep
        self.ticks = 0
    
    def tick(self):
        """Run one detector pass followed by one updater pass"""
        logger.info(f"{now_utc().strftime('%H:%M:%S')} - Checking...")
        try:
            self.detector.check_live_matches()
        except Exception as e:
            logger.error(f"Error in live match check: {e}")

        try:
            self.updater.update_match_statuses()
        except Exception as e:
            logger.error(f"Error in status update: {e}")
    
    async def run(self, max_ticks: Optional[int] = None):
        """
        Tick immediately, then again `interval` seconds after each tick ends
        
        Args:
            max_ticks: Stop after this many ticks (runs forever when None)
        """
        logger.info(f"Checking for live matches every {self.interval} seconds")
        
        while True:
            try:
                # Blocking SDK calls run off the event loop
                await asyncio.to_thread(self.tick)
            except Exception as e:
                logger.error(f"Error in check loop: {e}")
            
            self.ticks += 1
            if max_ticks is not None and self.ticks >= max_ticks:
                return
            
            await self._sleep(self.interval)
