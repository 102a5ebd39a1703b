"""Main entry point for the live match notifier"""
import asyncio
import os
import signal
import sys
from typing import Optional

from .config import Config
from .scheduler import Scheduler
from .storage.match_store import MatchStore, create_store_client
from .services.push_client import PushClient, create_firebase_app
from .services.notification_service import NotificationService
from .services.live_match_detector import LiveMatchDetector
from .services.status_updater import StatusUpdater
from .utils.logger import setup_logger

logger = setup_logger(__name__)


class LiveMatchNotifier:
    """Main process orchestrator"""
    
    def __init__(self, config: Optional[Config] = None):
        """Initialize clients and services"""
        self.config = config or Config()
        
        # Process-wide clients, created once
        self.store_client = create_store_client(
            self.config.supabase_url,
            self.config.supabase_service_key
        )
        self.firebase_app = create_firebase_app(self.config.firebase_credentials)
        
        # Initialize services
        self.store = MatchStore(self.store_client)
        self.push_client = PushClient(self.firebase_app)
        self.notification_service = NotificationService(
            store=self.store,
            push_client=self.push_client,
            title_template=self.config.live_title_template,
            body_template=self.config.live_body_template,
            live_status=self.config.live_status_label
        )
        self.detector = LiveMatchDetector(
            store=self.store,
            notification_service=self.notification_service,
            live_window_minutes=self.config.live_window_minutes
        )
        self.updater = StatusUpdater(
            store=self.store,
            end_after_hours=self.config.end_after_hours,
            ended_status=self.config.ended_status_label
        )
        self.scheduler = Scheduler(
            detector=self.detector,
            updater=self.updater,
            interval=self.config.check_interval
        )
        
        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)
    
    def _signal_handler(self, signum, frame):
        """Exit at once; in-flight work is retried by the next process"""
        logger.info(f"Received signal {signum}, shutting down...")
        os._exit(0)
    
    async def start(self):
        """Start the check loop"""
        logger.info("Football notification server started")
        await self.scheduler.run()


async def main():
    """Main entry point"""
    try:
        notifier = LiveMatchNotifier()
        await notifier.start()
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
