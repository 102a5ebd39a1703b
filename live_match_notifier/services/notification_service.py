"""Notification service for dispatching live match pushes"""
from typing import Dict

from ..storage.match_store import MatchStore, StoreError
from ..storage.models import Match, NotificationLogEntry
from ..services.push_client import PushClient, PushError
from ..utils.logger import setup_logger

logger = setup_logger(__name__)

LIVE_NOTIFICATION_TYPE = "live"


class NotificationService:
    """Service for sending live match notifications"""
    
    def __init__(
        self,
        store: MatchStore,
        push_client: PushClient,
        title_template: str,
        body_template: str,
        live_status: str = "live"
    ):
        """
        Initialize notification service
        
        Args:
            store: Match store instance
            push_client: Push client instance
            title_template: Notification title with {opponent1}/{opponent2}
            body_template: Notification body with {opponent1}/{opponent2}
            live_status: Status label written once a match is notified
        """
        self.store = store
        self.push_client = push_client
        self.title_template = title_template
        self.body_template = body_template
        self.live_status = live_status
    
    def format_title(self, match: Match) -> str:
        return self.title_template.format(
            opponent1=match.opponent1_name,
            opponent2=match.opponent2_name
        )
    
    def format_body(self, match: Match) -> str:
        return self.body_template.format(
            opponent1=match.opponent1_name,
            opponent2=match.opponent2_name
        )
    
    def build_data(self, match: Match) -> Dict[str, str]:
        """Build the data payload delivered alongside the notification"""
        return {
            "matchId": str(match.id),
            "type": LIVE_NOTIFICATION_TYPE,
            "url": match.live_url or ""
        }
    
    def send_live_notification(self, match: Match) -> bool:
        """
        Push a "match is live" notification to every registered device
        
        Args:
            match: Match that just went live
        
        Returns:
            True if the match was marked as notified
        """
        logger.info(
            f"Sending notification for: {match.opponent1_name} VS {match.opponent2_name}"
        )
        
        try:
            tokens = self.store.get_device_tokens()
        except StoreError as e:
            logger.error(f"Error fetching device tokens: {e}")
            return False
        
        if not tokens:
            # Leave the match unflagged so a later tick can retry
            logger.warning("No device tokens found")
            return False
        
        title = self.format_title(match)
        body = self.format_body(match)
        
        try:
            result = self.push_client.send_multicast(
                tokens,
                title=title,
                body=body,
                data=self.build_data(match)
            )
        except PushError as e:
            logger.error(f"Error sending notification for match {match.id}: {e}")
            return False
        
        logger.info(f"Sent to {result.success_count}/{result.total} devices")
        
        try:
            self.store.mark_live_notified(match.id, self.live_status)
        except StoreError as e:
            logger.error(f"Error marking match {match.id} as notified: {e}")
            return False
        
        try:
            self.store.log_notification(NotificationLogEntry(
                title=title,
                message=body,
                recipients_count=result.success_count,
                notification_type=LIVE_NOTIFICATION_TYPE
            ))
        except StoreError as e:
            logger.error(f"Error logging notification for match {match.id}: {e}")
        
        return True
