"""Supabase store operations"""
from datetime import datetime
from typing import Any, List

from supabase import Client, create_client

from .models import Match, NotificationLogEntry
from ..utils.logger import setup_logger
from ..utils.timezone import to_iso

logger = setup_logger(__name__)

MATCHES_TABLE = "matches"
USERS_TABLE = "users"
NOTIFICATIONS_LOG_TABLE = "notifications_log"


class StoreError(Exception):
    """A store query or update failed"""


def create_store_client(url: str, service_key: str) -> Client:
    """Create the process-wide Supabase client"""
    return create_client(url, service_key)


class MatchStore:
    """Reads and writes match, user and notification log rows"""
    
    def __init__(self, client: Client):
        """
        Initialize the store
        
        Args:
            client: Supabase client shared for the process lifetime
        """
        self.client = client
    
    def _execute(self, query: Any, action: str) -> List[dict]:
        """Run a built query and return its rows"""
        try:
            response = query.execute()
        except Exception as e:
            raise StoreError(f"Failed to {action}: {e}") from e
        return response.data or []
    
    def get_live_candidates(self, window_start: datetime, window_end: datetime) -> List[Match]:
        """
        Get active, not yet notified matches starting inside a window
        
        Args:
            window_start: Earliest start time (inclusive)
            window_end: Latest start time (inclusive)
        
        Returns:
            List of matches
        """
        query = (
            self.client.table(MATCHES_TABLE)
            .select("*")
            .eq("is_active", True)
            .eq("live_notification_sent", False)
            .gte("match_time", to_iso(window_start))
            .lte("match_time", to_iso(window_end))
        )
        rows = self._execute(query, "fetch matches")
        return [Match.from_row(row) for row in rows]
    
    def get_match(self, match_id: Any) -> Match:
        """Get a single match by ID"""
        query = self.client.table(MATCHES_TABLE).select("*").eq("id", match_id)
        rows = self._execute(query, f"fetch match {match_id}")
        if not rows:
            raise StoreError(f"Match {match_id} not found")
        return Match.from_row(rows[0])
    
    def get_device_tokens(self) -> List[str]:
        """Get every registered push token"""
        query = (
            self.client.table(USERS_TABLE)
            .select("fcm_token")
            .not_.is_("fcm_token", "null")
        )
        rows = self._execute(query, "fetch users")
        return [row['fcm_token'] for row in rows if row.get('fcm_token')]
    
    def mark_live_notified(self, match_id: Any, status: str):
        """Flag a match as notified and set its live status"""
        query = (
            self.client.table(MATCHES_TABLE)
            .update({"live_notification_sent": True, "status": status})
            .eq("id", match_id)
        )
        self._execute(query, f"update match {match_id}")
    
    def mark_ended(self, started_before: datetime, ended_status: str) -> int:
        """
        Set the ended status on every active match that started before a cutoff
        
        Args:
            started_before: Cutoff start time (exclusive)
            ended_status: Status label to write
        
        Returns:
            Number of rows the store reported as updated
        """
        query = (
            self.client.table(MATCHES_TABLE)
            .update({"status": ended_status})
            .eq("is_active", True)
            .neq("status", ended_status)
            .lt("match_time", to_iso(started_before))
        )
        rows = self._execute(query, "update match statuses")
        return len(rows)
    
    def log_notification(self, entry: NotificationLogEntry):
        """Append a row to the notifications log"""
        query = self.client.table(NOTIFICATIONS_LOG_TABLE).insert(entry.to_row())
        self._execute(query, "log notification")
