"""Data models for matches and notifications"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from ..utils.timezone import parse_timestamp


@dataclass
class Match:
    """Represents a scheduled football match"""
    id: Any
    opponent1_name: str
    opponent2_name: str
    match_time: datetime
    live_url: Optional[str] = None
    is_active: bool = True
    live_notification_sent: bool = False
    status: Optional[str] = None
    
    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Match":
        """Build a Match from a `matches` row"""
        return cls(
            id=row['id'],
            opponent1_name=row.get('opponent1_name') or '',
            opponent2_name=row.get('opponent2_name') or '',
            match_time=parse_timestamp(row['match_time']),
            live_url=row.get('live_url'),
            is_active=bool(row.get('is_active', True)),
            live_notification_sent=bool(row.get('live_notification_sent', False)),
            status=row.get('status')
        )
    
    def __hash__(self):
        return hash(self.id)
    
    def __eq__(self, other):
        if not isinstance(other, Match):
            return False
        return self.id == other.id


@dataclass
class NotificationLogEntry:
    """Represents one row of the notifications log"""
    title: str
    message: str
    recipients_count: int
    status: str = 'sent'
    notification_type: str = 'live'
    
    def to_row(self) -> Dict[str, Any]:
        return {
            'title': self.title,
            'message': self.message,
            'status': self.status,
            'recipients_count': self.recipients_count,
            'notification_type': self.notification_type
        }


@dataclass
class MulticastResult:
    """Aggregate outcome of a multicast push"""
    success_count: int
    failure_count: int
    
    @property
    def total(self) -> int:
        return self.success_count + self.failure_count
