"""Timezone conversion utilities"""
from datetime import datetime
import pytz


def to_utc(dt: datetime) -> datetime:
    """
    Convert a datetime to an aware UTC datetime.
    
    Args:
        dt: Datetime object (naive values are assumed to be UTC)
    
    Returns:
        Timezone-aware datetime object in UTC
    """
    if dt.tzinfo is None:
        dt = pytz.UTC.localize(dt)
    
    return dt.astimezone(pytz.UTC)


def now_utc() -> datetime:
    """Get current UTC time as an aware datetime"""
    return datetime.now(pytz.UTC)


def to_iso(dt: datetime) -> str:
    """Format a datetime as an ISO-8601 UTC timestamp for store filters"""
    return to_utc(dt).isoformat()


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 timestamp as returned by the store.
    
    Accepts a trailing 'Z' and naive values (assumed UTC).
    """
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    return to_utc(datetime.fromisoformat(value))
