from datetime import datetime, timezone


def get_current_timestamp() -> datetime:
    """Get current UTC timestamp (timezone-aware)"""
    return datetime.now(timezone.utc)


def format_datetime(dt: datetime) -> str:
    """Format datetime to ISO string"""
    return dt.isoformat() if dt else None
