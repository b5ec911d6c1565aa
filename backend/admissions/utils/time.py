"""Time Utilities - UTC timestamps"""
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Get current UTC datetime"""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Attach UTC to naive datetimes read back from MongoDB"""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt
