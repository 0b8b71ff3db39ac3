from datetime import datetime, timedelta, timezone
from typing import Optional


def as_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Make a datetime timezone-aware (UTC).
    SQLite hands back naive values even for DateTime(timezone=True) columns.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def within_days(ts: Optional[datetime], days: int, now: Optional[datetime] = None) -> bool:
    """
    True if ts is strictly newer than ``now - days``.
    Unknown timestamps never count as recent.
    """
    if ts is None:
        return False
    now = as_utc(now) or utcnow()
    return as_utc(ts) > now - timedelta(days=days)


def time_ago(ts: Optional[datetime], now: Optional[datetime] = None) -> Optional[str]:
    """Human 'posted' text: Today, Yesterday, 3 days ago, 2 weeks ago, ..."""
    if ts is None:
        return None
    now = as_utc(now) or utcnow()
    days = (now - as_utc(ts)).days

    if days <= 0:
        return "Today"
    if days == 1:
        return "Yesterday"
    if days < 7:
        return f"{days} days ago"
    if days < 30:
        return f"{days // 7} weeks ago"
    if days < 365:
        return f"{days // 30} months ago"
    return f"{days // 365} years ago"
