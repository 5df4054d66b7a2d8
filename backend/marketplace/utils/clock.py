from datetime import datetime, timezone


def utcnow() -> datetime:
    """Naive UTC timestamp, the form DateTime columns store and return."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(dt: datetime | None) -> str | None:
    return dt.isoformat() if dt else None
