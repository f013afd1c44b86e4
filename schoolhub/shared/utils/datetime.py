"""UTC datetime helpers. All persisted datetimes are timezone-aware UTC."""

from datetime import UTC, date, datetime, time


def utc_now() -> datetime:
    """Return the current UTC datetime with timezone info."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes and convert aware ones; None passes through."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def start_of_day(d: date) -> datetime:
    """Return 00:00 UTC on the given date (inclusive lower bound for date filters)."""
    return datetime.combine(d, time.min, tzinfo=UTC)


def end_of_day(d: date) -> datetime:
    """Return the last instant of the given date in UTC (inclusive upper bound)."""
    return datetime.combine(d, time.max, tzinfo=UTC)
