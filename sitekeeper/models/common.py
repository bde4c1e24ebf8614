from datetime import UTC, date, datetime, time


def _utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(UTC)


def day_timestamp(day: date) -> str:
    """Timestamp for the start of a calendar day in UTC.

    Used wherever a rewrite must be stable for the whole day.
    """
    return datetime.combine(day, time(0, 0), tzinfo=UTC).isoformat()


def long_date(day: date) -> str:
    """Format a date as 'October 17, 2026'."""
    return f"{day.strftime('%B')} {day.day}, {day.year}"
