from datetime import UTC, datetime


def utc_now() -> datetime:
    """Current time as a naive UTC datetime (the form stored in the database)."""
    return datetime.now(UTC).replace(tzinfo=None)


def ensure_naive_utc(dt_value: datetime | None) -> datetime | None:
    """
    Ensure a datetime is naive UTC.

    Useful when comparing caller-supplied datetimes, which may carry a
    timezone, against the naive UTC values read from the database.

    Args:
        dt_value: datetime to normalize

    Returns:
        Naive UTC datetime or None if input is None
    """
    if dt_value is None:
        return None

    if dt_value.tzinfo is not None:
        return dt_value.astimezone(UTC).replace(tzinfo=None)
    return dt_value
