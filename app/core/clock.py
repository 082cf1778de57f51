from datetime import UTC, date, datetime, time, timedelta


def utc_naive_now() -> datetime:
    """Naive UTC for TIMESTAMP WITHOUT TIME ZONE columns."""
    return datetime.now(UTC).replace(tzinfo=None)


def start_of_day(d: date) -> datetime:
    return datetime.combine(d, time.min)


def day_bounds(d: date) -> tuple[datetime, datetime]:
    """Inclusive [00:00:00, 23:59:59.999999] bounds of a calendar day."""
    start = start_of_day(d)
    return start, start + timedelta(days=1) - timedelta(microseconds=1)
