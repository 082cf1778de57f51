"""Slot overlap validation.

Times are zero-padded 24h "HH:MM" strings. Because the format is fixed width,
plain string comparison orders them the same way as minute-of-day numbers;
require_hhmm enforces that precondition before any comparison happens.
"""
import re
from collections.abc import Iterable
from typing import Protocol

from app.core.errors import InvalidRangeError, InvalidTimeFormatError, OverlapError
from app.models.slot import HHMM_PATTERN

_HHMM = re.compile(HHMM_PATTERN)


class TimeRange(Protocol):
    start_time: str
    end_time: str


def require_hhmm(value: str, field: str = "time") -> str:
    if not isinstance(value, str) or not _HHMM.match(value):
        raise InvalidTimeFormatError(f"{field} must be in HH:MM 24-hour format, got {value!r}")
    return value


def overlaps(a: TimeRange, b: TimeRange) -> bool:
    """True when the half-open ranges [start, end) of a and b share a minute."""
    return (
        (b.start_time <= a.start_time < b.end_time)
        or (b.start_time < a.end_time <= b.end_time)
        or (a.start_time <= b.start_time and a.end_time >= b.end_time)
    )


def validate_slot(candidate: TimeRange, existing: Iterable[TimeRange]) -> None:
    """Raise if candidate is malformed, inverted, or collides with an existing slot."""
    require_hhmm(candidate.start_time, "start_time")
    require_hhmm(candidate.end_time, "end_time")
    if candidate.start_time >= candidate.end_time:
        raise InvalidRangeError("End time must be after start time")
    for slot in existing:
        if overlaps(candidate, slot):
            raise OverlapError(
                f"This time slot overlaps with an existing slot ({slot.start_time}-{slot.end_time})"
            )
