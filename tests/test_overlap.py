"""Unit tests for slot overlap validation."""
from types import SimpleNamespace

import pytest

from app.core.errors import (
    ConflictError,
    InvalidRangeError,
    InvalidTimeFormatError,
    OverlapError,
    ValidationError,
)
from app.services.overlap import overlaps, require_hhmm, validate_slot


def rng(start: str, end: str) -> SimpleNamespace:
    return SimpleNamespace(start_time=start, end_time=end)


EXISTING = [rng("09:00", "10:00")]


def test_partial_overlap_rejected():
    with pytest.raises(ConflictError):
        validate_slot(rng("09:30", "10:30"), EXISTING)


def test_back_to_back_accepted():
    validate_slot(rng("10:00", "11:00"), EXISTING)
    validate_slot(rng("08:00", "09:00"), EXISTING)


@pytest.mark.parametrize(
    "start,end",
    [
        ("08:30", "09:30"),  # ends inside
        ("09:15", "09:45"),  # inside
        ("08:00", "11:00"),  # contains
        ("09:00", "10:00"),  # identical
        ("09:00", "09:15"),  # same start
        ("09:45", "10:00"),  # same end
    ],
)
def test_overlapping_candidates_rejected(start, end):
    with pytest.raises(OverlapError):
        validate_slot(rng(start, end), EXISTING)


@pytest.mark.parametrize("start,end", [("10:00", "10:00"), ("11:00", "10:00")])
def test_empty_or_inverted_range_rejected(start, end):
    with pytest.raises(InvalidRangeError) as exc:
        validate_slot(rng(start, end), [])
    assert isinstance(exc.value, ValidationError)


def test_range_checked_before_overlap():
    with pytest.raises(ValidationError):
        validate_slot(rng("09:30", "09:00"), EXISTING)


@pytest.mark.parametrize("value", ["9:00", "09:0", "24:00", "12:60", "0900", "", "ab:cd"])
def test_malformed_time_rejected(value):
    with pytest.raises(InvalidTimeFormatError):
        require_hhmm(value)
    with pytest.raises(ValidationError):
        validate_slot(rng(value, "23:00"), [])


def test_overlaps_is_symmetric_for_half_open_ranges():
    pairs = [
        (rng("09:00", "10:00"), rng("10:00", "11:00"), False),
        (rng("09:00", "10:00"), rng("09:59", "11:00"), True),
        (rng("13:00", "14:00"), rng("09:00", "10:00"), False),
        (rng("09:00", "12:00"), rng("10:00", "11:00"), True),
    ]
    for a, b, expected in pairs:
        assert overlaps(a, b) is expected
        assert overlaps(b, a) is expected


def test_string_order_matches_minutes():
    """Lexicographic HH:MM order agrees with minute-of-day order for valid times."""
    times = [f"{h:02d}:{m:02d}" for h in range(24) for m in (0, 15, 30, 45)]
    minutes = [int(t[:2]) * 60 + int(t[3:]) for t in times]
    assert sorted(times) == [t for _, t in sorted(zip(minutes, times))]
