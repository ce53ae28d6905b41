"""
Pytest fixtures for recommendation tests.

Provides:
- UTC datetime factory
- Availability windows for common participant setups
- Slot-grid sample data (like when2meet / timepick output)
"""

from datetime import datetime, timedelta, timezone

import pytest

from time_window import TimeWindow


# =============================================================================
# TIME FIXTURES
# =============================================================================

@pytest.fixture
def utc():
    """Build an aware UTC datetime on 2025-01-12 (or another day)."""
    def _utc(hour: int, minute: int = 0, day: int = 12) -> datetime:
        return datetime(2025, 1, day, hour, minute, tzinfo=timezone.utc)
    return _utc


@pytest.fixture
def window(utc):
    """Build a TimeWindow from (hour, minute) pairs on the same day."""
    def _window(start: tuple, end: tuple, day: int = 12) -> TimeWindow:
        return TimeWindow(utc(*start, day=day), utc(*end, day=day))
    return _window


# =============================================================================
# AVAILABILITY FIXTURES
# =============================================================================

@pytest.fixture
def afternoon(window):
    """14:00 ~ 16:00 UTC."""
    return window((14, 0), (16, 0))


@pytest.fixture
def split_availability(window):
    """u1, u2 free 14:00~15:00, u3 free 15:00~16:00 only."""
    return {
        "u1": [window((14, 0), (15, 0))],
        "u2": [window((14, 0), (15, 0))],
        "u3": [window((15, 0), (16, 0))],
    }


# =============================================================================
# SLOT GRID FIXTURES
# =============================================================================

@pytest.fixture
def sample_data(utc):
    """
    15-minute grid 14:00~15:00 and 16:00~16:30 UTC.
    Alice marks 14:00~15:00, Bob marks 14:00~14:30 and 16:00~16:30, Carol nothing.
    """
    first = [utc(14, 0) + timedelta(minutes=15 * i) for i in range(4)]
    second = [utc(16, 0), utc(16, 15)]
    slots = first + second

    availability = {slot: [] for slot in slots}
    for slot in first:
        availability[slot].append("Alice")
    for slot in first[:2] + second:
        availability[slot].append("Bob")

    return {
        "source": "when2meet",
        "name": "Band Practice",
        "participants": ["Alice", "Bob", "Carol"],
        "slot_minutes": 15,
        "slots": slots,
        "availability": availability,
    }
