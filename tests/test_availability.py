"""
Tests for building engine input

Tests cover:
- Merging consecutive grid slots
- Slot grid -> availability / proposed windows
- Wall-clock records -> UTC windows
- End-to-end recommendation from grid data
"""

from datetime import datetime

import pytest

from availability import (
    availability_from_records,
    availability_from_slots,
    merge_consecutive_slots,
    proposed_windows_from_slots,
    request_from_data,
)
from recommend import recommend
from schemas import AvailabilityRecord
from time_window import InvalidTimeWindowError, TimeWindow


class TestMergeConsecutiveSlots:
    """Tests for merge_consecutive_slots."""

    def test_empty(self):
        assert merge_consecutive_slots([]) == []

    def test_merges_runs(self, utc):
        slots = [utc(14, 0), utc(14, 15), utc(14, 30), utc(16, 0)]
        assert merge_consecutive_slots(slots) == [
            (utc(14, 0), utc(14, 45)),
            (utc(16, 0), utc(16, 15)),
        ]

    def test_unsorted_and_duplicate_input(self, utc):
        slots = [utc(14, 15), utc(14, 0), utc(14, 15)]
        assert merge_consecutive_slots(slots) == [(utc(14, 0), utc(14, 30))]

    def test_min_duration_filter(self, utc):
        slots = [utc(14, 0), utc(14, 15), utc(14, 30), utc(14, 45), utc(16, 0)]
        assert merge_consecutive_slots(slots, 15, min_duration_minutes=60) == [
            (utc(14, 0), utc(15, 0)),
        ]


class TestFromSlots:
    """Tests for slot-grid conversion."""

    def test_availability_per_participant(self, sample_data, window):
        availability = availability_from_slots(sample_data)
        assert availability["Alice"] == [window((14, 0), (15, 0))]
        assert availability["Bob"] == [window((14, 0), (14, 30)), window((16, 0), (16, 30))]
        assert availability["Carol"] == []

    def test_proposed_windows(self, sample_data, utc):
        proposed = proposed_windows_from_slots(sample_data, "Asia/Seoul")
        assert [(p.start, p.end) for p in proposed] == [
            (utc(14, 0), utc(15, 0)),
            (utc(16, 0), utc(16, 30)),
        ]
        assert all(p.timezone == "Asia/Seoul" for p in proposed)

    def test_request_defaults_to_everyone(self, sample_data):
        request = request_from_data(sample_data, 30)
        assert request["participant_ids"] == ["Alice", "Bob", "Carol"]
        assert request["duration_minutes"] == 30

    def test_recommend_from_grid(self, sample_data, utc):
        result = recommend(**request_from_data(sample_data, 30))
        best = result.best_recommendation
        assert best.slot.start == utc(14, 0)
        assert best.available_participants == ("Alice", "Bob")
        assert result.message == \
            "Best available slot with 2 out of 3 participants (67% availability)."

    def test_recommend_for_selected_participants(self, sample_data, utc):
        request = request_from_data(sample_data, 30, participants=["Alice", "Bob"])
        result = recommend(**request)
        assert result.best_recommendation.availability_rate == 1.0
        assert "Perfect match! All 2 participants" in result.message

    def test_duration_longer_than_any_run(self, sample_data):
        result = recommend(**request_from_data(sample_data, 90))
        assert result.best_recommendation is None


class TestFromRecords:
    """Tests for availability_from_records."""

    def test_wall_clock_converted_to_utc(self, utc):
        records = [
            AvailabilityRecord("u1", datetime(2025, 1, 12, 23, 0), datetime(2025, 1, 13, 1, 0), "Asia/Seoul"),
            AvailabilityRecord("u1", datetime(2025, 1, 12, 9, 0), datetime(2025, 1, 12, 10, 0), "America/New_York"),
            AvailabilityRecord("u2", utc(14), utc(15)),
        ]
        availability = availability_from_records(records)
        assert availability["u1"] == [
            TimeWindow(utc(14), utc(16)),
            TimeWindow(utc(14), utc(15)),
        ]
        assert availability["u2"] == [TimeWindow(utc(14), utc(15))]

    def test_invalid_record_rejected(self, utc):
        records = [
            AvailabilityRecord("u1", utc(14), utc(15)),
            AvailabilityRecord("u1", utc(15), utc(15)),
        ]
        with pytest.raises(InvalidTimeWindowError, match="invalid time slot 1"):
            availability_from_records(records)

    def test_empty(self):
        assert availability_from_records([]) == {}
