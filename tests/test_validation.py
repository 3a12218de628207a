"""Tests for time slot validation."""

from datetime import time

import pytest

from shiftgrid.domain.models import TimeSlot
from shiftgrid.validation import (
    NotFoundError,
    SchedulingError,
    TimeSlotValidator,
    ValidationError,
    ValidationErrorType,
    ValidationIssue,
    ValidationResult,
)


class TestTimeSlotValidator:
    """Tests for TimeSlotValidator."""

    @pytest.fixture
    def validator(self):
        return TimeSlotValidator()

    def test_valid_times(self, validator):
        result = validator.validate_times("07:00", "09:00")

        assert result.is_valid
        assert result.errors == []

    def test_overnight_is_valid(self, validator):
        assert validator.validate_times("22:00", "02:00").is_valid

    def test_time_objects_accepted(self, validator):
        assert validator.validate_times(time(7, 0), time(9, 0)).is_valid

    def test_both_times_malformed(self, validator):
        result = validator.validate_times("7", "25:61", slot_id="s1")

        assert not result.is_valid
        assert [e.field for e in result.errors] == ["start_time", "end_time"]
        assert all(e.error_type == ValidationErrorType.MALFORMED_TIME for e in result.errors)
        assert all(e.slot_id == "s1" for e in result.errors)

    def test_equal_times(self, validator):
        result = validator.validate_times("09:00", "09:00")

        assert not result.is_valid
        assert result.errors[0].error_type == ValidationErrorType.EMPTY_SLOT

    def test_catalog_duplicates(self, validator):
        slots = [
            TimeSlot.from_strings("a", "07:00", "09:00"),
            TimeSlot.from_strings("b", "09:00", "11:00"),
            TimeSlot.from_strings("a", "11:00", "13:00"),
        ]

        result = validator.validate_catalog(slots)

        assert not result.is_valid
        assert len(result.errors) == 1
        assert result.errors[0].error_type == ValidationErrorType.DUPLICATE_SLOT_ID

    def test_catalog_empty_id(self, validator):
        result = validator.validate_catalog([TimeSlot.from_strings("", "07:00", "09:00")])
        assert not result.is_valid

    def test_adjacent_slots_do_not_overlap(self, validator):
        slots = [
            TimeSlot.from_strings("a", "07:00", "09:00"),
            TimeSlot.from_strings("b", "09:00", "11:00"),
        ]

        result = validator.validate_catalog(slots)

        assert result.is_valid
        assert result.warnings == []

    def test_overlap_is_warning(self, validator):
        slots = [
            TimeSlot.from_strings("late", "22:00", "02:00"),
            TimeSlot.from_strings("early", "01:00", "03:00"),
        ]

        result = validator.validate_catalog(slots)

        assert result.is_valid
        assert len(result.warnings) == 1
        assert "early" in result.warnings[0]
        assert "late" in result.warnings[0]


class TestValidationResult:
    """Tests for ValidationResult and ValidationIssue."""

    def test_raise_if_invalid(self):
        result = ValidationResult()
        result.raise_if_invalid()

        result.add_error(
            ValidationIssue(ValidationErrorType.EMPTY_SLOT, "empty", slot_id="s1", field="end_time")
        )

        with pytest.raises(ValidationError) as exc_info:
            result.raise_if_invalid()
        assert exc_info.value.field == "end_time"

    def test_warning_keeps_valid(self):
        result = ValidationResult()
        result.add_warning("overlap")
        assert result.is_valid

    def test_issue_str(self):
        issue = ValidationIssue(ValidationErrorType.EMPTY_SLOT, "empty", slot_id="s1")
        assert str(issue) == "[empty_slot] Slot s1: empty"


class TestErrors:
    """Tests for the exception hierarchy."""

    def test_validation_error_is_value_error(self):
        error = ValidationError(ValidationErrorType.MALFORMED_TIME, "bad", field="start_time")

        assert isinstance(error, ValueError)
        assert isinstance(error, SchedulingError)
        assert str(error) == "[malformed_time] start_time: bad"

    def test_not_found_is_key_error(self):
        error = NotFoundError("TimeSlot", "slot9")

        assert isinstance(error, KeyError)
        assert str(error) == "TimeSlot not found: slot9"
