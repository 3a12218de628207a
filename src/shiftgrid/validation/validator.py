"""Validation for time slots and slot catalogs.

This module is the single source of truth for catalog consistency rules.
Every catalog mutation is validated here before it is applied.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from shiftgrid.domain.models import TimeLike, TimeSlot, format_time, parse_time
from shiftgrid.errors import ValidationError, ValidationErrorType


@dataclass
class ValidationIssue:
    """A single validation problem."""

    error_type: ValidationErrorType
    message: str
    slot_id: Optional[str] = None
    field: Optional[str] = None

    def __str__(self) -> str:
        parts = [f"[{self.error_type.value}]"]
        if self.slot_id:
            parts.append(f"Slot {self.slot_id}:")
        parts.append(self.message)
        return " ".join(parts)

    def to_exception(self) -> ValidationError:
        """Convert the issue into a raisable ValidationError."""
        return ValidationError(self.error_type, self.message, field=self.field)


@dataclass
class ValidationResult:
    """Result of validating a slot or a catalog."""

    is_valid: bool = True
    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, error: ValidationIssue) -> None:
        """Add an error and mark as invalid."""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str) -> None:
        """Add a warning (doesn't affect validity)."""
        self.warnings.append(warning)

    def raise_if_invalid(self) -> None:
        """Raise the first error, if any."""
        if self.errors:
            raise self.errors[0].to_exception()


class TimeSlotValidator:
    """Validates time slot definitions and whole catalogs.

    Example:
        >>> validator = TimeSlotValidator()
        >>> result = validator.validate_catalog(slots)
        >>> if not result.is_valid:
        ...     for error in result.errors:
        ...         print(error)
    """

    def validate_times(
        self,
        start_time: TimeLike,
        end_time: TimeLike,
        slot_id: Optional[str] = None,
    ) -> ValidationResult:
        """Validate a raw start/end pair before a slot is built."""
        result = ValidationResult()
        parsed = {}
        for name, value in (("start_time", start_time), ("end_time", end_time)):
            try:
                parsed[name] = parse_time(value, name)
            except ValidationError as exc:
                result.add_error(
                    ValidationIssue(
                        error_type=exc.error_type,
                        message=exc.message,
                        slot_id=slot_id,
                        field=name,
                    )
                )

        if result.is_valid and parsed["start_time"] == parsed["end_time"]:
            result.add_error(
                ValidationIssue(
                    error_type=ValidationErrorType.EMPTY_SLOT,
                    message=(
                        f"Start and end time are both "
                        f"{format_time(parsed['start_time'])}"
                    ),
                    slot_id=slot_id,
                    field="end_time",
                )
            )
        return result

    def validate_catalog(self, slots: Iterable[TimeSlot]) -> ValidationResult:
        """Validate a complete set of slots.

        Duplicate ids are errors. Overlapping slots are allowed but
        reported as warnings.
        """
        result = ValidationResult()
        slots = list(slots)

        seen: set[str] = set()
        for slot in slots:
            if not slot.id:
                result.add_error(
                    ValidationIssue(
                        error_type=ValidationErrorType.DUPLICATE_SLOT_ID,
                        message="Time slot id must not be empty",
                        field="id",
                    )
                )
            elif slot.id in seen:
                result.add_error(
                    ValidationIssue(
                        error_type=ValidationErrorType.DUPLICATE_SLOT_ID,
                        message=f"Duplicate time slot id {slot.id!r}",
                        slot_id=slot.id,
                        field="id",
                    )
                )
            seen.add(slot.id)

        ordered = sorted(slots, key=lambda s: s.sort_key)
        for i, first in enumerate(ordered):
            for second in ordered[i + 1:]:
                if first.id != second.id and first.overlaps(second):
                    result.add_warning(
                        f"Slots {first.id} ({first.display_label}) and "
                        f"{second.id} ({second.display_label}) overlap"
                    )
        return result
