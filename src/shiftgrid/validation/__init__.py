"""Validation module for time slots and catalogs."""

from shiftgrid.errors import (
    InvalidTransitionError,
    NotFoundError,
    OrphanedReferenceWarning,
    SchedulingError,
    ValidationError,
    ValidationErrorType,
)
from shiftgrid.validation.validator import (
    TimeSlotValidator,
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    "InvalidTransitionError",
    "NotFoundError",
    "OrphanedReferenceWarning",
    "SchedulingError",
    "TimeSlotValidator",
    "ValidationError",
    "ValidationErrorType",
    "ValidationIssue",
    "ValidationResult",
]
