"""Exception hierarchy for the scheduling core.

Catalog and assignment mutations raise these synchronously. The resolver
and headcount helpers never raise; orphaned cell data is only reported
through logging with :class:`OrphanedReferenceWarning`.
"""

from enum import Enum
from typing import Optional


class ValidationErrorType(Enum):
    """Types of validation errors."""

    MALFORMED_TIME = "malformed_time"
    EMPTY_SLOT = "empty_slot"
    DUPLICATE_SLOT_ID = "duplicate_slot_id"
    DATE_OUTSIDE_WEEK = "date_outside_week"
    UNKNOWN_SLOT = "unknown_slot"
    DOUBLE_BOOKING = "double_booking"
    UNKNOWN_TIMEZONE = "unknown_timezone"
    INVALID_CONFIG = "invalid_config"


class SchedulingError(Exception):
    """Base class for all scheduling errors."""


class ValidationError(SchedulingError, ValueError):
    """Raised when a time slot, cell coordinate or setting is invalid.

    Attributes:
        error_type: Category of the failure.
        message: Human-readable description.
        field: Name of the offending field, if any.
    """

    def __init__(
        self,
        error_type: ValidationErrorType,
        message: str,
        field: Optional[str] = None,
    ):
        super().__init__(message)
        self.error_type = error_type
        self.message = message
        self.field = field

    def __str__(self) -> str:
        parts = [f"[{self.error_type.value}]"]
        if self.field:
            parts.append(f"{self.field}:")
        parts.append(self.message)
        return " ".join(parts)


class NotFoundError(SchedulingError, KeyError):
    """Raised when an operation addresses an id that does not exist."""

    def __init__(self, kind: str, identifier: str):
        super().__init__(identifier)
        self.kind = kind
        self.identifier = identifier

    def __str__(self) -> str:
        return f"{self.kind} not found: {self.identifier}"


class InvalidTransitionError(SchedulingError):
    """Raised when an assignment status change is not allowed."""

    def __init__(self, assignment_id: str, current: str, requested: str):
        super().__init__(
            f"Assignment {assignment_id} cannot move from {current} to {requested}"
        )
        self.assignment_id = assignment_id
        self.current = current
        self.requested = requested


class OrphanedReferenceWarning(UserWarning):
    """A cell references a time slot id that is no longer in the catalog."""
