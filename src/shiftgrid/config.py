"""Runtime configuration for the scheduling core."""

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from shiftgrid.domain.models import TimeSlot
from shiftgrid.errors import ValidationError, ValidationErrorType

DEFAULT_TIMEZONE = "Asia/Ho_Chi_Minh"

# Host applications re-poll the clock at this cadence.
POLL_INTERVAL_SECONDS = 60

DEFAULT_TIME_SLOTS: list[tuple[str, str, str]] = [
    ("slot1", "07:00", "09:00"),
    ("slot2", "09:00", "11:00"),
    ("slot3", "11:00", "13:00"),
    ("slot4", "13:00", "15:00"),
    ("slot5", "15:00", "17:00"),
    ("slot6", "17:00", "19:00"),
    ("slot7", "19:00", "21:00"),
]


def load_timezone(name: str) -> ZoneInfo:
    """Load an IANA timezone.

    Raises:
        ValidationError: If the zone does not exist.
    """
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValidationError(
            ValidationErrorType.UNKNOWN_TIMEZONE,
            f"Unknown timezone {name!r}",
            field="timezone",
        ) from exc


@dataclass
class SchedulingConfig:
    """Settings supplied to the scheduling core at construction time.

    Attributes:
        timezone: IANA name of the fixed business timezone.
        poll_interval_seconds: How often hosts should recompute cell status.
        default_role: Role label given to new assignments.
        allow_double_booking: Whether one staff member may hold two active
            assignments in the same cell.
        default_time_slots: (id, start, end) triples for the initial catalog.
    """

    timezone: str = DEFAULT_TIMEZONE
    poll_interval_seconds: int = POLL_INTERVAL_SECONDS
    default_role: str = "Staff"
    allow_double_booking: bool = True
    default_time_slots: list[tuple[str, str, str]] = field(
        default_factory=lambda: list(DEFAULT_TIME_SLOTS)
    )

    def __post_init__(self):
        if not isinstance(self.timezone, str):
            raise ValidationError(
                ValidationErrorType.INVALID_CONFIG,
                "timezone must be a string",
                field="timezone",
            )
        load_timezone(self.timezone)
        if isinstance(self.poll_interval_seconds, bool) or not isinstance(
            self.poll_interval_seconds, int
        ):
            raise ValidationError(
                ValidationErrorType.INVALID_CONFIG,
                "poll_interval_seconds must be an integer, "
                f"got {self.poll_interval_seconds!r}",
                field="poll_interval_seconds",
            )
        if self.poll_interval_seconds <= 0:
            raise ValidationError(
                ValidationErrorType.INVALID_CONFIG,
                "poll_interval_seconds must be positive",
                field="poll_interval_seconds",
            )
        try:
            slots = [tuple(s) for s in self.default_time_slots]
        except TypeError as exc:
            raise ValidationError(
                ValidationErrorType.INVALID_CONFIG,
                "default_time_slots must be a list of [id, start, end] entries",
                field="default_time_slots",
            ) from exc
        if any(len(s) != 3 for s in slots):
            raise ValidationError(
                ValidationErrorType.INVALID_CONFIG,
                "default_time_slots entries must have exactly [id, start, end]",
                field="default_time_slots",
            )
        self.default_time_slots = slots

    @property
    def tzinfo(self) -> ZoneInfo:
        """The business timezone as a tzinfo."""
        return load_timezone(self.timezone)

    def build_time_slots(self) -> list[TimeSlot]:
        """Build TimeSlot objects for the default catalog."""
        return [
            TimeSlot.from_strings(slot_id, start, end)
            for slot_id, start, end in self.default_time_slots
        ]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SchedulingConfig":
        """Create a config from a plain dict, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValidationError(
                ValidationErrorType.INVALID_CONFIG,
                f"Unknown config keys: {', '.join(unknown)}",
            )
        return cls(**data)

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "SchedulingConfig":
        """Load a config from a JSON file."""
        try:
            data = json.loads(Path(path).read_text())
        except OSError as exc:
            raise ValidationError(
                ValidationErrorType.INVALID_CONFIG,
                f"Cannot read config file {path}: {exc.strerror or exc}",
            ) from exc
        except json.JSONDecodeError as exc:
            raise ValidationError(
                ValidationErrorType.INVALID_CONFIG,
                f"Config file {path} is not valid JSON: {exc.msg}",
            ) from exc
        if not isinstance(data, dict):
            raise ValidationError(
                ValidationErrorType.INVALID_CONFIG,
                f"Config file {path} must contain a JSON object",
            )
        return cls.from_dict(data)
