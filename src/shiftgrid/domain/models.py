"""Domain models for the scheduling system.

This module contains all core data structures used by the weekly roster:
time slots, staff, assignments, schedule cells and the week aggregate.
Everything here is immutable; operations that change a schedule return a
new value instead of editing one in place.
"""

import re
from dataclasses import dataclass, field, replace
from datetime import date, time, timedelta
from enum import Enum
from typing import Iterator, Optional, Union

from shiftgrid.errors import (
    InvalidTransitionError,
    ValidationError,
    ValidationErrorType,
)

_TIME_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")

TimeLike = Union[str, time]

CellKey = tuple[date, str]


def parse_time(value: TimeLike, field_name: str = "time") -> time:
    """Parse an ``HH:MM`` string (or pass through a ``time``).

    Seconds and microseconds are dropped; slots are minute-granular.

    Raises:
        ValidationError: If the value is not a valid 24-hour time.
    """
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0, tzinfo=None)
    if not isinstance(value, str):
        raise ValidationError(
            ValidationErrorType.MALFORMED_TIME,
            f"Expected 'HH:MM' string, got {type(value).__name__}",
            field=field_name,
        )
    match = _TIME_PATTERN.match(value)
    if match is None:
        raise ValidationError(
            ValidationErrorType.MALFORMED_TIME,
            f"Cannot parse time {value!r}, expected 'HH:MM'",
            field=field_name,
        )
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ValidationError(
            ValidationErrorType.MALFORMED_TIME,
            f"Time {value!r} is out of range",
            field=field_name,
        )
    return time(hour=hour, minute=minute)


def format_time(t: time) -> str:
    """Format a time as ``HH:MM``."""
    return t.strftime("%H:%M")


def _short_label(t: time) -> str:
    # Whole hours render as "7h", anything else as "07:30".
    if t.minute == 0:
        return f"{t.hour}h"
    return format_time(t)


class AssignmentStatus(Enum):
    """Lifecycle status of a staff assignment."""

    REGISTERED = "registered"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"

    @property
    def is_active(self) -> bool:
        """Cancelled assignments do not count towards headcount."""
        return self is not AssignmentStatus.CANCELLED


# Allowed status transitions. Hard removal is not a status and is handled
# by the assignment manager.
_TRANSITIONS: dict[AssignmentStatus, frozenset[AssignmentStatus]] = {
    AssignmentStatus.REGISTERED: frozenset(
        {AssignmentStatus.CONFIRMED, AssignmentStatus.CANCELLED}
    ),
    AssignmentStatus.CONFIRMED: frozenset({AssignmentStatus.CANCELLED}),
    AssignmentStatus.CANCELLED: frozenset(),
}


class TimeStatus(Enum):
    """Position of a slot instance relative to the current time."""

    PAST = "past"
    CURRENT = "current"
    FUTURE = "future"


@dataclass(frozen=True)
class TimeSlot:
    """A named time-of-day range that recurs every day.

    An end time earlier than the start time denotes a slot that crosses
    midnight (e.g. 22:00-02:00).

    Attributes:
        id: Identifier, unique within the catalog.
        start_time: Local wall-clock start.
        end_time: Local wall-clock end.
        label: Display label. Generated from the times when empty.
    """

    id: str
    start_time: time
    end_time: time
    label: str = ""

    def __post_init__(self):
        object.__setattr__(self, "start_time", parse_time(self.start_time, "start_time"))
        object.__setattr__(self, "end_time", parse_time(self.end_time, "end_time"))
        if self.start_time == self.end_time:
            raise ValidationError(
                ValidationErrorType.EMPTY_SLOT,
                f"Start and end time are both {format_time(self.start_time)}",
                field="end_time",
            )

    @classmethod
    def from_strings(
        cls,
        slot_id: str,
        start: str,
        end: str,
        label: str = "",
    ) -> "TimeSlot":
        """Create a slot from ``HH:MM`` strings."""
        return cls(
            id=slot_id,
            start_time=parse_time(start, "start_time"),
            end_time=parse_time(end, "end_time"),
            label=label,
        )

    @property
    def is_overnight(self) -> bool:
        """True if the slot ends on the following calendar day."""
        return self.end_time < self.start_time

    @property
    def start_minutes(self) -> int:
        """Minutes from midnight when this slot starts."""
        return self.start_time.hour * 60 + self.start_time.minute

    @property
    def end_minutes(self) -> int:
        """Minutes from midnight when this slot ends."""
        return self.end_time.hour * 60 + self.end_time.minute

    @property
    def duration_minutes(self) -> int:
        """Length of the slot in minutes, overnight aware."""
        return (self.end_minutes - self.start_minutes) % (24 * 60)

    @property
    def display_label(self) -> str:
        """Label to show for the slot row."""
        if self.label:
            return self.label
        return f"{_short_label(self.start_time)} - {_short_label(self.end_time)}"

    @property
    def sort_key(self) -> tuple[time, time, str]:
        """Catalog ordering: by start, overnight slots included, then end and id."""
        return (self.start_time, self.end_time, self.id)

    def overlaps(self, other: "TimeSlot") -> bool:
        """Check if the two slots share any minute of the day."""
        day = 24 * 60

        def ranges(slot: "TimeSlot") -> list[tuple[int, int]]:
            if slot.is_overnight:
                return [(slot.start_minutes, day), (0, slot.end_minutes)]
            return [(slot.start_minutes, slot.end_minutes)]

        return any(
            a_start < b_end and b_start < a_end
            for a_start, a_end in ranges(self)
            for b_start, b_end in ranges(other)
        )

    def __repr__(self) -> str:
        return (
            f"TimeSlot({self.id}, {format_time(self.start_time)}-"
            f"{format_time(self.end_time)})"
        )


def _derive_initials(name: str) -> str:
    words = name.split()
    if not words:
        return ""
    if len(words) == 1:
        return words[0][:2].upper()
    return (words[0][0] + words[-1][0]).upper()


@dataclass(frozen=True)
class Staff:
    """A staff member from the external staff directory.

    Attributes:
        id: Unique identifier for the staff member.
        name: Display name.
        initials: Short initials for compact displays.
        avatar: Optional avatar URL.
        roles: Roles the staff member can take.
    """

    id: str
    name: str
    initials: str = ""
    avatar: Optional[str] = None
    roles: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self):
        if not self.initials:
            object.__setattr__(self, "initials", _derive_initials(self.name))
        if not isinstance(self.roles, frozenset):
            object.__setattr__(self, "roles", frozenset(self.roles))


@dataclass(frozen=True)
class StaffAssignment:
    """A single staff member's presence record within one cell.

    Attributes:
        id: Unique per assignment instance, not per staff member.
        staff_id: ID of the assigned staff member.
        staff_name: Name at the time of assignment.
        staff_initials: Initials at the time of assignment.
        role: Role label for this particular shift.
        status: Lifecycle status.
        staff_avatar: Optional avatar URL.
    """

    id: str
    staff_id: str
    staff_name: str
    staff_initials: str
    role: str = "Staff"
    status: AssignmentStatus = AssignmentStatus.REGISTERED
    staff_avatar: Optional[str] = None

    @classmethod
    def for_staff(cls, assignment_id: str, staff: Staff, role: str) -> "StaffAssignment":
        """Create a registered assignment for a staff member."""
        return cls(
            id=assignment_id,
            staff_id=staff.id,
            staff_name=staff.name,
            staff_initials=staff.initials,
            role=role,
            status=AssignmentStatus.REGISTERED,
            staff_avatar=staff.avatar,
        )

    @property
    def is_active(self) -> bool:
        """Check if the assignment counts towards headcount."""
        return self.status.is_active

    def with_status(self, status: AssignmentStatus) -> "StaffAssignment":
        """Return a copy with a new status.

        Raises:
            InvalidTransitionError: If the transition is not allowed.
        """
        if status is self.status:
            return self
        if status not in _TRANSITIONS[self.status]:
            raise InvalidTransitionError(self.id, self.status.value, status.value)
        return replace(self, status=status)


@dataclass(frozen=True)
class ScheduleCell:
    """One (date, time slot) cell of the weekly grid.

    Attributes:
        schedule_date: Calendar day in the business's local calendar.
        time_slot_id: ID of the time slot row.
        assignments: Assignments in insertion (display) order.
    """

    schedule_date: date
    time_slot_id: str
    assignments: tuple[StaffAssignment, ...] = ()

    def __post_init__(self):
        if not isinstance(self.assignments, tuple):
            object.__setattr__(self, "assignments", tuple(self.assignments))

    @property
    def key(self) -> CellKey:
        """Composite identity of the cell."""
        return (self.schedule_date, self.time_slot_id)

    @property
    def active_assignments(self) -> list[StaffAssignment]:
        """Assignments that are not cancelled, i.e. who is working."""
        return [a for a in self.assignments if a.is_active]

    @property
    def active_count(self) -> int:
        """Headcount of non-cancelled assignments."""
        return sum(1 for a in self.assignments if a.is_active)

    @property
    def is_empty(self) -> bool:
        """True when nobody is actively assigned."""
        return self.active_count == 0

    def has_assignment(self, assignment_id: str) -> bool:
        """Check if the cell holds an assignment id."""
        return any(a.id == assignment_id for a in self.assignments)

    def with_assignments(self, assignments) -> "ScheduleCell":
        """Return a copy holding the given assignments."""
        return replace(self, assignments=tuple(assignments))


@dataclass(frozen=True)
class WeekSchedule:
    """A week window, its slot catalog snapshot and its cells.

    Cells are kept ordered by (date, slot id). Construction checks that
    every cell lies inside the window; slot membership is checked by the
    builder, since a later catalog change may leave orphaned cells behind.

    Attributes:
        week_start: Monday of the week.
        week_end: Sunday of the week (inclusive).
        time_slots: Catalog snapshot, sorted by start time.
        cells: Recorded cells for the window.
    """

    week_start: date
    week_end: date
    time_slots: tuple[TimeSlot, ...] = ()
    cells: tuple[ScheduleCell, ...] = ()

    def __post_init__(self):
        if self.week_end != self.week_start + timedelta(days=6):
            raise ValidationError(
                ValidationErrorType.DATE_OUTSIDE_WEEK,
                f"Week {self.week_start} must end on {self.week_start + timedelta(days=6)}",
                field="week_end",
            )
        object.__setattr__(
            self, "time_slots", tuple(sorted(self.time_slots, key=lambda s: s.sort_key))
        )
        object.__setattr__(
            self, "cells", tuple(sorted(self.cells, key=lambda c: c.key))
        )
        for cell in self.cells:
            if not self.contains_date(cell.schedule_date):
                raise ValidationError(
                    ValidationErrorType.DATE_OUTSIDE_WEEK,
                    f"Cell date {cell.schedule_date} is outside week "
                    f"{self.week_start}..{self.week_end}",
                    field="cells",
                )

    @property
    def schedule_dates(self) -> list[date]:
        """All seven dates of the week."""
        return [self.week_start + timedelta(days=i) for i in range(7)]

    @property
    def slot_ids(self) -> set[str]:
        """IDs of the slots in the catalog snapshot."""
        return {slot.id for slot in self.time_slots}

    def contains_date(self, d: date) -> bool:
        """Check if a date falls within the week."""
        return self.week_start <= d <= self.week_end

    def get_slot(self, slot_id: str) -> Optional[TimeSlot]:
        """Get a slot of the snapshot by id."""
        for slot in self.time_slots:
            if slot.id == slot_id:
                return slot
        return None

    def find_cell(self, d: date, slot_id: str) -> Optional[ScheduleCell]:
        """Get the recorded cell, or None when nothing was recorded."""
        for cell in self.cells:
            if cell.schedule_date == d and cell.time_slot_id == slot_id:
                return cell
        return None

    def get_cell(self, d: date, slot_id: str) -> ScheduleCell:
        """Get a cell, returning an empty one if none was recorded."""
        cell = self.find_cell(d, slot_id)
        if cell is None:
            return ScheduleCell(schedule_date=d, time_slot_id=slot_id)
        return cell

    def iter_assignments(self) -> Iterator[tuple[ScheduleCell, StaffAssignment]]:
        """Iterate over every assignment together with its cell."""
        for cell in self.cells:
            for assignment in cell.assignments:
                yield cell, assignment

    def find_assignment(
        self, assignment_id: str
    ) -> Optional[tuple[ScheduleCell, StaffAssignment]]:
        """Locate an assignment by id."""
        for cell, assignment in self.iter_assignments():
            if assignment.id == assignment_id:
                return cell, assignment
        return None

    def orphaned_cells(self) -> list[ScheduleCell]:
        """Cells whose slot is no longer in the catalog snapshot."""
        known = self.slot_ids
        return [c for c in self.cells if c.time_slot_id not in known]

    def visible_cells(self) -> list[ScheduleCell]:
        """Cells that belong to a row in the catalog snapshot."""
        known = self.slot_ids
        return [c for c in self.cells if c.time_slot_id in known]

    def total_active(self) -> int:
        """Total headcount across all visible cells."""
        return sum(c.active_count for c in self.visible_cells())

    def with_cell(self, cell: ScheduleCell) -> "WeekSchedule":
        """Return a copy with the given cell inserted or replaced."""
        others = [c for c in self.cells if c.key != cell.key]
        return replace(self, cells=tuple(others) + (cell,))

    def with_time_slots(self, slots) -> "WeekSchedule":
        """Return a copy with a new catalog snapshot and the same cells."""
        return replace(self, time_slots=tuple(slots))

    def get_weekly_summary(self) -> dict:
        """Get summary statistics for the week."""
        headcount_by_day = {
            d: sum(
                c.active_count
                for c in self.visible_cells()
                if c.schedule_date == d
            )
            for d in self.schedule_dates
        }
        staff_ids = {
            a.staff_id
            for c in self.visible_cells()
            for a in c.active_assignments
        }
        return {
            "total_active": sum(headcount_by_day.values()),
            "staff_scheduled": len(staff_ids),
            "headcount_by_day": headcount_by_day,
            "orphaned_cells": len(self.orphaned_cells()),
        }
