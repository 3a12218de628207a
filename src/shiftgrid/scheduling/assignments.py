"""Assignment operations on week snapshots.

Every function here is pure: it takes a WeekSchedule and returns a new one,
leaving the input untouched. Hosts keep whichever version they consider
current.
"""

import logging
import uuid
from datetime import date
from typing import Callable, Iterable, Optional

from shiftgrid.domain.models import (
    AssignmentStatus,
    ScheduleCell,
    Staff,
    StaffAssignment,
    WeekSchedule,
)
from shiftgrid.domain.policies import AllowDoubleBookingPolicy, BookingPolicy
from shiftgrid.errors import NotFoundError, ValidationError, ValidationErrorType

logger = logging.getLogger(__name__)

IdFactory = Callable[[], str]


def new_assignment_id() -> str:
    """Generate a unique assignment id."""
    return f"assignment-{uuid.uuid4().hex}"


def get_cell(schedule: WeekSchedule, schedule_date: date, slot_id: str) -> ScheduleCell:
    """Get a cell of the snapshot; a cell never recorded comes back empty."""
    return schedule.get_cell(schedule_date, slot_id)


def count_active(cell: ScheduleCell) -> int:
    """Number of assignments in the cell that are not cancelled."""
    return cell.active_count


def check_coordinates(schedule: WeekSchedule, schedule_date: date, slot_id: str) -> None:
    """Ensure a (date, slot) pair addresses a visible cell of the week.

    Raises:
        ValidationError: If the date is outside the week or the slot is not
            in the snapshot's catalog.
    """
    if not schedule.contains_date(schedule_date):
        raise ValidationError(
            ValidationErrorType.DATE_OUTSIDE_WEEK,
            f"{schedule_date} is outside week {schedule.week_start}..{schedule.week_end}",
            field="date",
        )
    if slot_id not in schedule.slot_ids:
        raise ValidationError(
            ValidationErrorType.UNKNOWN_SLOT,
            f"Time slot {slot_id!r} is not in this week's catalog",
            field="time_slot_id",
        )


def build_assignment(
    staff: Staff,
    role: str = "Staff",
    id_factory: IdFactory = new_assignment_id,
) -> StaffAssignment:
    """Create a registered assignment for a staff member."""
    return StaffAssignment.for_staff(id_factory(), staff, role)


def add_assignment(
    schedule: WeekSchedule,
    schedule_date: date,
    slot_id: str,
    staff: Staff,
    role: str = "Staff",
    assignment: Optional[StaffAssignment] = None,
    policy: Optional[BookingPolicy] = None,
) -> WeekSchedule:
    """Append a registered assignment for ``staff`` to a cell.

    The cell is created if it was not recorded yet. No availability check
    is made here.

    Args:
        schedule: Current snapshot.
        schedule_date: Date of the target cell.
        slot_id: Time slot of the target cell.
        staff: Staff member to add.
        role: Role label for this shift.
        assignment: Prebuilt assignment to append, used when the same record
            must also be written to a store.
        policy: Booking rule; double booking is allowed by default.

    Returns:
        A new snapshot with the assignment appended at the end of the cell.
    """
    check_coordinates(schedule, schedule_date, slot_id)
    cell = schedule.get_cell(schedule_date, slot_id)
    (policy or AllowDoubleBookingPolicy()).check(cell, staff)

    if assignment is None:
        assignment = build_assignment(staff, role)
    updated = cell.with_assignments(cell.assignments + (assignment,))
    logger.debug(
        "Added %s (%s) to %s/%s", staff.name, assignment.id, schedule_date, slot_id
    )
    return schedule.with_cell(updated)


def remove_assignment(schedule: WeekSchedule, assignment_id: str) -> WeekSchedule:
    """Hard-delete an assignment from whichever cell holds it.

    An unknown id is not an error: the input snapshot is returned as is,
    since UI state may lag behind store state.
    """
    found = schedule.find_assignment(assignment_id)
    if found is None:
        logger.debug("Assignment %s not found, nothing removed", assignment_id)
        return schedule
    cell, _ = found
    remaining = [a for a in cell.assignments if a.id != assignment_id]
    logger.debug("Removed %s from %s/%s", assignment_id, cell.schedule_date, cell.time_slot_id)
    return schedule.with_cell(cell.with_assignments(remaining))


def set_assignment_status(
    schedule: WeekSchedule,
    assignment_id: str,
    status: AssignmentStatus,
) -> WeekSchedule:
    """Move an assignment to a new status.

    Raises:
        NotFoundError: If no cell holds the assignment.
        InvalidTransitionError: If the transition is not allowed.
    """
    found = schedule.find_assignment(assignment_id)
    if found is None:
        raise NotFoundError("Assignment", assignment_id)
    cell, current = found
    changed = current.with_status(status)
    if changed is current:
        return schedule
    assignments = [changed if a.id == assignment_id else a for a in cell.assignments]
    return schedule.with_cell(cell.with_assignments(assignments))


def confirm_assignment(schedule: WeekSchedule, assignment_id: str) -> WeekSchedule:
    """registered -> confirmed."""
    return set_assignment_status(schedule, assignment_id, AssignmentStatus.CONFIRMED)


def cancel_assignment(schedule: WeekSchedule, assignment_id: str) -> WeekSchedule:
    """Soft removal; the assignment stays in the cell for audit."""
    return set_assignment_status(schedule, assignment_id, AssignmentStatus.CANCELLED)


def available_staff(cell: ScheduleCell, staff: Iterable[Staff]) -> list[Staff]:
    """Staff who are not actively assigned to the cell yet."""
    assigned = {a.staff_id for a in cell.active_assignments}
    return [s for s in staff if s.id not in assigned]
