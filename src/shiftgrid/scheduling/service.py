"""Schedule service.

This module provides the high-level ScheduleService that a presentation
layer talks to. It wires the slot catalog, the cell store, the staff
directory and the business clock together.
"""

import logging
from datetime import date, datetime
from typing import Optional, Union

from shiftgrid.config import SchedulingConfig
from shiftgrid.domain.models import (
    AssignmentStatus,
    ScheduleCell,
    Staff,
    TimeLike,
    TimeSlot,
    TimeStatus,
    WeekSchedule,
)
from shiftgrid.domain.policies import (
    AllowDoubleBookingPolicy,
    BookingPolicy,
    InMemoryStaffDirectory,
    SingleBookingPolicy,
    StaffDirectory,
)
from shiftgrid.errors import ValidationError
from shiftgrid.scheduling import assignments as manager
from shiftgrid.scheduling.catalog import TimeSlotCatalog
from shiftgrid.scheduling.cell_store import ScheduleCellStore
from shiftgrid.scheduling.temporal import BusinessClock
from shiftgrid.scheduling.week import (
    build_week,
    copy_week,
    normalize_week_start,
    with_updated_slots,
)

logger = logging.getLogger(__name__)


class ScheduleService:
    """Entry point for weekly roster operations.

    Mutations are written through to the cell store, one transaction per
    cell, and a new WeekSchedule derived from the caller's snapshot is
    returned. The snapshot passed in is never modified.

    Example:
        >>> service = ScheduleService(staff_directory=directory)
        >>> week = service.get_week_schedule(date(2024, 1, 15))
        >>> week = service.add_staff_to_cell(week, date(2024, 1, 16), "slot2", "staff5")
        >>> service.get_cell(week, date(2024, 1, 16), "slot2").active_count
        1
    """

    def __init__(
        self,
        config: Optional[SchedulingConfig] = None,
        staff_directory: Optional[StaffDirectory] = None,
        catalog: Optional[TimeSlotCatalog] = None,
        store: Optional[ScheduleCellStore] = None,
        clock: Optional[BusinessClock] = None,
        booking_policy: Optional[BookingPolicy] = None,
        id_factory: Optional[manager.IdFactory] = None,
    ):
        """Initialize the service.

        Args:
            config: Settings; the defaults are used when omitted.
            staff_directory: Read-only staff lookup.
            catalog: Slot catalog; built from ``config`` when omitted.
            store: Cell store; starts empty when omitted.
            clock: Business clock; built from ``config.timezone`` when omitted.
            booking_policy: Rule for adding staff; derived from
                ``config.allow_double_booking`` when omitted.
            id_factory: Generator for assignment ids.
        """
        self.config = config or SchedulingConfig()
        self.staff_directory = staff_directory or InMemoryStaffDirectory()
        self.catalog = catalog if catalog is not None else TimeSlotCatalog.default(self.config)
        self.store = store if store is not None else ScheduleCellStore()
        self.clock = clock or BusinessClock(self.config.timezone)
        if booking_policy is None:
            booking_policy = (
                AllowDoubleBookingPolicy()
                if self.config.allow_double_booking
                else SingleBookingPolicy()
            )
        self.booking_policy = booking_policy
        self.id_factory = id_factory or manager.new_assignment_id

    # Time slots

    def list_time_slots(self) -> list[TimeSlot]:
        """Catalog slots, ascending by start time."""
        return self.catalog.list()

    def create_time_slot(
        self,
        start_time: TimeLike,
        end_time: TimeLike,
        label: Optional[str] = None,
    ) -> TimeSlot:
        """Add a slot with a generated id."""
        return self.catalog.create(start_time, end_time, label=label)

    def upsert_time_slot(self, slot: TimeSlot) -> TimeSlot:
        """Insert or replace a slot by id."""
        return self.catalog.upsert(slot)

    def update_time_slot(self, slot_id: str, **fields) -> TimeSlot:
        """Edit a slot; raises NotFoundError for an unknown id."""
        return self.catalog.update(slot_id, **fields)

    def delete_time_slot(self, slot_id: str) -> None:
        """Remove a slot. Its cells stay in the store."""
        self.catalog.remove(slot_id)

    def refresh_slots(self, schedule: WeekSchedule) -> WeekSchedule:
        """Attach the current catalog to an existing snapshot."""
        return with_updated_slots(schedule, self.catalog)

    # Week snapshots

    def get_week_schedule(self, week_start: Union[date, datetime]) -> WeekSchedule:
        """Build the snapshot of the week containing ``week_start``.

        A datetime is first expressed in the business timezone, so the week
        is anchored on the business calendar rather than the caller's zone.
        """
        start = normalize_week_start(week_start, self.clock.tz)
        return build_week(start, self.catalog, self.store)

    def get_cell(self, schedule: WeekSchedule, schedule_date: date, slot_id: str) -> ScheduleCell:
        """Get a cell of a snapshot, empty if nothing was recorded."""
        return manager.get_cell(schedule, schedule_date, slot_id)

    def copy_week(self, source_week: date, target_week: date) -> WeekSchedule:
        """Copy a week's active assignments into another week.

        Copies are appended to whatever the target week already holds. Each
        copy goes through the booking policy; a copy the policy rejects is
        skipped and logged, the rest of the week is still copied.
        """
        source = self.get_week_schedule(source_week)
        for cell in copy_week(source, target_week, self.id_factory):
            for assignment in cell.assignments:
                member = Staff(
                    id=assignment.staff_id,
                    name=assignment.staff_name,
                    initials=assignment.staff_initials,
                )
                try:
                    self.store.append(
                        cell.schedule_date,
                        cell.time_slot_id,
                        assignment,
                        check=lambda stored, member=member: self.booking_policy.check(
                            stored, member
                        ),
                    )
                except ValidationError as exc:
                    logger.warning("Skipped copy of %s: %s", assignment.staff_name, exc)
        return self.get_week_schedule(target_week)

    # Status

    def resolve_status(
        self,
        schedule_date: date,
        slot: Union[TimeSlot, str],
        now: Optional[datetime] = None,
    ) -> TimeStatus:
        """Past, current or future for one cell."""
        if isinstance(slot, str):
            slot = self.catalog.get(slot)
        return self.clock.resolve(schedule_date, slot, now)

    def status_grid(
        self,
        schedule: WeekSchedule,
        now: Optional[datetime] = None,
    ) -> dict[tuple[date, str], TimeStatus]:
        """Status of every visible cell of a snapshot."""
        return self.clock.status_grid(schedule, now)

    # Assignments

    def _resolve_staff(self, staff: Union[Staff, str]) -> Staff:
        if isinstance(staff, Staff):
            return staff
        return self.staff_directory.get_staff(staff)

    def available_staff(self, cell: ScheduleCell) -> list[Staff]:
        """Directory staff not yet actively assigned to ``cell``."""
        return manager.available_staff(cell, self.staff_directory.get_all_staff())

    def add_staff_to_cell(
        self,
        schedule: WeekSchedule,
        schedule_date: date,
        slot_id: str,
        staff: Union[Staff, str],
        role: Optional[str] = None,
    ) -> WeekSchedule:
        """Register a staff member in a cell.

        Args:
            schedule: The caller's current snapshot.
            schedule_date: Date of the cell.
            slot_id: Time slot of the cell.
            staff: A Staff, or a staff id to look up in the directory.
            role: Role label; the configured default when omitted.

        Returns:
            A new snapshot containing the assignment.
        """
        member = self._resolve_staff(staff)
        assignment = manager.build_assignment(
            member, role or self.config.default_role, self.id_factory
        )
        updated = manager.add_assignment(
            schedule,
            schedule_date,
            slot_id,
            member,
            assignment=assignment,
            policy=self.booking_policy,
        )
        self.store.append(
            schedule_date,
            slot_id,
            assignment,
            check=lambda cell: self.booking_policy.check(cell, member),
        )
        logger.info(
            "Assigned %s to %s on %s (%s)",
            member.name,
            slot_id,
            schedule_date,
            assignment.id,
        )
        return updated

    def remove_assignment(self, schedule: WeekSchedule, assignment_id: str) -> WeekSchedule:
        """Hard-delete an assignment; unknown ids are ignored."""
        if self.store.remove_assignment(assignment_id):
            logger.info("Removed assignment %s", assignment_id)
        return manager.remove_assignment(schedule, assignment_id)

    def _transition(
        self,
        schedule: WeekSchedule,
        assignment_id: str,
        status: AssignmentStatus,
    ) -> WeekSchedule:
        updated = manager.set_assignment_status(schedule, assignment_id, status)
        self.store.update_assignment(assignment_id, lambda a: a.with_status(status))
        logger.info("Assignment %s is now %s", assignment_id, status.value)
        return updated

    def confirm_assignment(self, schedule: WeekSchedule, assignment_id: str) -> WeekSchedule:
        """Move an assignment from registered to confirmed."""
        return self._transition(schedule, assignment_id, AssignmentStatus.CONFIRMED)

    def cancel_assignment(self, schedule: WeekSchedule, assignment_id: str) -> WeekSchedule:
        """Cancel an assignment, keeping it for audit."""
        return self._transition(schedule, assignment_id, AssignmentStatus.CANCELLED)
