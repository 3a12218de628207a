"""Week schedule aggregate.

Builds a Monday-anchored WeekSchedule from the slot catalog and a cell
source, and provides the small helpers a week navigator needs.
"""

import logging
from dataclasses import replace
from datetime import date, datetime, timedelta, tzinfo
from typing import Iterable, Optional, Union

from shiftgrid.domain.models import (
    AssignmentStatus,
    ScheduleCell,
    TimeSlot,
    WeekSchedule,
)
from shiftgrid.errors import OrphanedReferenceWarning
from shiftgrid.scheduling.assignments import IdFactory, new_assignment_id
from shiftgrid.scheduling.catalog import TimeSlotCatalog
from shiftgrid.scheduling.cell_store import ScheduleCellStore

logger = logging.getLogger(__name__)

CellSource = Union[ScheduleCellStore, Iterable[ScheduleCell]]
SlotSource = Union[TimeSlotCatalog, Iterable[TimeSlot]]


def normalize_week_start(day: Union[date, datetime], tz: Optional[tzinfo] = None) -> date:
    """Monday of the week containing ``day``.

    An aware datetime is converted to ``tz`` first when one is given;
    naive datetimes are taken as local already.
    """
    if isinstance(day, datetime):
        if tz is not None and day.tzinfo is not None:
            day = day.astimezone(tz)
        day = day.date()
    return day - timedelta(days=day.weekday())


def week_range(day: date) -> tuple[date, date]:
    """(Monday, Sunday) of the week containing ``day``."""
    start = normalize_week_start(day)
    return start, start + timedelta(days=6)


def next_week(week_start: date) -> date:
    """Monday of the following week."""
    return normalize_week_start(week_start) + timedelta(days=7)


def previous_week(week_start: date) -> date:
    """Monday of the preceding week."""
    return normalize_week_start(week_start) - timedelta(days=7)


def is_current_week(week_start: date, today: date) -> bool:
    """Check if ``today`` falls in the week starting at ``week_start``."""
    return normalize_week_start(week_start) == normalize_week_start(today)


def _slots_of(source: SlotSource) -> list[TimeSlot]:
    if isinstance(source, TimeSlotCatalog):
        return source.list()
    return list(source)


def _cells_of(source: CellSource, start: date, end: date) -> list[ScheduleCell]:
    if isinstance(source, ScheduleCellStore):
        return source.cells_between(start, end)
    return [c for c in source if start <= c.schedule_date <= end]


def build_week(
    week_start: Union[date, datetime],
    catalog: SlotSource,
    cell_source: CellSource = (),
) -> WeekSchedule:
    """Build the snapshot for one week.

    ``week_start`` is normalized to its Monday. Only cells dated within the
    week are pulled. Cells whose slot is missing from the catalog are left
    where they are in the source and kept out of the snapshot, so their row
    is simply not rendered.
    """
    start = normalize_week_start(week_start)
    end = start + timedelta(days=6)
    slots = _slots_of(catalog)
    known = {slot.id for slot in slots}

    cells = []
    for cell in _cells_of(cell_source, start, end):
        if cell.time_slot_id in known:
            cells.append(cell)
            continue
        logger.warning(
            "%s: cell %s/%s references unknown time slot, %d assignment(s) retained",
            OrphanedReferenceWarning.__name__,
            cell.schedule_date,
            cell.time_slot_id,
            len(cell.assignments),
        )

    return WeekSchedule(
        week_start=start,
        week_end=end,
        time_slots=tuple(slots),
        cells=tuple(cells),
    )


def with_updated_slots(schedule: WeekSchedule, catalog: SlotSource) -> WeekSchedule:
    """Swap the catalog snapshot, leaving cells untouched.

    Cells of a removed slot stay in the snapshot and show up in
    :meth:`WeekSchedule.orphaned_cells`; rows are re-derived from the new
    catalog on the next render.
    """
    updated = schedule.with_time_slots(_slots_of(catalog))
    orphans = updated.orphaned_cells()
    if orphans:
        logger.warning(
            "%s: %d cell(s) in week %s reference removed time slots",
            OrphanedReferenceWarning.__name__,
            len(orphans),
            updated.week_start,
        )
    return updated


def copy_week(
    source: WeekSchedule,
    target_week_start: date,
    id_factory: Optional[IdFactory] = None,
) -> list[ScheduleCell]:
    """Copy a week's active assignments onto another week.

    Each active assignment is recreated on the same weekday and slot of the
    target week with a fresh id and registered status. Cancelled
    assignments and orphaned cells are not copied.

    Returns:
        The cells for the target week, ready to be stored.
    """
    id_factory = id_factory or new_assignment_id
    offset = normalize_week_start(target_week_start) - source.week_start

    copied = []
    for cell in source.visible_cells():
        assignments = [
            replace(a, id=id_factory(), status=AssignmentStatus.REGISTERED)
            for a in cell.active_assignments
        ]
        if assignments:
            copied.append(
                ScheduleCell(
                    schedule_date=cell.schedule_date + offset,
                    time_slot_id=cell.time_slot_id,
                    assignments=tuple(assignments),
                )
            )
    logger.debug(
        "Copied %d cell(s) from week %s to %s",
        len(copied),
        source.week_start,
        normalize_week_start(target_week_start),
    )
    return copied
