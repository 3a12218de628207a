"""Scheduling engine for the weekly staff roster."""

from shiftgrid.scheduling.assignments import (
    add_assignment,
    available_staff,
    cancel_assignment,
    confirm_assignment,
    count_active,
    get_cell,
    remove_assignment,
    set_assignment_status,
)
from shiftgrid.scheduling.catalog import TimeSlotCatalog
from shiftgrid.scheduling.cell_store import ScheduleCellStore
from shiftgrid.scheduling.service import ScheduleService
from shiftgrid.scheduling.temporal import BusinessClock, resolve_status, slot_bounds
from shiftgrid.scheduling.week import (
    build_week,
    copy_week,
    is_current_week,
    next_week,
    normalize_week_start,
    previous_week,
    week_range,
    with_updated_slots,
)

__all__ = [
    # Catalog and storage
    "TimeSlotCatalog",
    "ScheduleCellStore",
    # Temporal status
    "BusinessClock",
    "resolve_status",
    "slot_bounds",
    # Assignment manager
    "add_assignment",
    "available_staff",
    "cancel_assignment",
    "confirm_assignment",
    "count_active",
    "get_cell",
    "remove_assignment",
    "set_assignment_status",
    # Week aggregate
    "build_week",
    "copy_week",
    "is_current_week",
    "next_week",
    "normalize_week_start",
    "previous_week",
    "week_range",
    "with_updated_slots",
    # Facade
    "ScheduleService",
]
