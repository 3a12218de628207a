"""Domain models and business rules for scheduling."""

from shiftgrid.domain.models import (
    AssignmentStatus,
    ScheduleCell,
    Staff,
    StaffAssignment,
    TimeSlot,
    TimeStatus,
    WeekSchedule,
    format_time,
    parse_time,
)
from shiftgrid.domain.policies import (
    AllowDoubleBookingPolicy,
    BookingPolicy,
    InMemoryStaffDirectory,
    SingleBookingPolicy,
    StaffDirectory,
)

__all__ = [
    # Models
    "AssignmentStatus",
    "ScheduleCell",
    "Staff",
    "StaffAssignment",
    "TimeSlot",
    "TimeStatus",
    "WeekSchedule",
    "format_time",
    "parse_time",
    # Policies
    "AllowDoubleBookingPolicy",
    "BookingPolicy",
    "InMemoryStaffDirectory",
    "SingleBookingPolicy",
    "StaffDirectory",
]
