"""Temporal status of schedule cells.

A cell is past, current or future depending on where "now" falls relative
to the slot instance on the cell's date, in the fixed business timezone.
Nothing here runs a timer: hosts recompute on their own polling cadence
(see :data:`shiftgrid.config.POLL_INTERVAL_SECONDS`).
"""

from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Optional

from shiftgrid.config import DEFAULT_TIMEZONE, load_timezone
from shiftgrid.domain.models import CellKey, TimeSlot, TimeStatus, WeekSchedule


def slot_bounds(
    cell_date: date,
    slot: TimeSlot,
    tz: tzinfo,
) -> tuple[datetime, datetime]:
    """Absolute start and end of a slot instance on a given date.

    The end moves to the next calendar day when its wall-clock time is
    before the start, which is how overnight slots such as 22:00-02:00 are
    expressed. The day roll never depends on UTC offsets, so a slot that
    touches a DST gap stays on its own day.
    """
    end_date = cell_date + timedelta(days=1) if slot.is_overnight else cell_date
    start = datetime.combine(cell_date, slot.start_time, tzinfo=tz)
    end = datetime.combine(end_date, slot.end_time, tzinfo=tz)
    return start, end


def resolve_status(
    cell_date: date,
    slot: TimeSlot,
    now: datetime,
    tz: tzinfo,
) -> TimeStatus:
    """Classify a slot instance relative to ``now``.

    A naive ``now`` is read as wall-clock time in ``tz``. The boundaries
    themselves count as current.

    Args:
        cell_date: Calendar date of the cell.
        slot: Time slot of the cell's row.
        now: The instant to compare against.
        tz: The business timezone.

    Returns:
        PAST if the slot has ended, FUTURE if it has not started, otherwise
        CURRENT.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=tz)
    start, end = slot_bounds(cell_date, slot, tz)

    instant = now.astimezone(timezone.utc)
    if instant > end.astimezone(timezone.utc):
        return TimeStatus.PAST
    if instant < start.astimezone(timezone.utc):
        return TimeStatus.FUTURE
    return TimeStatus.CURRENT


class BusinessClock:
    """Reads "now" in the business timezone and resolves cell status.

    Example:
        >>> clock = BusinessClock("Asia/Ho_Chi_Minh")
        >>> grid = clock.status_grid(week_schedule)
        >>> grid[(date(2024, 1, 16), "slot2")]
        <TimeStatus.CURRENT: 'current'>
    """

    def __init__(self, timezone_name: str = DEFAULT_TIMEZONE):
        self.timezone_name = timezone_name
        self.tz = load_timezone(timezone_name)

    def now(self) -> datetime:
        """Current instant in the business timezone."""
        return datetime.now(self.tz)

    def today(self) -> date:
        """Current calendar date in the business timezone."""
        return self.now().date()

    def localize(self, moment: datetime) -> datetime:
        """Express a moment in the business timezone.

        Naive values are taken to be business wall-clock time already.
        """
        if moment.tzinfo is None:
            return moment.replace(tzinfo=self.tz)
        return moment.astimezone(self.tz)

    def resolve(
        self,
        cell_date: date,
        slot: TimeSlot,
        now: Optional[datetime] = None,
    ) -> TimeStatus:
        """Resolve one cell's status, reading the clock if ``now`` is None."""
        if now is None:
            now = self.now()
        return resolve_status(cell_date, slot, now, self.tz)

    def status_grid(
        self,
        schedule: WeekSchedule,
        now: Optional[datetime] = None,
    ) -> dict[CellKey, TimeStatus]:
        """Status of every visible cell of a week, from a single reading."""
        if now is None:
            now = self.now()
        return {
            (d, slot.id): resolve_status(d, slot, now, self.tz)
            for slot in schedule.time_slots
            for d in schedule.schedule_dates
        }

    def current_cells(
        self,
        schedule: WeekSchedule,
        now: Optional[datetime] = None,
    ) -> list[CellKey]:
        """Keys of the cells that are live right now."""
        grid = self.status_grid(schedule, now)
        return [key for key, status in grid.items() if status is TimeStatus.CURRENT]
