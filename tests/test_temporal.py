"""Tests for past/current/future resolution."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from shiftgrid.domain.models import TimeSlot, TimeStatus
from shiftgrid.errors import ValidationError, ValidationErrorType
from shiftgrid.scheduling.catalog import TimeSlotCatalog
from shiftgrid.scheduling.temporal import BusinessClock, resolve_status, slot_bounds
from shiftgrid.scheduling.week import build_week

TZ = ZoneInfo("Asia/Ho_Chi_Minh")


@pytest.fixture
def morning_slot():
    return TimeSlot.from_strings("slot2", "09:00", "11:00")


@pytest.fixture
def overnight_slot():
    return TimeSlot.from_strings("late", "22:00", "02:00")


@pytest.fixture
def tuesday():
    return date(2024, 1, 16)


class TestSlotBounds:
    """Tests for absolute slot instances."""

    def test_same_day_slot(self, tuesday, morning_slot):
        start, end = slot_bounds(tuesday, morning_slot, TZ)

        assert start == datetime(2024, 1, 16, 9, 0, tzinfo=TZ)
        assert end == datetime(2024, 1, 16, 11, 0, tzinfo=TZ)

    def test_overnight_end_moves_to_next_day(self, tuesday, overnight_slot):
        start, end = slot_bounds(tuesday, overnight_slot, TZ)

        assert start == datetime(2024, 1, 16, 22, 0, tzinfo=TZ)
        assert end == datetime(2024, 1, 17, 2, 0, tzinfo=TZ)


class TestResolveStatus:
    """Tests for resolve_status."""

    def test_before_start_is_future(self, tuesday, morning_slot):
        now = datetime(2024, 1, 16, 8, 59, tzinfo=TZ)
        assert resolve_status(tuesday, morning_slot, now, TZ) == TimeStatus.FUTURE

    def test_inside_is_current(self, tuesday, morning_slot):
        now = datetime(2024, 1, 16, 10, 0, tzinfo=TZ)
        assert resolve_status(tuesday, morning_slot, now, TZ) == TimeStatus.CURRENT

    def test_after_end_is_past(self, tuesday, morning_slot):
        now = datetime(2024, 1, 16, 11, 1, tzinfo=TZ)
        assert resolve_status(tuesday, morning_slot, now, TZ) == TimeStatus.PAST

    def test_boundaries_are_current(self, tuesday, morning_slot):
        at_start = datetime(2024, 1, 16, 9, 0, tzinfo=TZ)
        at_end = datetime(2024, 1, 16, 11, 0, tzinfo=TZ)

        assert resolve_status(tuesday, morning_slot, at_start, TZ) == TimeStatus.CURRENT
        assert resolve_status(tuesday, morning_slot, at_end, TZ) == TimeStatus.CURRENT

    def test_other_days(self, morning_slot):
        now = datetime(2024, 1, 16, 10, 0, tzinfo=TZ)

        assert resolve_status(date(2024, 1, 15), morning_slot, now, TZ) == TimeStatus.PAST
        assert resolve_status(date(2024, 1, 17), morning_slot, now, TZ) == TimeStatus.FUTURE

    def test_overnight_before_midnight(self, tuesday, overnight_slot):
        now = datetime(2024, 1, 16, 23, 30, tzinfo=TZ)
        assert resolve_status(tuesday, overnight_slot, now, TZ) == TimeStatus.CURRENT

    def test_overnight_after_midnight(self, tuesday, overnight_slot):
        now = datetime(2024, 1, 17, 1, 30, tzinfo=TZ)
        assert resolve_status(tuesday, overnight_slot, now, TZ) == TimeStatus.CURRENT

    def test_overnight_after_end(self, tuesday, overnight_slot):
        now = datetime(2024, 1, 17, 3, 0, tzinfo=TZ)
        assert resolve_status(tuesday, overnight_slot, now, TZ) == TimeStatus.PAST

    def test_overnight_before_start(self, tuesday, overnight_slot):
        now = datetime(2024, 1, 16, 21, 0, tzinfo=TZ)
        assert resolve_status(tuesday, overnight_slot, now, TZ) == TimeStatus.FUTURE

    def test_overnight_next_cell_not_started(self, overnight_slot):
        # Wednesday's instance starts Wednesday 22:00.
        now = datetime(2024, 1, 17, 1, 30, tzinfo=TZ)
        assert resolve_status(date(2024, 1, 17), overnight_slot, now, TZ) == TimeStatus.FUTURE

    def test_naive_now_is_business_time(self, tuesday, morning_slot):
        now = datetime(2024, 1, 16, 10, 0)
        assert resolve_status(tuesday, morning_slot, now, TZ) == TimeStatus.CURRENT

    def test_aware_now_in_other_zone(self, tuesday, morning_slot):
        # 03:00 UTC is 10:00 in Ho Chi Minh City (UTC+7).
        now = datetime(2024, 1, 16, 3, 0, tzinfo=timezone.utc)
        assert resolve_status(tuesday, morning_slot, now, TZ) == TimeStatus.CURRENT

    def test_slot_in_spring_forward_gap_stays_on_its_day(self):
        new_york = ZoneInfo("America/New_York")
        slot = TimeSlot.from_strings("s", "02:30", "03:00")
        day = date(2024, 3, 10)

        noon = datetime(2024, 3, 10, 12, 0, tzinfo=new_york)
        early = datetime(2024, 3, 10, 1, 0, tzinfo=new_york)
        _, end = slot_bounds(day, slot, new_york)

        assert end.date() == day
        assert resolve_status(day, slot, noon, new_york) == TimeStatus.PAST
        assert resolve_status(day, slot, early, new_york) == TimeStatus.FUTURE

    def test_overnight_slot_across_fall_back(self):
        new_york = ZoneInfo("America/New_York")
        slot = TimeSlot.from_strings("late", "22:00", "02:00")
        day = date(2024, 11, 2)

        _, end = slot_bounds(day, slot, new_york)

        assert end.date() == date(2024, 11, 3)
        assert resolve_status(
            day, slot, datetime(2024, 11, 3, 1, 30, tzinfo=new_york), new_york
        ) == TimeStatus.CURRENT

    def test_aware_now_crossing_date_line(self, morning_slot):
        # Monday 22:00 UTC is already Tuesday 05:00 in business time.
        now = datetime(2024, 1, 15, 22, 0, tzinfo=timezone.utc)

        assert resolve_status(date(2024, 1, 16), morning_slot, now, TZ) == TimeStatus.FUTURE
        assert resolve_status(date(2024, 1, 15), morning_slot, now, TZ) == TimeStatus.PAST


class TestBusinessClock:
    """Tests for BusinessClock."""

    @pytest.fixture
    def clock(self):
        return BusinessClock("Asia/Ho_Chi_Minh")

    @pytest.fixture
    def week(self):
        return build_week(date(2024, 1, 15), TimeSlotCatalog.default())

    def test_unknown_timezone_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            BusinessClock("Mars/Olympus_Mons")
        assert exc_info.value.error_type == ValidationErrorType.UNKNOWN_TIMEZONE

    def test_now_is_aware(self, clock):
        now = clock.now()
        assert now.tzinfo is not None
        assert clock.today() == now.date()

    def test_localize(self, clock):
        naive = datetime(2024, 1, 16, 10, 0)
        assert clock.localize(naive) == datetime(2024, 1, 16, 10, 0, tzinfo=TZ)

        utc = datetime(2024, 1, 16, 3, 0, tzinfo=timezone.utc)
        assert clock.localize(utc).hour == 10

    def test_status_grid_covers_every_cell(self, clock, week):
        now = datetime(2024, 1, 16, 10, 0, tzinfo=TZ)
        grid = clock.status_grid(week, now)

        assert len(grid) == 7 * 7
        assert grid[(date(2024, 1, 16), "slot2")] == TimeStatus.CURRENT
        assert grid[(date(2024, 1, 16), "slot1")] == TimeStatus.PAST
        assert grid[(date(2024, 1, 16), "slot3")] == TimeStatus.FUTURE
        assert grid[(date(2024, 1, 15), "slot7")] == TimeStatus.PAST
        assert grid[(date(2024, 1, 21), "slot1")] == TimeStatus.FUTURE

    def test_current_cells(self, clock, week):
        now = datetime(2024, 1, 16, 10, 0, tzinfo=TZ)
        assert clock.current_cells(week, now) == [(date(2024, 1, 16), "slot2")]

    def test_current_cells_at_shared_boundary(self, clock, week):
        now = datetime(2024, 1, 16, 11, 0, tzinfo=TZ)
        assert set(clock.current_cells(week, now)) == {
            (date(2024, 1, 16), "slot2"),
            (date(2024, 1, 16), "slot3"),
        }

    def test_resolve_reads_clock_when_now_missing(self, clock, morning_slot):
        assert clock.resolve(date(2000, 1, 3), morning_slot) == TimeStatus.PAST
        assert clock.resolve(date(2999, 1, 3), morning_slot) == TimeStatus.FUTURE
