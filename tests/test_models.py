"""Tests for domain models."""

from datetime import date, time, timedelta

import pytest

from shiftgrid.domain.models import (
    AssignmentStatus,
    ScheduleCell,
    Staff,
    StaffAssignment,
    TimeSlot,
    WeekSchedule,
    parse_time,
)
from shiftgrid.errors import (
    InvalidTransitionError,
    ValidationError,
    ValidationErrorType,
)


def make_assignment(
    assignment_id: str,
    staff_id: str = "staff1",
    status: AssignmentStatus = AssignmentStatus.REGISTERED,
) -> StaffAssignment:
    """Helper to create test assignments."""
    return StaffAssignment(
        id=assignment_id,
        staff_id=staff_id,
        staff_name=f"Staff {staff_id}",
        staff_initials="ST",
        role="Staff",
        status=status,
    )


class TestParseTime:
    """Tests for HH:MM parsing."""

    def test_parses_valid_times(self):
        assert parse_time("07:00") == time(7, 0)
        assert parse_time("7:05") == time(7, 5)
        assert parse_time(" 23:59 ") == time(23, 59)

    def test_passes_through_time_objects(self):
        assert parse_time(time(9, 30, 15)) == time(9, 30)

    @pytest.mark.parametrize("value", ["24:00", "12:60", "9am", "", "0900", "ab:cd"])
    def test_rejects_malformed(self, value):
        with pytest.raises(ValidationError) as exc_info:
            parse_time(value)
        assert exc_info.value.error_type == ValidationErrorType.MALFORMED_TIME

    def test_rejects_non_string(self):
        with pytest.raises(ValidationError):
            parse_time(900)


class TestTimeSlot:
    """Tests for TimeSlot."""

    def test_regular_slot(self):
        slot = TimeSlot.from_strings("slot1", "07:00", "09:00")

        assert not slot.is_overnight
        assert slot.duration_minutes == 120
        assert slot.display_label == "7h - 9h"

    def test_overnight_slot(self):
        slot = TimeSlot.from_strings("late", "22:00", "02:00")

        assert slot.is_overnight
        assert slot.duration_minutes == 240

    def test_label_with_minutes(self):
        slot = TimeSlot.from_strings("s", "07:30", "09:00")
        assert slot.display_label == "07:30 - 9h"

    def test_explicit_label_wins(self):
        slot = TimeSlot.from_strings("s", "07:00", "09:00", label="Breakfast")
        assert slot.display_label == "Breakfast"

    def test_equal_start_and_end_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            TimeSlot(id="bad", start_time=time(9, 0), end_time=time(9, 0))
        assert exc_info.value.error_type == ValidationErrorType.EMPTY_SLOT

    def test_overlaps(self):
        morning = TimeSlot.from_strings("a", "07:00", "09:00")
        next_slot = TimeSlot.from_strings("b", "09:00", "11:00")
        inside = TimeSlot.from_strings("c", "08:00", "08:30")
        late = TimeSlot.from_strings("d", "22:00", "02:00")
        early = TimeSlot.from_strings("e", "01:00", "03:00")

        assert not morning.overlaps(next_slot)
        assert morning.overlaps(inside)
        assert late.overlaps(early)
        assert not late.overlaps(morning)


class TestStaff:
    """Tests for Staff reference data."""

    def test_initials_derived_from_name(self):
        assert Staff(id="s1", name="Jon Snow").initials == "JS"
        assert Staff(id="s2", name="Danny Targeryen").initials == "DT"
        assert Staff(id="s3", name="Cher").initials == "CH"

    def test_explicit_initials_kept(self):
        assert Staff(id="s1", name="Nicole R", initials="NR").initials == "NR"

    def test_roles_frozen(self):
        staff = Staff(id="s1", name="Han Solo", roles=["Staff", "Cashier"])
        assert staff.roles == frozenset({"Staff", "Cashier"})


class TestStaffAssignment:
    """Tests for the assignment status state machine."""

    def test_for_staff_is_registered(self):
        staff = Staff(id="staff5", name="Jon Snow", avatar="https://example.com/js.png")
        assignment = StaffAssignment.for_staff("a1", staff, "Cook")

        assert assignment.status == AssignmentStatus.REGISTERED
        assert assignment.staff_name == "Jon Snow"
        assert assignment.staff_initials == "JS"
        assert assignment.staff_avatar == "https://example.com/js.png"
        assert assignment.role == "Cook"

    def test_registered_to_confirmed_to_cancelled(self):
        assignment = make_assignment("a1")

        confirmed = assignment.with_status(AssignmentStatus.CONFIRMED)
        cancelled = confirmed.with_status(AssignmentStatus.CANCELLED)

        assert confirmed.status == AssignmentStatus.CONFIRMED
        assert cancelled.status == AssignmentStatus.CANCELLED
        assert assignment.status == AssignmentStatus.REGISTERED

    def test_registered_can_be_cancelled(self):
        cancelled = make_assignment("a1").with_status(AssignmentStatus.CANCELLED)
        assert not cancelled.is_active

    def test_cancelled_is_terminal(self):
        cancelled = make_assignment("a1", status=AssignmentStatus.CANCELLED)

        with pytest.raises(InvalidTransitionError):
            cancelled.with_status(AssignmentStatus.REGISTERED)
        with pytest.raises(InvalidTransitionError):
            cancelled.with_status(AssignmentStatus.CONFIRMED)

    def test_confirmed_cannot_go_back(self):
        confirmed = make_assignment("a1", status=AssignmentStatus.CONFIRMED)
        with pytest.raises(InvalidTransitionError):
            confirmed.with_status(AssignmentStatus.REGISTERED)

    def test_same_status_is_noop(self):
        assignment = make_assignment("a1")
        assert assignment.with_status(AssignmentStatus.REGISTERED) is assignment


class TestScheduleCell:
    """Tests for ScheduleCell headcount."""

    def test_active_count_excludes_cancelled(self):
        cell = ScheduleCell(
            schedule_date=date(2024, 1, 15),
            time_slot_id="slot2",
            assignments=(
                make_assignment("a1"),
                make_assignment("a2", status=AssignmentStatus.CONFIRMED),
                make_assignment("a3", status=AssignmentStatus.CANCELLED),
            ),
        )

        assert cell.active_count == 2
        assert [a.id for a in cell.active_assignments] == ["a1", "a2"]
        assert not cell.is_empty

    def test_only_cancelled_is_empty(self):
        cell = ScheduleCell(
            schedule_date=date(2024, 1, 15),
            time_slot_id="slot2",
            assignments=[make_assignment("a1", status=AssignmentStatus.CANCELLED)],
        )

        assert cell.is_empty
        assert isinstance(cell.assignments, tuple)


class TestWeekSchedule:
    """Tests for the WeekSchedule value."""

    @pytest.fixture
    def monday(self):
        return date(2024, 1, 15)

    def test_week_end_must_be_six_days_later(self, monday):
        with pytest.raises(ValidationError):
            WeekSchedule(week_start=monday, week_end=monday + timedelta(days=5))

    def test_cells_must_fall_inside_week(self, monday):
        outside = ScheduleCell(schedule_date=monday + timedelta(days=7), time_slot_id="slot1")
        with pytest.raises(ValidationError) as exc_info:
            WeekSchedule(
                week_start=monday,
                week_end=monday + timedelta(days=6),
                cells=(outside,),
            )
        assert exc_info.value.error_type == ValidationErrorType.DATE_OUTSIDE_WEEK

    def test_get_cell_defaults_to_empty(self, monday):
        week = WeekSchedule(week_start=monday, week_end=monday + timedelta(days=6))
        cell = week.get_cell(monday, "slot1")

        assert cell.assignments == ()
        assert cell.key == (monday, "slot1")
        assert week.find_cell(monday, "slot1") is None

    def test_schedule_dates(self, monday):
        week = WeekSchedule(week_start=monday, week_end=monday + timedelta(days=6))
        assert week.schedule_dates == [monday + timedelta(days=i) for i in range(7)]

    def test_slots_sorted_by_start(self, monday):
        late = TimeSlot.from_strings("late", "22:00", "02:00")
        evening = TimeSlot.from_strings("evening", "19:00", "21:00")
        morning = TimeSlot.from_strings("morning", "07:00", "09:00")

        week = WeekSchedule(
            week_start=monday,
            week_end=monday + timedelta(days=6),
            time_slots=(late, morning, evening),
        )

        assert [s.id for s in week.time_slots] == ["morning", "evening", "late"]

    def test_weekly_summary(self, monday):
        slot = TimeSlot.from_strings("slot1", "07:00", "09:00")
        cells = (
            ScheduleCell(monday, "slot1", (make_assignment("a1", "s1"), make_assignment("a2", "s2"))),
            ScheduleCell(
                monday + timedelta(days=1),
                "slot1",
                (make_assignment("a3", "s1", AssignmentStatus.CANCELLED),),
            ),
            ScheduleCell(monday, "gone", (make_assignment("a4", "s3"),)),
        )
        week = WeekSchedule(
            week_start=monday,
            week_end=monday + timedelta(days=6),
            time_slots=(slot,),
            cells=cells,
        )

        summary = week.get_weekly_summary()

        assert summary["total_active"] == 2
        assert summary["staff_scheduled"] == 2
        assert summary["headcount_by_day"][monday] == 2
        assert summary["orphaned_cells"] == 1
