"""Plain-text output for a week roster.

This module renders a WeekSchedule as a fixed-width grid:
- One row per visible time slot, one column per day
- Active headcount and initials per cell, with the cell's time status
- A roster listing and a report of orphaned cells
"""

from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from shiftgrid.domain.models import TimeStatus, WeekSchedule
from shiftgrid.scheduling.temporal import BusinessClock

STATUS_MARKERS = {
    TimeStatus.PAST: "-",
    TimeStatus.CURRENT: "*",
    TimeStatus.FUTURE: " ",
}


class GridTextGenerator:
    """Generates a text grid of a week schedule.

    Example:
        >>> generator = GridTextGenerator(BusinessClock("Asia/Ho_Chi_Minh"))
        >>> print(generator.generate_to_string(week_schedule))
    """

    def __init__(self, clock: Optional[BusinessClock] = None, column_width: int = 16):
        self.clock = clock or BusinessClock()
        self.column_width = column_width

    def generate(
        self,
        schedule: WeekSchedule,
        output_path: Union[str, Path],
        now: Optional[datetime] = None,
    ) -> str:
        """Generate the grid and save it to a file.

        Returns:
            The generated text content.
        """
        content = self._generate_content(schedule, now)
        Path(output_path).write_text(content)
        return content

    def generate_to_string(
        self,
        schedule: WeekSchedule,
        now: Optional[datetime] = None,
    ) -> str:
        """Generate the grid and return it as a string."""
        return self._generate_content(schedule, now)

    def _generate_content(self, schedule: WeekSchedule, now: Optional[datetime]) -> str:
        now = self.clock.localize(now) if now is not None else self.clock.now()
        statuses = self.clock.status_grid(schedule, now)
        width = self.column_width
        label_width = 14
        total_width = label_width + 7 * (width + 1)

        lines = []
        lines.append("=" * total_width)
        lines.append(f"WEEK SCHEDULE - {schedule.week_start} to {schedule.week_end}")
        lines.append(f"As of {now.strftime('%Y-%m-%d %H:%M')} ({self.clock.timezone_name})")
        lines.append("=" * total_width)

        header = f"{'Slot':<{label_width}}"
        for d in schedule.schedule_dates:
            header += " " + f"{d.strftime('%a %d/%m'):^{width}}"
        lines.append(header)
        lines.append("-" * total_width)

        for slot in schedule.time_slots:
            row = f"{slot.display_label[:label_width]:<{label_width}}"
            for d in schedule.schedule_dates:
                cell = schedule.get_cell(d, slot.id)
                marker = STATUS_MARKERS[statuses[(d, slot.id)]]
                if cell.is_empty:
                    text = f"{marker} ."
                else:
                    initials = ",".join(a.staff_initials for a in cell.active_assignments)
                    text = f"{marker}{cell.active_count} {initials}"
                row += " " + f"{text[:width]:<{width}}"
            lines.append(row)

        lines.append("-" * total_width)
        lines.append("Legend: * current   - past   . nobody assigned")
        lines.append("")

        # Roster
        lines.append("ROSTER")
        lines.append("-" * total_width)
        summary = schedule.get_weekly_summary()
        lines.append(f"Total active assignments: {summary['total_active']}")
        lines.append(f"Staff scheduled: {summary['staff_scheduled']}")
        for cell in schedule.visible_cells():
            slot = schedule.get_slot(cell.time_slot_id)
            for assignment in cell.assignments:
                lines.append(
                    f"  {cell.schedule_date} {slot.display_label:<12} "
                    f"{assignment.staff_name:<20} {assignment.role:<10} "
                    f"{assignment.status.value}"
                )

        orphans = schedule.orphaned_cells()
        if orphans:
            lines.append("")
            lines.append("ORPHANED CELLS (time slot no longer in catalog)")
            lines.append("-" * total_width)
            for cell in orphans:
                lines.append(
                    f"  {cell.schedule_date} {cell.time_slot_id}: "
                    f"{len(cell.assignments)} assignment(s) retained"
                )

        lines.append("")
        return "\n".join(lines)
