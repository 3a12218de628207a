"""PDF generation for week roster output.

This module creates printable PDF rosters showing:
- The day x time slot grid with assigned staff per cell
- Cell shading by time status (past, current, future)
- A summary page with daily headcount and orphaned cells
"""

from datetime import datetime
from io import BytesIO
from pathlib import Path
from typing import Optional, Union

from shiftgrid.domain.models import ScheduleCell, TimeStatus, WeekSchedule
from shiftgrid.scheduling.temporal import BusinessClock

# Color definitions (RGB tuples, 0-1 scale)
COLORS = {
    TimeStatus.PAST: (0.9, 0.9, 0.9),  # Gray
    TimeStatus.CURRENT: (1.0, 0.85, 0.6),  # Orange
    TimeStatus.FUTURE: (1.0, 1.0, 1.0),  # White
    "assigned": (0.85, 0.9, 1.0),  # Light blue
    "header": (0.95, 0.95, 0.95),  # Light gray
}


class PDFGenerator:
    """Generates printable PDF week rosters.

    Example:
        >>> generator = PDFGenerator(BusinessClock("Asia/Ho_Chi_Minh"))
        >>> generator.generate(week_schedule, "roster.pdf")
    """

    def __init__(
        self,
        clock: Optional[BusinessClock] = None,
        page_width: float = 792,  # Letter landscape width (11")
        page_height: float = 612,  # Letter landscape height (8.5")
        margin: float = 36,  # 0.5 inch margins
    ):
        self.clock = clock or BusinessClock()
        self.page_width = page_width
        self.page_height = page_height
        self.margin = margin

    def generate(
        self,
        schedule: WeekSchedule,
        output_path: Union[str, Path],
        now: Optional[datetime] = None,
        include_summary: bool = True,
    ) -> None:
        """Generate the PDF roster and save it to a file.

        Args:
            schedule: The week to render.
            output_path: Path to save the PDF.
            now: Instant used for cell status; the clock is read when None.
            include_summary: Whether to include the summary page.
        """
        try:
            from reportlab.lib.pagesizes import landscape, letter
            from reportlab.pdfgen import canvas
        except ImportError:
            raise ImportError(
                "reportlab is required for PDF generation. "
                "Install with: pip install reportlab"
            )

        c = canvas.Canvas(str(output_path), pagesize=landscape(letter))
        self._draw(c, schedule, now, include_summary)
        c.save()

    def generate_to_buffer(
        self,
        schedule: WeekSchedule,
        now: Optional[datetime] = None,
        include_summary: bool = True,
    ) -> BytesIO:
        """Generate the PDF roster and return it as a bytes buffer."""
        try:
            from reportlab.lib.pagesizes import landscape, letter
            from reportlab.pdfgen import canvas
        except ImportError:
            raise ImportError(
                "reportlab is required for PDF generation. "
                "Install with: pip install reportlab"
            )

        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=landscape(letter))
        self._draw(c, schedule, now, include_summary)
        c.save()
        buffer.seek(0)
        return buffer

    def _draw(
        self,
        c,
        schedule: WeekSchedule,
        now: Optional[datetime],
        include_summary: bool,
    ) -> None:
        now = self.clock.localize(now) if now is not None else self.clock.now()
        statuses = self.clock.status_grid(schedule, now)
        self._draw_grid_page(c, schedule, statuses, now)
        if include_summary:
            self._draw_summary_page(c, schedule)

    def _draw_header(self, c, title: str, subtitle: str) -> None:
        """Draw page header."""
        c.setFont("Helvetica-Bold", 16)
        c.drawString(self.margin, self.page_height - self.margin - 20, title)
        c.setFont("Helvetica", 10)
        c.drawString(self.margin, self.page_height - self.margin - 35, subtitle)

    def _draw_grid_page(self, c, schedule: WeekSchedule, statuses: dict, now: datetime) -> None:
        """Draw the day x slot grid."""
        self._draw_header(
            c,
            f"Weekly Schedule - {schedule.week_start.strftime('%B %d')} to "
            f"{schedule.week_end.strftime('%B %d, %Y')}",
            f"Status as of {now.strftime('%Y-%m-%d %H:%M')} ({self.clock.timezone_name})",
        )

        label_width = 80
        header_height = 24
        top = self.page_height - self.margin - 60
        bottom = self.margin + 30
        grid_width = self.page_width - 2 * self.margin - label_width
        col_width = grid_width / 7
        rows = max(len(schedule.time_slots), 1)
        row_height = min(70, (top - header_height - bottom) / rows)

        # Day headers
        x0 = self.margin + label_width
        for i, d in enumerate(schedule.schedule_dates):
            x = x0 + i * col_width
            c.setFillColorRGB(*COLORS["header"])
            c.rect(x, top - header_height, col_width, header_height, fill=1, stroke=1)
            c.setFillColorRGB(0, 0, 0)
            c.setFont("Helvetica-Bold", 9)
            c.drawCentredString(x + col_width / 2, top - 15, d.strftime("%a %d/%m"))

        # Slot rows
        y = top - header_height
        for slot in schedule.time_slots:
            y -= row_height
            c.setFillColorRGB(0, 0, 0)
            c.setFont("Helvetica-Bold", 9)
            c.drawString(self.margin, y + row_height / 2 - 3, slot.display_label[:16])

            for i, d in enumerate(schedule.schedule_dates):
                cell = schedule.get_cell(d, slot.id)
                self._draw_cell(
                    c,
                    cell,
                    statuses[(d, slot.id)],
                    x0 + i * col_width,
                    y,
                    col_width,
                    row_height,
                )

        self._draw_legend(c, self.margin, self.margin + 10)
        c.showPage()

    def _draw_cell(
        self,
        c,
        cell: ScheduleCell,
        status: TimeStatus,
        x: float,
        y: float,
        width: float,
        height: float,
    ) -> None:
        """Draw one cell with its active staff."""
        color = COLORS[status]
        if status is TimeStatus.FUTURE and not cell.is_empty:
            color = COLORS["assigned"]
        c.setFillColorRGB(*color)
        c.setStrokeColorRGB(0.6, 0.6, 0.6)
        c.rect(x, y, width, height, fill=1, stroke=1)

        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica", 7)
        line_y = y + height - 10
        active = cell.active_assignments
        if not active:
            c.drawString(x + 4, line_y, "-")
            return
        c.setFont("Helvetica-Bold", 7)
        c.drawString(x + 4, line_y, f"{len(active)} staff")
        c.setFont("Helvetica", 7)
        for assignment in active:
            line_y -= 9
            if line_y < y + 2:
                break
            c.drawString(x + 4, line_y, assignment.staff_name[:20])

    def _draw_legend(self, c, x: float, y: float) -> None:
        """Draw legend for colors."""
        c.setFont("Helvetica-Bold", 8)
        c.drawString(x, y, "Legend:")

        items = [
            (TimeStatus.PAST, "Past"),
            (TimeStatus.CURRENT, "Current"),
            ("assigned", "Assigned"),
            (TimeStatus.FUTURE, "Open"),
        ]

        c.setFont("Helvetica", 7)
        current_x = x + 45
        for key, label in items:
            c.setFillColorRGB(*COLORS[key])
            c.rect(current_x, y - 2, 12, 10, fill=1, stroke=1)
            c.setFillColorRGB(0, 0, 0)
            c.drawString(current_x + 15, y, label)
            current_x += 70

    def _draw_summary_page(self, c, schedule: WeekSchedule) -> None:
        """Draw summary page with daily headcount."""
        summary = schedule.get_weekly_summary()
        self._draw_header(
            c,
            f"Schedule Summary - week of {schedule.week_start.strftime('%B %d, %Y')}",
            f"Total active assignments: {summary['total_active']}, "
            f"staff scheduled: {summary['staff_scheduled']}",
        )

        y = self.page_height - self.margin - 70
        c.setFont("Helvetica-Bold", 12)
        c.drawString(self.margin, y, "Headcount by Day")
        y -= 18

        c.setFont("Helvetica", 10)
        for d, count in summary["headcount_by_day"].items():
            c.drawString(self.margin + 20, y, f"{d.strftime('%A %d/%m')}: {count}")
            y -= 15

        orphans = schedule.orphaned_cells()
        if orphans:
            y -= 15
            c.setFont("Helvetica-Bold", 12)
            c.drawString(self.margin, y, "Orphaned Cells")
            y -= 18
            c.setFont("Helvetica", 10)
            for cell in orphans:
                c.drawString(
                    self.margin + 20,
                    y,
                    f"{cell.schedule_date} {cell.time_slot_id}: "
                    f"{len(cell.assignments)} assignment(s) retained",
                )
                y -= 15

        c.showPage()
