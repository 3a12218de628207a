"""Command-line interface for the shiftgrid weekly roster."""

import argparse
import logging
import sys
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Optional

from shiftgrid.config import SchedulingConfig
from shiftgrid.domain.models import (
    AssignmentStatus,
    ScheduleCell,
    Staff,
    StaffAssignment,
)
from shiftgrid.domain.policies import InMemoryStaffDirectory
from shiftgrid.errors import SchedulingError
from shiftgrid.output.pdf_generator import PDFGenerator
from shiftgrid.output.text_generator import GridTextGenerator
from shiftgrid.scheduling.cell_store import ScheduleCellStore
from shiftgrid.scheduling.service import ScheduleService
from shiftgrid.scheduling.week import normalize_week_start

logger = logging.getLogger("shiftgrid")

SAMPLE_STAFF = [
    Staff(id="staff1", name="Ahsoka Tano", initials="AT", roles=frozenset({"Staff"})),
    Staff(id="staff2", name="Arya Stark", initials="AS", roles=frozenset({"Staff"})),
    Staff(id="staff3", name="Danny Targeryen", initials="DT", roles=frozenset({"Staff"})),
    Staff(id="staff4", name="Han Solo", initials="HS", roles=frozenset({"Staff"})),
    Staff(id="staff5", name="Jon Snow", initials="JS", roles=frozenset({"Staff"})),
    Staff(id="staff6", name="Kylo Ren", initials="KR", roles=frozenset({"Staff"})),
    Staff(id="staff7", name="Nicole R", initials="NR", roles=frozenset({"Staff"})),
]

R = AssignmentStatus.REGISTERED
C = AssignmentStatus.CONFIRMED

# (day offset from Monday, slot id, [(staff id, status), ...])
SAMPLE_WEEK = [
    (0, "slot2", [("staff2", C), ("staff5", C)]),
    (0, "slot4", [("staff6", R)]),
    (0, "slot6", [("staff7", C), ("staff3", C)]),
    (1, "slot2", [("staff1", C), ("staff2", C)]),
    (1, "slot4", [("staff3", R), ("staff7", C)]),
    (2, "slot2", [("staff2", R)]),
    (2, "slot4", [("staff3", C), ("staff4", C)]),
    (2, "slot5", [("staff7", C)]),
    (3, "slot3", [("staff5", C), ("staff6", R)]),
    (3, "slot5", [("staff3", R), ("staff7", C)]),
    (4, "slot2", [("staff2", C), ("staff5", R)]),
    (4, "slot4", [("staff4", R)]),
    (4, "slot6", [("staff7", C)]),
    (5, "slot5", [("staff1", R), ("staff3", C)]),
    (6, "slot2", [("staff2", R), ("staff5", C)]),
    (6, "slot6", [("staff1", C)]),
]


def create_sample_cells(week_start: date) -> list[ScheduleCell]:
    """Create sample cells for the week starting at ``week_start``."""
    staff_map = {s.id: s for s in SAMPLE_STAFF}
    cells = []
    counter = 0
    for offset, slot_id, entries in SAMPLE_WEEK:
        assignments = []
        for staff_id, status in entries:
            counter += 1
            staff = staff_map[staff_id]
            assignments.append(
                StaffAssignment(
                    id=f"a{counter}",
                    staff_id=staff.id,
                    staff_name=staff.name,
                    staff_initials=staff.initials,
                    role="Staff",
                    status=status,
                )
            )
        cells.append(
            ScheduleCell(
                schedule_date=week_start + timedelta(days=offset),
                time_slot_id=slot_id,
                assignments=tuple(assignments),
            )
        )
    return cells


def create_sample_service(config: SchedulingConfig, week_start: date) -> ScheduleService:
    """Create a service seeded with sample staff and one week of cells."""
    return ScheduleService(
        config=config,
        staff_directory=InMemoryStaffDirectory(SAMPLE_STAFF),
        store=ScheduleCellStore(create_sample_cells(week_start)),
    )


def _parse_date(value: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYY-MM-DD")


def _load_config(path: Optional[str], timezone: Optional[str]) -> SchedulingConfig:
    config = SchedulingConfig.from_json_file(path) if path else SchedulingConfig()
    if timezone:
        config = replace(config, timezone=timezone)
    return config


def service_today(config: SchedulingConfig) -> date:
    """Today's date in the configured business timezone."""
    return datetime.now(config.tzinfo).date()


def run_demo(config: SchedulingConfig, week: Optional[date] = None) -> None:
    """Print the sample week as a text grid."""
    week_start = normalize_week_start(week or service_today(config))
    service = create_sample_service(config, week_start)
    schedule = service.get_week_schedule(week_start)
    generator = GridTextGenerator(service.clock)
    print(generator.generate_to_string(schedule))

    live = service.clock.current_cells(schedule)
    if live:
        print("Live now:")
        for d, slot_id in live:
            cell = service.get_cell(schedule, d, slot_id)
            names = ", ".join(a.staff_name for a in cell.active_assignments) or "nobody"
            print(f"  {d} {slot_id}: {names}")


def run_slots(config: SchedulingConfig) -> None:
    """List the configured time slots."""
    service = ScheduleService(config=config)
    for slot in service.list_time_slots():
        overnight = " (overnight)" if slot.is_overnight else ""
        print(
            f"  {slot.id:<8} {slot.start_time.strftime('%H:%M')}-"
            f"{slot.end_time.strftime('%H:%M')}  {slot.display_label}{overnight}"
        )


def run_export(
    config: SchedulingConfig,
    output_path: str,
    output_format: str = "pdf",
    week: Optional[date] = None,
) -> None:
    """Export the sample week to a text or PDF file."""
    week_start = normalize_week_start(week or service_today(config))
    service = create_sample_service(config, week_start)
    schedule = service.get_week_schedule(week_start)

    print(f"Exporting week {schedule.week_start} to {output_path} ({output_format})")
    if output_format == "pdf":
        PDFGenerator(service.clock).generate(schedule, output_path)
    else:
        GridTextGenerator(service.clock).generate(schedule, output_path)
    print("  Export created successfully!")


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="shiftgrid - Weekly staff roster",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s demo                           Show the sample week as a grid
  %(prog)s demo --week 2024-01-15         Show a specific week
  %(prog)s slots                          List the default time slots
  %(prog)s export --output roster.pdf     Export the sample week as PDF
  %(prog)s export -o roster.txt -f text   Export as plain text
        """,
    )
    parser.add_argument("--config", type=str, help="JSON config file")
    parser.add_argument("--timezone", type=str, help="Business timezone (IANA name)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    demo_parser = subparsers.add_parser("demo", help="Show the sample week")
    demo_parser.add_argument("--week", "-w", type=_parse_date, help="Any date in the week")

    subparsers.add_parser("slots", help="List the configured time slots")

    export_parser = subparsers.add_parser("export", help="Export the sample week")
    export_parser.add_argument("--output", "-o", type=str, required=True, help="Output file path")
    export_parser.add_argument(
        "--format", "-f",
        type=str,
        default="pdf",
        choices=["pdf", "text"],
        help="Export format (default: pdf)",
    )
    export_parser.add_argument("--week", "-w", type=_parse_date, help="Any date in the week")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = _load_config(args.config, args.timezone)
        if args.command == "demo":
            run_demo(config, args.week)
            return 0
        elif args.command == "slots":
            run_slots(config)
            return 0
        elif args.command == "export":
            run_export(config, args.output, args.format, args.week)
            return 0
    except SchedulingError as exc:
        logger.error("%s", exc)
        return 2

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
