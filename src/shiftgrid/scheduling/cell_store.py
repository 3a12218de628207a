"""Sparse storage of schedule cells for hosting applications.

The store is the source that week snapshots are built from. It keeps one
entry per recorded (date, slot id) and returns an empty cell for anything
not recorded. Every mutating call is a single transaction guarded by the
lock of the cell it touches, so concurrent additions to the same cell are
serialized and none is lost.
"""

import logging
import threading
from collections import defaultdict
from datetime import date
from typing import Callable, Iterable, Iterator, Optional

from shiftgrid.domain.models import CellKey, ScheduleCell, StaffAssignment

logger = logging.getLogger(__name__)


class ScheduleCellStore:
    """Thread-safe sparse map of (date, slot id) -> ScheduleCell."""

    def __init__(self, cells: Iterable[ScheduleCell] = ()):
        self._cells: dict[CellKey, ScheduleCell] = {}
        self._locks: defaultdict[CellKey, threading.Lock] = defaultdict(threading.Lock)
        # Guards the lock table and the index, never held during a cell update.
        self._registry_lock = threading.Lock()
        self._index: dict[str, CellKey] = {}
        for cell in cells:
            self.put(cell)

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[ScheduleCell]:
        with self._registry_lock:
            cells = list(self._cells.values())
        return iter(sorted(cells, key=lambda c: c.key))

    def _lock_for(self, key: CellKey) -> threading.Lock:
        with self._registry_lock:
            return self._locks[key]

    def _store(self, cell: ScheduleCell) -> None:
        # Caller holds the cell lock.
        previous = self._cells.get(cell.key)
        with self._registry_lock:
            if previous is not None:
                for assignment in previous.assignments:
                    self._index.pop(assignment.id, None)
            for assignment in cell.assignments:
                self._index[assignment.id] = cell.key
            self._cells[cell.key] = cell

    def get(self, schedule_date: date, slot_id: str) -> ScheduleCell:
        """Get a cell, or an empty one if nothing was recorded."""
        cell = self._cells.get((schedule_date, slot_id))
        if cell is None:
            return ScheduleCell(schedule_date=schedule_date, time_slot_id=slot_id)
        return cell

    def put(self, cell: ScheduleCell) -> None:
        """Record a cell, replacing whatever was stored for its key."""
        with self._lock_for(cell.key):
            self._store(cell)

    def append(
        self,
        schedule_date: date,
        slot_id: str,
        assignment: StaffAssignment,
        check: Optional[Callable[[ScheduleCell], None]] = None,
    ) -> ScheduleCell:
        """Append an assignment to a cell, creating the cell if absent.

        ``check`` runs against the stored cell inside the transaction and
        may raise to abort the append.
        """
        key = (schedule_date, slot_id)
        with self._lock_for(key):
            cell = self.get(schedule_date, slot_id)
            if check is not None:
                check(cell)
            updated = cell.with_assignments(cell.assignments + (assignment,))
            self._store(updated)
        logger.debug("Stored assignment %s in %s/%s", assignment.id, schedule_date, slot_id)
        return updated

    def locate(self, assignment_id: str) -> Optional[CellKey]:
        """Key of the cell holding an assignment, if any."""
        with self._registry_lock:
            return self._index.get(assignment_id)

    def update_assignment(
        self,
        assignment_id: str,
        change: Callable[[StaffAssignment], Optional[StaffAssignment]],
    ) -> bool:
        """Apply ``change`` to one assignment inside its cell's transaction.

        ``change`` returns the replacement, or None to delete the
        assignment. Returns False if the id is not stored.
        """
        key = self.locate(assignment_id)
        if key is None:
            return False
        with self._lock_for(key):
            cell = self._cells.get(key)
            if cell is None or not cell.has_assignment(assignment_id):
                return False
            assignments = []
            for assignment in cell.assignments:
                if assignment.id == assignment_id:
                    assignment = change(assignment)
                    if assignment is None:
                        continue
                assignments.append(assignment)
            self._store(cell.with_assignments(assignments))
        return True

    def remove_assignment(self, assignment_id: str) -> bool:
        """Hard-delete an assignment. Returns False if it was not stored."""
        removed = self.update_assignment(assignment_id, lambda _: None)
        if removed:
            logger.debug("Removed assignment %s from store", assignment_id)
        return removed

    def cells_between(self, start: date, end: date) -> list[ScheduleCell]:
        """Recorded cells dated within [start, end]."""
        return [c for c in self if start <= c.schedule_date <= end]
