"""Collaborator interfaces and business-rule policies.

The staff directory is owned by an external system and is injected into the
scheduling core as a read-only lookup. Booking policies decide whether a
staff member may be added to a cell; they are kept separate from the
assignment manager so the rule can change without touching it.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from shiftgrid.domain.models import ScheduleCell, Staff
from shiftgrid.errors import NotFoundError, ValidationError, ValidationErrorType


class StaffDirectory(ABC):
    """Abstract base class for the staff lookup collaborator."""

    @abstractmethod
    def get_all_staff(self) -> list[Staff]:
        """Return every staff member that can be scheduled."""
        pass

    def find_staff(self, staff_id: str) -> Optional[Staff]:
        """Find a staff member by id, or None."""
        for staff in self.get_all_staff():
            if staff.id == staff_id:
                return staff
        return None

    def get_staff(self, staff_id: str) -> Staff:
        """Get a staff member by id.

        Raises:
            NotFoundError: If no staff member has this id.
        """
        staff = self.find_staff(staff_id)
        if staff is None:
            raise NotFoundError("Staff", staff_id)
        return staff


class InMemoryStaffDirectory(StaffDirectory):
    """Staff directory backed by a fixed list."""

    def __init__(self, staff: Iterable[Staff] = ()):
        self._staff = {s.id: s for s in staff}

    def get_all_staff(self) -> list[Staff]:
        return list(self._staff.values())

    def find_staff(self, staff_id: str) -> Optional[Staff]:
        return self._staff.get(staff_id)


class BookingPolicy(ABC):
    """Abstract base class for rules on adding staff to a cell."""

    @abstractmethod
    def check(self, cell: ScheduleCell, staff: Staff) -> None:
        """Raise ValidationError if ``staff`` may not join ``cell``."""
        pass


class AllowDoubleBookingPolicy(BookingPolicy):
    """Permits any addition, including the same person twice in a cell."""

    def check(self, cell: ScheduleCell, staff: Staff) -> None:
        return None


class SingleBookingPolicy(BookingPolicy):
    """Rejects a staff member who is already active in the cell.

    Cancelled assignments do not block a new one, so a cancelled staff
    member can be reintroduced with a fresh assignment.
    """

    def check(self, cell: ScheduleCell, staff: Staff) -> None:
        for assignment in cell.active_assignments:
            if assignment.staff_id == staff.id:
                raise ValidationError(
                    ValidationErrorType.DOUBLE_BOOKING,
                    f"{staff.name} is already assigned to "
                    f"{cell.time_slot_id} on {cell.schedule_date}",
                    field="staff_id",
                )
