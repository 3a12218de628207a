"""Time slot catalog.

The catalog is the ordered, named partition of a business day used to
build schedule rows. It is a separate arena from the cell store: cells
refer to slots by id only, so removing a slot never touches assignment
data.
"""

import logging
import uuid
from dataclasses import replace
from typing import Iterable, Iterator, Optional

from shiftgrid.config import SchedulingConfig
from shiftgrid.domain.models import TimeLike, TimeSlot, parse_time
from shiftgrid.errors import NotFoundError, ValidationError, ValidationErrorType
from shiftgrid.validation.validator import TimeSlotValidator

logger = logging.getLogger(__name__)


def _new_slot_id() -> str:
    return f"slot-{uuid.uuid4().hex[:12]}"


class TimeSlotCatalog:
    """Mutable collection of time slots, listed in start-time order.

    Example:
        >>> catalog = TimeSlotCatalog.default()
        >>> late = catalog.create("22:00", "02:00", label="Late")
        >>> [s.id for s in catalog.list()][-1] == late.id
        True
    """

    def __init__(
        self,
        slots: Iterable[TimeSlot] = (),
        validator: Optional[TimeSlotValidator] = None,
    ):
        self.validator = validator or TimeSlotValidator()
        self._slots: dict[str, TimeSlot] = {}
        self.replace_all(slots)

    @classmethod
    def default(cls, config: Optional[SchedulingConfig] = None) -> "TimeSlotCatalog":
        """Create a catalog holding the configured default slots."""
        config = config or SchedulingConfig()
        return cls(config.build_time_slots())

    def __len__(self) -> int:
        return len(self._slots)

    def __contains__(self, slot_id: object) -> bool:
        return slot_id in self._slots

    def __iter__(self) -> Iterator[TimeSlot]:
        return iter(self.list())

    def list(self) -> list[TimeSlot]:
        """All slots, ascending by start time.

        Overnight slots sort by their start as well, so 22:00-02:00 comes
        after 19:00-21:00.
        """
        return sorted(self._slots.values(), key=lambda s: s.sort_key)

    def get(self, slot_id: str) -> TimeSlot:
        """Get a slot by id.

        Raises:
            NotFoundError: If the id is not in the catalog.
        """
        try:
            return self._slots[slot_id]
        except KeyError:
            raise NotFoundError("TimeSlot", slot_id) from None

    def create(
        self,
        start_time: TimeLike,
        end_time: TimeLike,
        label: Optional[str] = None,
        slot_id: Optional[str] = None,
    ) -> TimeSlot:
        """Add a new slot.

        Raises:
            ValidationError: If a time is malformed, start equals end, or
                the explicit id already exists.
        """
        slot_id = slot_id or _new_slot_id()
        if slot_id in self._slots:
            raise ValidationError(
                ValidationErrorType.DUPLICATE_SLOT_ID,
                f"Duplicate time slot id {slot_id!r}",
                field="id",
            )
        self.validator.validate_times(start_time, end_time, slot_id).raise_if_invalid()
        slot = TimeSlot(
            id=slot_id,
            start_time=parse_time(start_time, "start_time"),
            end_time=parse_time(end_time, "end_time"),
            label=label or "",
        )
        self._slots[slot.id] = slot
        logger.debug("Created time slot %r", slot)
        return slot

    def update(
        self,
        slot_id: str,
        start_time: Optional[TimeLike] = None,
        end_time: Optional[TimeLike] = None,
        label: Optional[str] = None,
    ) -> TimeSlot:
        """Edit an existing slot. Assignments are not touched.

        Raises:
            NotFoundError: If the id is not in the catalog.
            ValidationError: If the resulting times are invalid.
        """
        current = self.get(slot_id)
        new_start = current.start_time if start_time is None else start_time
        new_end = current.end_time if end_time is None else end_time
        self.validator.validate_times(new_start, new_end, slot_id).raise_if_invalid()

        slot = replace(
            current,
            start_time=parse_time(new_start, "start_time"),
            end_time=parse_time(new_end, "end_time"),
            label=current.label if label is None else label,
        )
        self._slots[slot_id] = slot
        logger.debug("Updated time slot %r", slot)
        return slot

    def upsert(self, slot: TimeSlot) -> TimeSlot:
        """Insert a slot, or replace the slot with the same id."""
        if not slot.id:
            raise ValidationError(
                ValidationErrorType.DUPLICATE_SLOT_ID,
                "Time slot id must not be empty",
                field="id",
            )
        self.validator.validate_times(
            slot.start_time, slot.end_time, slot.id
        ).raise_if_invalid()
        action = "Replaced" if slot.id in self._slots else "Inserted"
        self._slots[slot.id] = slot
        logger.debug("%s time slot %r", action, slot)
        return slot

    def remove(self, slot_id: str) -> None:
        """Remove a slot.

        Cells that reference it keep their data and simply stop being
        rendered.

        Raises:
            NotFoundError: If the id is not in the catalog.
        """
        if slot_id not in self._slots:
            raise NotFoundError("TimeSlot", slot_id)
        del self._slots[slot_id]
        logger.debug("Removed time slot %s", slot_id)

    def replace_all(self, slots: Iterable[TimeSlot]) -> None:
        """Replace the whole catalog after validating the new set."""
        slots = list(slots)
        result = self.validator.validate_catalog(slots)
        result.raise_if_invalid()
        for warning in result.warnings:
            logger.info(warning)
        self._slots = {slot.id: slot for slot in slots}
