"""
Domain models for care protocols and appointment slot calculations.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple

from pendulum import Date


WEEKDAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


class CareKind(str, Enum):
    """Kind of recurring care a protocol describes."""

    VACCINATION = "vaccination"
    ANTIPARASITIC = "antiparasitic"


class CareStatus(str, Enum):
    """Lifecycle status of an administered care event."""

    COMPLETED = "completed"
    OVERDUE = "overdue"
    UPCOMING = "upcoming"
    SCHEDULED = "scheduled"


class DueDateSource(str, Enum):
    """Where a stored due date came from."""

    SUGGESTED = "suggested"
    MANUAL = "manual"


@dataclass(frozen=True)
class Interval:
    """A follow-up dose, relative to the date the care was given."""

    offset_days: int
    label: str = ""


@dataclass(frozen=True)
class CareProtocol:
    """
    A vaccination or antiparasitic protocol.

    Intervals are kept in the order they were entered. Offsets are expected
    to be non-decreasing but nothing here enforces it; see
    ``validate_interval_ordering``.
    """

    id: str
    name: str
    species: str
    kind: CareKind
    intervals: Tuple[Interval, ...] = ()
    is_active: bool = True
    description: str = ""

    def matches(self, name: str, species: str) -> bool:
        """Check whether this protocol is the one registered for name and species."""
        return self.name == name and self.species == species


@dataclass(frozen=True)
class DueDate:
    """
    A due date frozen at the moment it was chosen.

    ``source`` tells a resolver suggestion apart from a staff override.
    """

    value: Date
    source: DueDateSource = DueDateSource.SUGGESTED

    @classmethod
    def suggested(cls, value: Date) -> "DueDate":
        return cls(value=value, source=DueDateSource.SUGGESTED)

    @classmethod
    def manual(cls, value: Date) -> "DueDate":
        return cls(value=value, source=DueDateSource.MANUAL)

    @property
    def is_manual(self) -> bool:
        return self.source is DueDateSource.MANUAL


@dataclass(frozen=True)
class ProposedDueDate:
    """A protocol interval paired with the date it resolves to."""

    interval: Interval
    due: DueDate


@dataclass(frozen=True)
class AdministeredCareEvent:
    """A vaccination or antiparasitic treatment that has already been given."""

    id: str
    protocol_name: str
    kind: CareKind
    date_given: Date
    next_due: Optional[DueDate] = None
    status: CareStatus = CareStatus.SCHEDULED
    original_event_id: Optional[str] = None
    species: str = ""

    @property
    def is_reminder(self) -> bool:
        return self.original_event_id is not None


@dataclass(frozen=True)
class ScheduleConfiguration:
    """
    Clinic operating hours used to enumerate bookable slots.

    Times are ``HH:MM`` strings (24-hour clock). ``working_days`` holds
    lowercase English weekday names.
    """

    opening_time: str
    closing_time: str
    slot_duration: int
    lunch_break_start: Optional[str] = None
    lunch_break_end: Optional[str] = None
    working_days: FrozenSet[str] = field(default_factory=lambda: frozenset(WEEKDAY_NAMES[:6]))


@dataclass(frozen=True)
class BookedAppointment:
    """An occupied slot, identified by its date and start time strings."""

    date: str  # YYYY-MM-DD
    time: str  # HH:MM


@dataclass(frozen=True)
class TimeSlot:
    """A bookable slot, computed fresh on every call."""

    time: str
    is_available: bool
    is_lunch_break: bool


@dataclass(frozen=True)
class DaySlots:
    """All slots generated for one working day."""

    date: str
    slots: List[TimeSlot]

    @property
    def available_count(self) -> int:
        return sum(1 for slot in self.slots if slot.is_available)
