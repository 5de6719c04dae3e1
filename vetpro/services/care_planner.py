"""
Application services for planning clinic appointments and care reminders.

The service coordinates fetching bookings and care records via a record
source adapter and delegates the actual calculations to the domain-level
``DailyScheduleSlotGenerator`` and ``ProtocolIntervalResolver``. Any record
store can be plugged in as long as it satisfies ``RecordSourceProtocol``.
"""

from __future__ import annotations

import logging
import uuid
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from ..config import AppConfig
from ..domain.dates import DateLike
from ..domain.exceptions import CareEventNotFoundError, ProtocolNotFoundError
from ..domain.models import (
    AdministeredCareEvent,
    BookedAppointment,
    CareStatus,
    DaySlots,
    ProposedDueDate,
)
from ..domain.protocol_resolver import ProtocolIntervalResolver, care_status
from ..domain.slot_generator import DailyScheduleSlotGenerator

logger = logging.getLogger(__name__)


class RecordSourceProtocol(Protocol):
    """Protocol describing the record store behaviour needed by the service."""

    async def get_appointments(
        self,
        start_date: DateLike,
        end_date: DateLike,
    ) -> List[BookedAppointment]:
        """Return booked appointments within the date range."""

    async def get_care_events(self) -> List[AdministeredCareEvent]:
        """Return administered vaccinations and antiparasitic treatments."""


@dataclass
class ReminderOverview:
    """Care events annotated with their current status."""

    entries: List[Tuple[AdministeredCareEvent, CareStatus]] = field(default_factory=list)
    counts: Dict[CareStatus, int] = field(default_factory=dict)

    def by_status(self, status: CareStatus) -> List[AdministeredCareEvent]:
        return [event for event, event_status in self.entries if event_status is status]


class CarePlannerService:
    """
    Orchestrates record retrieval, slot generation and due-date proposals.
    """

    def __init__(
        self,
        record_source: RecordSourceProtocol,
        config: AppConfig,
        resolver: Optional[ProtocolIntervalResolver] = None,
    ) -> None:
        self._record_source = record_source
        self._config = config
        self._slot_generator = DailyScheduleSlotGenerator(config.schedule.to_configuration())
        self._resolver = resolver or ProtocolIntervalResolver()

    @property
    def slot_generator(self) -> DailyScheduleSlotGenerator:
        return self._slot_generator

    async def find_open_slots(
        self,
        *,
        start_date: DateLike,
        end_date: DateLike,
    ) -> List[DaySlots]:
        """
        Retrieve bookings for the range and compute each working day's slots.
        """
        appointments = await self.fetch_appointments(start_date=start_date, end_date=end_date)

        return self.calculate_slots(
            start_date=start_date,
            end_date=end_date,
            appointments=appointments,
        )

    async def fetch_appointments(
        self,
        *,
        start_date: DateLike,
        end_date: DateLike,
    ) -> List[BookedAppointment]:
        """Fetch booked appointments for the requested range."""
        appointments = await self._record_source.get_appointments(start_date, end_date)
        logger.debug("Fetched %d booked appointments", len(appointments))
        return list(appointments)

    def calculate_slots(
        self,
        *,
        start_date: DateLike,
        end_date: DateLike,
        appointments: Sequence[BookedAppointment],
    ) -> List[DaySlots]:
        """Calculate slots from booking data."""
        return self._slot_generator.generate_date_range_slots(
            start_date,
            end_date,
            appointments,
        )

    async def check_slot(self, *, date: DateLike, time: str) -> bool:
        """Check whether a single start time is still bookable."""
        appointments = await self.fetch_appointments(start_date=date, end_date=date)
        return self._slot_generator.is_slot_available(date, time, appointments)

    def propose_due_dates(
        self,
        *,
        protocol_name: str,
        species: str,
        date_given: DateLike,
    ) -> List[ProposedDueDate]:
        """
        Propose due dates for every interval of the matching active protocol.

        Raises:
            ProtocolNotFoundError: If no active protocol matches
        """
        protocol = self._config.find_protocol(protocol_name, species)
        if protocol is None:
            raise ProtocolNotFoundError(
                f"No active protocol '{protocol_name}' for species '{species}'"
            )

        return self._resolver.propose_due_dates(protocol, date_given)

    async def reminder_overview(self, *, today: DateLike) -> ReminderOverview:
        """Classify every recorded care event as overdue, upcoming, scheduled or completed."""
        events = await self._record_source.get_care_events()
        overview = ReminderOverview()

        for event in events:
            if event.status is CareStatus.COMPLETED:
                status = CareStatus.COMPLETED
            else:
                status = care_status(
                    event.next_due,
                    today,
                    upcoming_window_days=self._config.upcoming_window_days,
                )
            overview.entries.append((event, status))

        overview.counts = dict(Counter(status for _, status in overview.entries))
        logger.info("Reminder overview: %s", {s.value: n for s, n in overview.counts.items()})
        return overview

    async def confirm_reminder(
        self,
        *,
        event_id: str,
        date_performed: DateLike,
        new_next_due: Optional[DateLike] = None,
    ) -> Tuple[AdministeredCareEvent, AdministeredCareEvent]:
        """
        Confirm a reminder dose for a recorded event.

        Returns:
            (updated parent event, new reminder event)

        Raises:
            CareEventNotFoundError: If the event id is unknown
        """
        events = await self._record_source.get_care_events()
        event = next((e for e in events if e.id == event_id), None)
        if event is None:
            raise CareEventNotFoundError(f"Unknown care event id: '{event_id}'")

        protocol = self._config.find_protocol(event.protocol_name, event.species)
        if protocol is None:
            logger.info(
                "No active protocol for '%s' (%s); no due date suggestion available",
                event.protocol_name,
                event.species or "unknown species",
            )

        return self._resolver.confirm_reminder(
            event,
            date_performed,
            new_event_id=uuid.uuid4().hex,
            new_next_due=new_next_due,
            protocol=protocol,
        )
