"""
Tests for the CarePlannerService orchestration layer.
"""

import asyncio
from typing import Dict, List

import pendulum
import pytest

from vetpro.config import AppConfig
from vetpro.domain.exceptions import CareEventNotFoundError, ProtocolNotFoundError
from vetpro.domain.models import (
    AdministeredCareEvent,
    BookedAppointment,
    CareKind,
    CareStatus,
    DueDate,
)
from vetpro.services.care_planner import CarePlannerService

from .conftest import CONFIG_DATA


class StubRecordSource:
    """Minimal stub matching RecordSourceProtocol."""

    def __init__(self, appointments: List[BookedAppointment], events: List[AdministeredCareEvent]):
        self._appointments = appointments
        self._events = events
        self.calls: List[Dict[str, str]] = []

    async def get_appointments(self, start_date, end_date):
        self.calls.append({"start": str(start_date), "end": str(end_date)})
        return self._appointments

    async def get_care_events(self):
        return self._events


def _event(event_id: str, next_due=None, status=CareStatus.SCHEDULED, name="Rage") -> AdministeredCareEvent:
    return AdministeredCareEvent(
        id=event_id,
        protocol_name=name,
        kind=CareKind.VACCINATION,
        date_given=pendulum.date(2023, 1, 10),
        next_due=next_due,
        status=status,
        species="Chien",
    )


def _build_service(appointments=(), events=()) -> CarePlannerService:
    config = AppConfig(**CONFIG_DATA)
    return CarePlannerService(
        record_source=StubRecordSource(list(appointments), list(events)),
        config=config,
    )


def test_find_open_slots_uses_records_and_generator():
    """End-to-end call should yield working days with booked slots flagged."""
    service = _build_service(
        appointments=[BookedAppointment(date="2024-01-15", time="08:30")],
    )

    days = asyncio.run(service.find_open_slots(start_date="2024-01-13", end_date="2024-01-16"))

    # Saturday and Sunday are not working days in the test clinic
    assert [d.date for d in days] == ["2024-01-15", "2024-01-16"]
    monday = {s.time: s for s in days[0].slots}
    assert len(monday) == 8  # 08:00 - 12:00 at 30 minutes
    assert not monday["08:30"].is_available
    assert monday["10:00"].is_lunch_break
    assert days[0].available_count == 6
    assert days[1].available_count == 7


def test_check_slot_fetches_single_day():
    service = _build_service(appointments=[BookedAppointment(date="2024-01-15", time="09:00")])
    source = service._record_source

    assert not asyncio.run(service.check_slot(date="2024-01-15", time="09:00"))
    assert asyncio.run(service.check_slot(date="2024-01-15", time="09:30"))
    assert not asyncio.run(service.check_slot(date="2024-01-15", time="09:15"))
    assert source.calls[0] == {"start": "2024-01-15", "end": "2024-01-15"}


def test_propose_due_dates():
    service = _build_service()

    proposals = service.propose_due_dates(
        protocol_name="CHPPiL",
        species="Chien",
        date_given=pendulum.date(2023, 6, 1),
    )

    assert [p.due.value for p in proposals] == [pendulum.date(2023, 6, 22), pendulum.date(2024, 5, 31)]


def test_propose_due_dates_unknown_or_inactive_protocol():
    service = _build_service()

    with pytest.raises(ProtocolNotFoundError):
        service.propose_due_dates(protocol_name="Rage", species="Chat", date_given="2024-01-01")

    with pytest.raises(ProtocolNotFoundError):
        service.propose_due_dates(protocol_name="Ancien collier", species="Chien", date_given="2024-01-01")


def test_reminder_overview_classifies_events():
    events = [
        _event("late", DueDate.suggested(pendulum.date(2024, 1, 10))),
        _event("soon", DueDate.suggested(pendulum.date(2024, 1, 18))),
        _event("later", DueDate.manual(pendulum.date(2024, 6, 1))),
        _event("done", DueDate.suggested(pendulum.date(2023, 1, 1)), status=CareStatus.COMPLETED),
        _event("single"),
    ]
    service = _build_service(events=events)

    overview = asyncio.run(service.reminder_overview(today="2024-01-15"))

    statuses = {event.id: status for event, status in overview.entries}
    assert statuses == {
        "late": CareStatus.OVERDUE,
        "soon": CareStatus.UPCOMING,
        "later": CareStatus.SCHEDULED,
        "done": CareStatus.COMPLETED,
        "single": CareStatus.COMPLETED,
    }
    assert overview.counts[CareStatus.COMPLETED] == 2
    assert [e.id for e in overview.by_status(CareStatus.OVERDUE)] == ["late"]


def test_confirm_reminder_uses_protocol_suggestion():
    service = _build_service(events=[_event("v1", DueDate.suggested(pendulum.date(2024, 1, 10)))])

    parent, reminder = asyncio.run(
        service.confirm_reminder(event_id="v1", date_performed="2024-01-12")
    )

    assert parent.status is CareStatus.COMPLETED
    assert reminder.original_event_id == "v1"
    assert reminder.next_due == DueDate.suggested(pendulum.date(2025, 1, 11))
    assert reminder.id != "v1"


def test_confirm_reminder_manual_date():
    service = _build_service(events=[_event("v1", DueDate.suggested(pendulum.date(2024, 1, 10)))])

    parent, reminder = asyncio.run(
        service.confirm_reminder(event_id="v1", date_performed="2024-01-12", new_next_due="2024-07-01")
    )

    assert reminder.next_due.is_manual
    assert parent.next_due == DueDate.manual(pendulum.date(2024, 7, 1))


def test_confirm_reminder_without_protocol_keeps_due_date():
    previous = DueDate.suggested(pendulum.date(2024, 1, 10))
    service = _build_service(events=[_event("v1", previous, name="Inconnu")])

    _, reminder = asyncio.run(service.confirm_reminder(event_id="v1", date_performed="2024-01-12"))

    assert reminder.next_due == previous


def test_confirm_reminder_unknown_event():
    service = _build_service()

    with pytest.raises(CareEventNotFoundError):
        asyncio.run(service.confirm_reminder(event_id="missing", date_performed="2024-01-12"))
