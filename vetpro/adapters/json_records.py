"""
Record source backed by a JSON export of the clinic's appointments and care
events.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..domain.dates import to_date, to_date_string
from ..domain.exceptions import InvalidDateError, RecordSourceError
from ..domain.models import (
    AdministeredCareEvent,
    BookedAppointment,
    CareKind,
    CareStatus,
    DueDate,
    DueDateSource,
)

logger = logging.getLogger(__name__)


class JsonRecordSource:
    """
    Reads booked appointments and administered care events from a JSON file.

    Expected layout::

        {
          "appointments": [{"date": "2024-01-15", "time": "09:30"}],
          "care_events": [
            {"id": "v1", "protocol_name": "Rage", "kind": "vaccination",
             "date_given": "2024-01-15", "next_due_date": "2025-01-14",
             "next_due_source": "suggested", "status": "scheduled"}
          ]
        }

    A missing file is treated as an empty clinic; entries that cannot be
    parsed are skipped.
    """

    def __init__(self, path: Path):
        self.path = path
        self._data: Optional[Dict[str, Any]] = None

    def _load(self) -> Dict[str, Any]:
        """Load and cache the JSON document."""
        if self._data is not None:
            return self._data

        if not self.path.exists():
            logger.warning("Record file %s not found, using empty records", self.path)
            self._data = {"appointments": [], "care_events": []}
            return self._data

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise RecordSourceError(f"Invalid JSON in {self.path}: {exc}") from exc

        if not isinstance(data, dict):
            raise RecordSourceError("Record file must contain an object at the root level.")

        for key in ("appointments", "care_events"):
            data[key] = data.get(key) or []
            if not isinstance(data[key], list):
                raise RecordSourceError(f"'{key}' must be a list in {self.path}")

        self._data = data
        logger.debug(
            "Loaded %d appointments and %d care events from %s",
            len(data["appointments"]),
            len(data["care_events"]),
            self.path,
        )
        return self._data

    async def get_appointments(self, start_date, end_date) -> List[BookedAppointment]:
        """
        Return booked appointments whose date falls within the range, inclusive.

        Appointment date strings are kept verbatim so slot matching stays an
        exact string comparison.
        """
        start = to_date(start_date)
        end = to_date(end_date)
        appointments: List[BookedAppointment] = []

        for entry in self._load()["appointments"]:
            if not isinstance(entry, dict):
                logger.warning("Skipping invalid appointment %r: not an object", entry)
                continue
            try:
                day = to_date(entry["date"])
                appointment = BookedAppointment(date=entry["date"], time=entry["time"])
            except (KeyError, TypeError, InvalidDateError) as e:
                logger.warning("Skipping invalid appointment %r: %s", entry, e)
                continue

            if start <= day <= end:
                appointments.append(appointment)

        return appointments

    async def get_care_events(self) -> List[AdministeredCareEvent]:
        """Return every administered care event in the file."""
        events: List[AdministeredCareEvent] = []

        for entry in self._load()["care_events"]:
            if not isinstance(entry, dict):
                logger.warning("Skipping invalid care event %r: not an object", entry)
                continue
            try:
                events.append(self._parse_care_event(entry))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping invalid care event %r: %s", entry, e)

        return events

    @staticmethod
    def _parse_care_event(entry: Dict[str, Any]) -> AdministeredCareEvent:
        next_due = None
        if entry.get("next_due_date"):
            next_due = DueDate(
                value=to_date(entry["next_due_date"]),
                source=DueDateSource(entry.get("next_due_source") or DueDateSource.SUGGESTED.value),
            )

        original_id = entry.get("original_event_id")

        return AdministeredCareEvent(
            id=str(entry["id"]),
            protocol_name=entry["protocol_name"],
            kind=CareKind(entry.get("kind", CareKind.VACCINATION.value)),
            date_given=to_date(entry["date_given"]),
            next_due=next_due,
            status=CareStatus(entry.get("status", CareStatus.SCHEDULED.value)),
            original_event_id=str(original_id) if original_id is not None else None,
            species=entry.get("species", ""),
        )


def care_event_to_dict(event: AdministeredCareEvent) -> Dict[str, Any]:
    """Serialize a care event back to the record file layout."""
    return {
        "id": event.id,
        "protocol_name": event.protocol_name,
        "kind": event.kind.value,
        "species": event.species,
        "date_given": to_date_string(event.date_given),
        "next_due_date": to_date_string(event.next_due.value) if event.next_due else None,
        "next_due_source": event.next_due.source.value if event.next_due else None,
        "status": event.status.value,
        "original_event_id": event.original_event_id,
    }
