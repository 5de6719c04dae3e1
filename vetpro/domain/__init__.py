"""
Domain layer - Pure business logic without external dependencies.
"""

from .exceptions import (
    CareEventNotFoundError,
    InvalidDateError,
    ProtocolNotFoundError,
    RecordSourceError,
    ScheduleConfigurationError,
    VetProError,
)
from .models import (
    AdministeredCareEvent,
    BookedAppointment,
    CareKind,
    CareProtocol,
    CareStatus,
    DaySlots,
    DueDate,
    DueDateSource,
    Interval,
    ProposedDueDate,
    ScheduleConfiguration,
    TimeSlot,
)
from .protocol_resolver import (
    ProtocolIntervalResolver,
    care_status,
    describe_offset,
    find_protocol,
    humanize_offset,
    validate_interval_ordering,
)
from .slot_generator import DailyScheduleSlotGenerator

__all__ = [
    "AdministeredCareEvent",
    "BookedAppointment",
    "CareEventNotFoundError",
    "CareKind",
    "CareProtocol",
    "CareStatus",
    "DailyScheduleSlotGenerator",
    "DaySlots",
    "DueDate",
    "DueDateSource",
    "Interval",
    "InvalidDateError",
    "ProposedDueDate",
    "ProtocolIntervalResolver",
    "ProtocolNotFoundError",
    "RecordSourceError",
    "ScheduleConfiguration",
    "ScheduleConfigurationError",
    "TimeSlot",
    "VetProError",
    "care_status",
    "describe_offset",
    "find_protocol",
    "humanize_offset",
    "validate_interval_ordering",
]
