"""
Domain-specific exception hierarchy for the VetPro care scheduling package.
"""


class VetProError(Exception):
    """Base class for all application-level errors."""


class ScheduleConfigurationError(VetProError, ValueError):
    """Raised when a schedule configuration cannot produce slots safely."""


class InvalidDateError(VetProError, ValueError):
    """Raised when a calendar date cannot be parsed."""


class ProtocolNotFoundError(VetProError, LookupError):
    """Raised when no active care protocol matches a lookup."""


class RecordSourceError(VetProError):
    """Raised when appointment or care records cannot be loaded."""


class CareEventNotFoundError(VetProError, LookupError):
    """Raised when an administered care event id is unknown."""
