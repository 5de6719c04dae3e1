"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .care_planner import CarePlannerService, RecordSourceProtocol, ReminderOverview

__all__ = ["CarePlannerService", "RecordSourceProtocol", "ReminderOverview"]
