"""
Adapters layer - Record sources for appointments and care events.
"""

from .json_records import JsonRecordSource, care_event_to_dict

__all__ = ["JsonRecordSource", "care_event_to_dict"]
