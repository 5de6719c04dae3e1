"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.dates import time_to_minutes
from .domain.models import (
    WEEKDAY_NAMES,
    CareKind,
    CareProtocol,
    Interval,
    ScheduleConfiguration,
)
from .domain.protocol_resolver import find_protocol


class ScheduleSettings(BaseModel):
    """Clinic opening hours and slot granularity."""
    opening_time: str = "08:00"
    closing_time: str = "18:00"
    slot_duration: int = 30  # minutes
    lunch_break_start: Optional[str] = "12:00"
    lunch_break_end: Optional[str] = "13:00"
    working_days: List[str] = Field(default_factory=lambda: list(WEEKDAY_NAMES[:6]))

    @field_validator("opening_time", "closing_time", "lunch_break_start", "lunch_break_end")
    @classmethod
    def validate_time(cls, value: Optional[str]) -> Optional[str]:
        """Validate HH:MM (24-hour) format."""
        if value is None:
            return value
        if time_to_minutes(value) is None:
            raise ValueError(f"Time must use the HH:MM format, got '{value}'")
        return value.strip()

    @field_validator("slot_duration")
    @classmethod
    def validate_slot_duration(cls, value: int) -> int:
        """Ensure slot duration is positive."""
        if value <= 0:
            raise ValueError("slot_duration must be greater than zero")
        return value

    @field_validator("working_days")
    @classmethod
    def validate_working_days(cls, value: List[str]) -> List[str]:
        """Ensure weekday names are valid, lowercase and deduplicated."""
        normalized = [day.strip().lower() for day in value]
        invalid_days = [day for day in normalized if day not in WEEKDAY_NAMES]
        if invalid_days:
            raise ValueError(
                f"working_days must be English weekday names, got {invalid_days}"
            )
        # Preserve order while removing duplicates
        return list(dict.fromkeys(normalized))

    @model_validator(mode="after")
    def validate_hours_order(self) -> "ScheduleSettings":
        """Ensure the clinic opens before it closes and lunch is well formed."""
        if time_to_minutes(self.closing_time) <= time_to_minutes(self.opening_time):
            raise ValueError("closing_time must be later than opening_time")

        if (self.lunch_break_start is None) != (self.lunch_break_end is None):
            raise ValueError("lunch_break_start and lunch_break_end must be set together")

        if self.lunch_break_start is not None:
            if time_to_minutes(self.lunch_break_end) <= time_to_minutes(self.lunch_break_start):
                raise ValueError("lunch_break_end must be later than lunch_break_start")

        return self

    def to_configuration(self) -> ScheduleConfiguration:
        """Build the domain schedule configuration."""
        return ScheduleConfiguration(
            opening_time=self.opening_time,
            closing_time=self.closing_time,
            slot_duration=self.slot_duration,
            lunch_break_start=self.lunch_break_start,
            lunch_break_end=self.lunch_break_end,
            working_days=frozenset(self.working_days),
        )


class IntervalSettings(BaseModel):
    """One follow-up dose of a protocol."""
    offset_days: int
    label: str = ""


class ProtocolSettings(BaseModel):
    """Vaccination or antiparasitic protocol configuration."""
    id: str
    name: str
    species: str
    kind: CareKind = CareKind.VACCINATION
    intervals: List[IntervalSettings] = Field(default_factory=list)
    description: str = ""
    is_active: bool = True

    def to_protocol(self) -> CareProtocol:
        """Build the domain care protocol."""
        return CareProtocol(
            id=self.id,
            name=self.name,
            species=self.species,
            kind=self.kind,
            intervals=tuple(
                Interval(offset_days=item.offset_days, label=item.label)
                for item in self.intervals
            ),
            is_active=self.is_active,
            description=self.description,
        )


class AppConfig(BaseModel):
    """Application configuration."""
    clinic_name: str = ""
    timezone: str = "Africa/Casablanca"
    upcoming_window_days: int = Field(default=7, ge=0)
    schedule: ScheduleSettings = Field(default_factory=ScheduleSettings)
    protocols: List[ProtocolSettings] = Field(default_factory=list)

    @field_validator("protocols")
    @classmethod
    def validate_protocols(cls, value: List[ProtocolSettings]) -> List[ProtocolSettings]:
        """Ensure protocol ids are unique."""
        seen_ids: set[str] = set()
        for protocol in value:
            if protocol.id in seen_ids:
                raise ValueError(f"Duplicate protocol id detected: {protocol.id}")
            seen_ids.add(protocol.id)
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)

    def get_protocols(
        self,
        kind: Optional[CareKind] = None,
        include_inactive: bool = True,
    ) -> List[CareProtocol]:
        """Return configured protocols as domain objects."""
        protocols = [settings.to_protocol() for settings in self.protocols]
        return [
            protocol for protocol in protocols
            if (kind is None or protocol.kind is kind)
            and (include_inactive or protocol.is_active)
        ]

    def find_protocol(self, name: str, species: str) -> Optional[CareProtocol]:
        """Find the active protocol for a product name and species."""
        return find_protocol(self.get_protocols(), name, species)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of vetpro/)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
