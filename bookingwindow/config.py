"""
Configuration management using Pydantic models loaded from YAML.

Organization settings mirror the stored JSON shape, so both snake_case and
camelCase keys (``weeklySchedule``, ``isOpen``, ``openTime``...) are accepted.
"""

import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .domain.exceptions import ConfigurationError, OrganizationNotFoundError
from .domain.models import (
    BookingPolicy,
    DateOverride,
    DaySpec,
    WeeklySchedule,
    WorkingHoursConfig,
    parse_clock,
)

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class _SettingsModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


def _normalize_clock(value: Any) -> Any:
    """
    Undo YAML 1.1 sexagesimal parsing: an unquoted 17:30 loads as 1050.
    """
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return f"{value // 60:02d}:{value % 60:02d}"
    return value


def _warn_if_malformed(label: str, is_open: bool, open_time: str | None, close_time: str | None) -> None:
    if not is_open:
        return
    if DaySpec.from_strings(is_open, open_time, close_time).is_effectively_open():
        return
    logger.warning(
        "%s is marked open but has invalid hours (%r - %r); treating it as closed",
        label,
        open_time,
        close_time,
    )


class DaySpecSettings(_SettingsModel):
    """Opening hours for one day of the week."""
    is_open: bool = False
    open_time: str | None = None
    close_time: str | None = None

    @field_validator("open_time", "close_time", mode="before")
    @classmethod
    def normalize_time(cls, value: Any) -> Any:
        return _normalize_clock(value)

    def to_domain(self) -> DaySpec:
        return DaySpec.from_strings(self.is_open, self.open_time, self.close_time)


class DateOverrideSettings(_SettingsModel):
    """Special hours or closure for one date."""
    date: date
    is_open: bool = False
    open_time: str | None = None
    close_time: str | None = None
    reason: str | None = None

    @field_validator("open_time", "close_time", mode="before")
    @classmethod
    def normalize_time(cls, value: Any) -> Any:
        return _normalize_clock(value)

    def to_domain(self) -> DateOverride:
        return DateOverride(
            date=self.date,
            is_open=self.is_open,
            open_time=parse_clock(self.open_time),
            close_time=parse_clock(self.close_time),
            reason=self.reason,
        )


class WorkingHoursSettings(_SettingsModel):
    """Working hours configuration of one organization."""
    enabled: bool = False
    weekly_schedule: Dict[int, DaySpecSettings] = Field(default_factory=dict)
    overrides: List[DateOverrideSettings] = Field(default_factory=list)

    @field_validator("weekly_schedule")
    @classmethod
    def validate_weekdays(cls, value: Dict[int, DaySpecSettings]) -> Dict[int, DaySpecSettings]:
        """Ensure weekday keys are 0 (Sunday) to 6 (Saturday)."""
        invalid_days = sorted(day for day in value if day not in range(7))
        if invalid_days:
            raise ValueError(f"weekly_schedule keys must be between 0 and 6, got {invalid_days}")
        return value

    @field_validator("overrides")
    @classmethod
    def validate_unique_dates(cls, value: List[DateOverrideSettings]) -> List[DateOverrideSettings]:
        """Only one override per date is allowed."""
        seen: set[date] = set()
        for override in value:
            if override.date in seen:
                raise ValueError(f"Duplicate override for date {override.date.isoformat()}")
            seen.add(override.date)
        return value

    def to_domain(self) -> WorkingHoursConfig:
        for day, spec in self.weekly_schedule.items():
            _warn_if_malformed(f"Weekday {day}", spec.is_open, spec.open_time, spec.close_time)
        for override in self.overrides:
            _warn_if_malformed(
                f"Override {override.date.isoformat()}",
                override.is_open,
                override.open_time,
                override.close_time,
            )

        return WorkingHoursConfig(
            enabled=self.enabled,
            weekly_schedule=WeeklySchedule(
                days={day: spec.to_domain() for day, spec in self.weekly_schedule.items()}
            ),
            overrides=tuple(override.to_domain() for override in self.overrides),
        )


class BookingPolicySettings(_SettingsModel):
    """Booking rules of one organization."""
    buffer_start_time: int = Field(default=0, ge=0)
    max_booking_length: int | None = Field(default=None, gt=0)
    max_booking_length_skip_closed_days: bool = False
    tags_required: bool = False

    def to_domain(self) -> BookingPolicy:
        return BookingPolicy(
            buffer_start_time=self.buffer_start_time,
            max_booking_length=self.max_booking_length,
            max_booking_length_skip_closed_days=self.max_booking_length_skip_closed_days,
            tags_required=self.tags_required,
        )


class OrganizationSettings(_SettingsModel):
    """Organization configuration."""
    id: str
    name: str = ""
    working_hours: WorkingHoursSettings = Field(default_factory=WorkingHoursSettings)
    booking_policy: BookingPolicySettings = Field(default_factory=BookingPolicySettings)

    def display_name(self) -> str:
        return self.name or self.id


class AppConfig(_SettingsModel):
    """Application configuration."""
    log_level: str = "INFO"
    organizations: List[OrganizationSettings] = Field(default_factory=list)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {value}")
        return level

    @field_validator("organizations")
    @classmethod
    def validate_organizations(cls, value: List[OrganizationSettings]) -> List[OrganizationSettings]:
        """Ensure organization ids are unique."""
        seen_ids: set[str] = set()
        for organization in value:
            if organization.id in seen_ids:
                raise ValueError(f"Duplicate organization id detected: {organization.id}")
            seen_ids.add(organization.id)
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
            ConfigurationError: If config is invalid
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
            raise ConfigurationError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigurationError("Config file must contain a mapping at the root level.")

        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid configuration in {config_path}:\n{exc}") from exc

    def find_organization(self, organization_id: str) -> OrganizationSettings:
        """
        Find an organization by id.

        Raises:
            OrganizationNotFoundError: If no organization has this id
        """
        for organization in self.organizations:
            if organization.id == organization_id:
                return organization
        raise OrganizationNotFoundError(organization_id)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
