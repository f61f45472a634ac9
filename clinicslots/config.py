"""
Configuration management using Pydantic models loaded from YAML.
"""

from datetime import time
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import MAX_SLOT_DURATION_MINUTES, TimeInterval


class BookingRules(BaseModel):
    """Booking and availability rules."""
    default_slot_duration_minutes: int = 30
    clinic_open_hour: int = 8
    clinic_close_hour: int = 20
    cancellation_lead_hours: int = 24
    max_range_days: int = 7
    extended_range_days: int = 30
    one_reservation_per_day: bool = True

    @field_validator("default_slot_duration_minutes")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure slot duration is within (0, 480] minutes."""
        if not 0 < value <= MAX_SLOT_DURATION_MINUTES:
            raise ValueError(
                f"default_slot_duration_minutes must be in (0, {MAX_SLOT_DURATION_MINUTES}], got {value}"
            )
        return value

    @field_validator("clinic_open_hour", "clinic_close_hour")
    @classmethod
    def validate_hour(cls, v: int) -> int:
        """Validate hour is between 0 and 23."""
        if not 0 <= v <= 23:
            raise ValueError(f"Hour must be between 0 and 23, got {v}")
        return v

    @field_validator("cancellation_lead_hours")
    @classmethod
    def validate_lead_hours(cls, value: int) -> int:
        if value < 0:
            raise ValueError("cancellation_lead_hours cannot be negative")
        return value

    @field_validator("max_range_days", "extended_range_days")
    @classmethod
    def validate_range_days(cls, value: int) -> int:
        if value < 0:
            raise ValueError("Range limits cannot be negative")
        return value

    @model_validator(mode="after")
    def validate_consistency(self) -> "BookingRules":
        """Ensure the clinic opens before it closes and range limits are ordered."""
        if self.clinic_close_hour <= self.clinic_open_hour:
            raise ValueError("clinic_close_hour must be later than clinic_open_hour")
        if self.extended_range_days < self.max_range_days:
            raise ValueError("extended_range_days must be at least max_range_days")
        return self

    def clinic_window(self) -> TimeInterval:
        """Get the flat daily opening window."""
        return TimeInterval(
            start=time(hour=self.clinic_open_hour),
            end=time(hour=self.clinic_close_hour),
        )


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "Asia/Tehran"
    booking: BookingRules = Field(default_factory=BookingRules)
    data_file: Optional[Path] = None

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        A relative ``data_file`` is resolved against the config file's directory.

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
                f"Please create a clinicslots.yaml file. See clinicslots.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)
        if config.data_file is not None and not config.data_file.is_absolute():
            config.data_file = config_path.parent / config.data_file
        return config


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for clinicslots.yaml in current directory
    config_path = Path.cwd() / "clinicslots.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        config_path = Path(__file__).parent.parent / "clinicslots.yaml"

    return config_path
