"""
Configuration management using Pydantic models loaded from YAML.
"""

import logging
from pathlib import Path
from typing import List

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .domain.business_time import BusinessTime
from .domain.exceptions import ConfigurationError
from .domain.models import (
    WEEKDAY_NAMES,
    BusinessWindow,
    normalize_holiday,
    normalize_weekday,
    validate_timezone,
)


logger = logging.getLogger(__name__)


def _dedupe(values: List[str], field: str) -> List[str]:
    """Remove duplicates while preserving order."""
    seen: set[str] = set()
    deduped: List[str] = []
    for value in values:
        if value in seen:
            logger.debug("Ignoring duplicate %s entry: %s", field, value)
            continue
        deduped.append(value)
        seen.add(value)
    return deduped


class BusinessHoursConfig(BaseModel):
    """Daily business window."""
    start_hour: int = 9
    end_hour: int = 17

    @field_validator("start_hour", "end_hour")
    @classmethod
    def validate_hour(cls, v: int) -> int:
        """Validate hour is between 0 and 24."""
        if not 0 <= v <= 24:
            raise ValueError(f"Hour must be between 0 and 24, got {v}")
        return v

    @model_validator(mode="after")
    def validate_hours_order(self) -> "BusinessHoursConfig":
        """Ensure the configured window opens before it closes."""
        self.to_window()
        return self

    def to_window(self) -> BusinessWindow:
        return BusinessWindow(start_hour=self.start_hour, end_hour=self.end_hour)


class BusinessTimeConfig(BaseModel):
    """Business calendar configuration."""
    timezone: str = "Europe/Berlin"
    business_days: List[str] = Field(default_factory=lambda: list(WEEKDAY_NAMES[:5]))
    business_hours: BusinessHoursConfig = Field(default_factory=BusinessHoursConfig)
    holidays: List[str] = Field(default_factory=list)

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, value: str) -> str:
        return validate_timezone(value)

    @field_validator("business_days")
    @classmethod
    def validate_business_days(cls, value: List[str]) -> List[str]:
        """Normalise weekday names and drop duplicates."""
        days = _dedupe([normalize_weekday(day) for day in value], "business_days")
        if not days:
            raise ValueError("business_days must contain at least one weekday")
        return days

    @field_validator("holidays")
    @classmethod
    def validate_holidays(cls, value: List[str]) -> List[str]:
        """Normalise holidays to DD/MM and drop duplicates."""
        return _dedupe([normalize_holiday(day) for day in value], "holidays")

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "BusinessTimeConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            BusinessTimeConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigurationError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a businesstime.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigurationError("Config file must contain a mapping at the root level.")

        try:
            return cls(**data)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid configuration in {config_path}:\n{exc}") from exc

    def build_engine(self) -> BusinessTime:
        """Create the business time engine described by this configuration."""
        return BusinessTime(
            timezone=self.timezone,
            business_days=self.business_days,
            start_hour=self.business_hours.start_hour,
            end_hour=self.business_hours.end_hour,
            holidays=self.holidays,
        )


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for businesstime.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "businesstime.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "businesstime.yaml"

    return config_path
