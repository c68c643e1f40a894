"""
Domain models for business windows, directions and units.
"""

import re
from dataclasses import dataclass
from datetime import date
from enum import Enum

import pendulum

from .exceptions import ConfigurationError


# Index matches datetime.weekday()
WEEKDAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

_HOLIDAY_PATTERN = re.compile(r"^(\d{1,2})/(\d{1,2})$")

_UNIT_SECONDS = {"seconds": 1, "minutes": 60, "hours": 3600}


class Direction(str, Enum):
    """Direction in which an instant is snapped or shifted."""

    FORWARD = "forward"
    BACKWARD = "backward"

    @property
    def step(self) -> int:
        """Calendar-day step (+1 or -1) for this direction."""
        return 1 if self is Direction.FORWARD else -1


class TimeUnit(str, Enum):
    """Units in which elapsed business time can be reported."""

    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"

    @property
    def seconds(self) -> int:
        return _UNIT_SECONDS[self.value]


@dataclass(frozen=True)
class TimeOfDay:
    """
    A wall-clock time used as a window boundary.

    ``hour`` may be 24, meaning the midnight that closes the day.
    """
    hour: int
    minute: int = 0
    second: int = 0

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


def compute_working_hours(start_hour: int, end_hour: int) -> int:
    """
    Return the length in hours of a daily window.

    A window whose end precedes its start is read as crossing midnight,
    e.g. ``compute_working_hours(18, 3) == 9``.
    """
    if end_hour < start_hour:
        return (24 - start_hour) + end_hour
    return end_hour - start_hour


@dataclass(frozen=True)
class BusinessWindow:
    """
    The daily ``[start_hour, end_hour)`` window of business time.

    Invariant: the window lies within a single local calendar day.
    """
    start_hour: int
    end_hour: int

    def __post_init__(self):
        for name, value in (("start_hour", self.start_hour), ("end_hour", self.end_hour)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}")
            if not 0 <= value <= 24:
                raise ConfigurationError(f"{name} must be between 0 and 24, got {value}")
        if self.start_hour == self.end_hour:
            raise ConfigurationError(
                f"Business window {self.start_hour}-{self.end_hour} is empty; "
                "use 0-24 for a whole-day window"
            )
        if self.end_hour < self.start_hour:
            raise ConfigurationError(
                f"Business window {self.start_hour}-{self.end_hour} crosses midnight, "
                "which is not supported"
            )

    @property
    def start(self) -> TimeOfDay:
        return TimeOfDay(hour=self.start_hour)

    @property
    def end(self) -> TimeOfDay:
        return TimeOfDay(hour=self.end_hour)

    @property
    def hours(self) -> int:
        return compute_working_hours(self.start_hour, self.end_hour)

    @property
    def seconds(self) -> int:
        return self.hours * 3600

    def __str__(self) -> str:
        return f"{self.start} - {self.end}"


def normalize_weekday(name: str) -> str:
    """Return the lowercase weekday name, rejecting unknown names."""
    if not isinstance(name, str):
        raise ConfigurationError(f"Weekday must be a string, got {name!r}")
    weekday = name.strip().lower()
    if weekday not in WEEKDAY_NAMES:
        raise ConfigurationError(
            f"Unknown weekday '{name}'. Expected one of: {', '.join(WEEKDAY_NAMES)}"
        )
    return weekday


def normalize_holiday(value: str) -> str:
    """
    Validate a recurring holiday and return it as zero-padded ``DD/MM``.

    Args:
        value: Day and month, e.g. ``"25/12"`` or ``"1/5"``

    Returns:
        The canonical ``DD/MM`` form

    Raises:
        ConfigurationError: If the string is malformed or no such date exists
    """
    if not isinstance(value, str):
        raise ConfigurationError(f"Holiday must be a 'DD/MM' string, got {value!r}")
    match = _HOLIDAY_PATTERN.match(value.strip())
    if not match:
        raise ConfigurationError(f"Holiday '{value}' is not in 'DD/MM' format")
    day, month = int(match.group(1)), int(match.group(2))
    try:
        # 2000 is a leap year, so 29/02 is accepted
        date(2000, month, day)
    except ValueError as exc:
        raise ConfigurationError(f"Holiday '{value}' is not a valid calendar date") from exc
    return f"{day:02d}/{month:02d}"


def validate_timezone(name: str) -> str:
    """Ensure ``name`` is a known IANA timezone identifier."""
    if not isinstance(name, str) or not name.strip():
        raise ConfigurationError(f"Timezone must be a non-empty string, got {name!r}")
    try:
        pendulum.timezone(name.strip())
    except (ValueError, KeyError) as exc:
        raise ConfigurationError(f"Unknown timezone '{name}'") from exc
    return name.strip()
