"""
Domain layer - Pure business time logic without I/O.
"""

from .business_time import BusinessTime
from .exceptions import (
    BusinessTimeError,
    ConfigurationError,
    IntervalOrderError,
    InvalidDurationError,
    InvalidInstantError,
)
from .instants import ensure_instant, parse_instant
from .models import (
    WEEKDAY_NAMES,
    BusinessWindow,
    Direction,
    TimeOfDay,
    TimeUnit,
    compute_working_hours,
)

__all__ = [
    "BusinessTime",
    "BusinessTimeError",
    "BusinessWindow",
    "ConfigurationError",
    "Direction",
    "IntervalOrderError",
    "InvalidDurationError",
    "InvalidInstantError",
    "TimeOfDay",
    "TimeUnit",
    "WEEKDAY_NAMES",
    "compute_working_hours",
    "ensure_instant",
    "parse_instant",
]
