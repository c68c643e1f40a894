"""
Domain-specific exception hierarchy for the business time engine.
"""


class BusinessTimeError(Exception):
    """Base class for all business time errors."""


class ConfigurationError(BusinessTimeError, ValueError):
    """Raised when the business calendar configuration is invalid."""


class IntervalOrderError(BusinessTimeError, ValueError):
    """Raised when an interval starts after it ends."""


class InvalidInstantError(BusinessTimeError, ValueError):
    """Raised when an instant cannot be parsed or is not a date-time."""


class InvalidDurationError(BusinessTimeError, ValueError):
    """Raised when a negative duration is shifted onto an instant."""
