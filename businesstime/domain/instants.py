"""
Conversion of caller-supplied instants into pendulum date-times.
"""

from datetime import datetime
from typing import Union

import pendulum
from pendulum import DateTime

from .exceptions import InvalidInstantError

InstantLike = Union[DateTime, datetime, str]


def parse_instant(text: str, timezone: str) -> DateTime:
    """
    Parse an ISO-8601 string into a date-time.

    Strings without an offset are read as wall-clock time in ``timezone``.

    Raises:
        InvalidInstantError: If the text is not an ISO-8601 date-time
    """
    try:
        parsed = pendulum.parse(text.strip(), tz=timezone)
    except ValueError as exc:
        raise InvalidInstantError(f"Cannot parse instant '{text}': {exc}") from exc

    if not isinstance(parsed, DateTime):
        raise InvalidInstantError(f"'{text}' is not a date-time")
    return parsed


def ensure_instant(value: InstantLike, timezone: str) -> DateTime:
    """
    Return ``value`` as a pendulum ``DateTime``.

    Naive ``datetime`` objects are interpreted in ``timezone``.
    """
    if isinstance(value, DateTime) and value.tzinfo is not None:
        return value
    if isinstance(value, datetime):
        return pendulum.instance(value, tz=timezone)
    if isinstance(value, str):
        return parse_instant(value, timezone)
    raise InvalidInstantError(
        f"Expected a datetime or ISO-8601 string, got {type(value).__name__}"
    )
