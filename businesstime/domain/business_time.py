"""
Core business time arithmetic.

``BusinessTime`` answers three kinds of questions about a fixed weekly
schedule: whether a date is a business day, how much business time lies
between two instants, and which instant lies a given amount of business
time before or after another one.

All decisions are taken in the configured timezone. Every public operation
converts its input into that zone first and, where it returns an instant,
converts the result back into the caller's zone.
"""

import logging
import math
from typing import Iterable, Iterator

from pendulum import DateTime

from .exceptions import (
    BusinessTimeError,
    ConfigurationError,
    IntervalOrderError,
    InvalidDurationError,
)
from .instants import InstantLike, ensure_instant
from .models import (
    WEEKDAY_NAMES,
    BusinessWindow,
    Direction,
    TimeOfDay,
    TimeUnit,
    compute_working_hours,
    normalize_holiday,
    normalize_weekday,
    validate_timezone,
)


logger = logging.getLogger(__name__)


# Day/month combinations in a leap year
_DAYS_IN_YEAR = 366

# The Gregorian calendar (weekdays included) repeats every 400 years
_GREGORIAN_CYCLE_DAYS = 146097


def _bounded(limit: int, operation: str) -> Iterator[int]:
    """Yield ``limit`` loop indices, then fail."""
    for index in range(limit):
        yield index
    raise BusinessTimeError(f"{operation} did not finish within {limit} day steps")


def _elapsed_seconds(start: DateTime, end: DateTime) -> float:
    # Measured in UTC so DST transitions shorten or lengthen the day
    return (end.in_timezone("UTC") - start.in_timezone("UTC")).total_seconds()


class BusinessTime:
    """
    Business calendar for a single timezone, weekly pattern and daily window.

    Example::

        bt = BusinessTime(
            timezone="Europe/Rome",
            business_days=["monday", "tuesday", "wednesday", "thursday", "friday"],
            start_hour=10,
            end_hour=19,
        )
        bt.compute_business_hours_in_interval(
            "2020-12-18T14:00:00+01:00", "2020-12-21T14:30:00+01:00"
        )  # 9.5
    """

    def __init__(
        self,
        timezone: str,
        business_days: Iterable[str],
        start_hour: int,
        end_hour: int,
        holidays: Iterable[str] = (),
    ) -> None:
        """
        Resolve and validate the business calendar.

        Args:
            timezone: IANA timezone in which business time is evaluated
            business_days: Lowercase English weekday names, e.g. "monday"
            start_hour: Hour at which the daily window opens (0-24)
            end_hour: Hour at which the daily window closes (0-24)
            holidays: Recurring "DD/MM" dates that are never business days

        Raises:
            ConfigurationError: If any part of the configuration is invalid
        """
        self._timezone = validate_timezone(timezone)
        self._window = BusinessWindow(start_hour=start_hour, end_hour=end_hour)

        if isinstance(business_days, str):
            raise ConfigurationError("business_days must be a collection of weekday names")
        self._business_days = frozenset(normalize_weekday(day) for day in business_days)
        if not self._business_days:
            raise ConfigurationError("At least one business day must be configured")

        if isinstance(holidays, str):
            raise ConfigurationError("holidays must be a collection of 'DD/MM' strings")
        self._holidays = frozenset(normalize_holiday(day) for day in holidays)
        if len(self._holidays) >= _DAYS_IN_YEAR:
            raise ConfigurationError("Holidays cover the whole year; no business day remains")

        # Longest run of consecutive days that can all be non-business days.
        # Within a year every day/month occurs once, so 7 * (holidays + 1)
        # days always contain a business day while that span fits in a year.
        idle_span = 7 * (len(self._holidays) + 1)
        self._max_idle_days = idle_span if idle_span < 365 else _GREGORIAN_CYCLE_DAYS

        logger.debug(
            "Configured business time: timezone=%s days=%s window=%s holidays=%d",
            self._timezone,
            ",".join(day for day in WEEKDAY_NAMES if day in self._business_days),
            self._window,
            len(self._holidays),
        )

    # -- configuration ------------------------------------------------------

    @property
    def timezone(self) -> str:
        return self._timezone

    @property
    def business_days(self) -> frozenset:
        return self._business_days

    @property
    def holidays(self) -> frozenset:
        return self._holidays

    @property
    def window(self) -> BusinessWindow:
        return self._window

    @property
    def start_of_day_time(self) -> TimeOfDay:
        return self._window.start

    @property
    def end_of_day_time(self) -> TimeOfDay:
        return self._window.end

    @staticmethod
    def compute_working_hours(start_hour: int, end_hour: int) -> int:
        """Hours per day of a window; wraps past midnight when end < start."""
        return compute_working_hours(start_hour, end_hour)

    @property
    def working_hours(self) -> int:
        """Hours per day of the configured window."""
        return self._window.hours

    def hours_to_days(self, hours: float) -> float:
        """Convert business hours into business days of the configured window."""
        return hours / self.working_hours

    # -- day classification -------------------------------------------------

    def is_business_day(self, instant: InstantLike) -> bool:
        """
        Check whether the local date of ``instant`` is a business day.

        Holidays take precedence over the weekly pattern.
        """
        local = self._to_local(instant)
        if local.format("DD/MM") in self._holidays:
            return False
        return WEEKDAY_NAMES[local.weekday()] in self._business_days

    # -- window boundaries --------------------------------------------------

    def _to_local(self, instant: InstantLike) -> DateTime:
        return ensure_instant(instant, self._timezone).in_timezone(self._timezone)

    @staticmethod
    def _at(local: DateTime, time_of_day: TimeOfDay) -> DateTime:
        """Place ``time_of_day`` on the local date of ``local``."""
        if time_of_day.hour == 24:
            midnight = local.set(hour=0, minute=0, second=0, microsecond=0)
            return midnight.add(days=1)
        return local.set(
            hour=time_of_day.hour,
            minute=time_of_day.minute,
            second=time_of_day.second,
            microsecond=0,
        )

    def _start_of_window(self, local: DateTime) -> DateTime:
        return self._at(local, self._window.start)

    def _end_of_window(self, local: DateTime) -> DateTime:
        return self._at(local, self._window.end)

    def _window_day(self, local: DateTime, direction: Direction) -> DateTime:
        """
        Return an instant on the date whose window ``local`` belongs to.

        Walking backward with a window that closes at 24, local midnight is
        the end of the previous day's window.
        """
        if (
            direction is Direction.BACKWARD
            and self._window.end_hour == 24
            and local.hour == 0
            and local.minute == 0
            and local.second == 0
            and local.microsecond == 0
        ):
            return local.subtract(days=1)
        return local

    def _next_window(self, day: DateTime, direction: Direction) -> DateTime:
        """Boundary of the adjacent day's window that a walk enters first."""
        if direction is Direction.FORWARD:
            return self._start_of_window(day.add(days=1))
        return self._end_of_window(day.subtract(days=1))

    # -- snapping -----------------------------------------------------------

    def snap_into_business_time(
        self,
        instant: InstantLike,
        direction: Direction = Direction.FORWARD,
    ) -> DateTime:
        """
        Move an instant onto the nearest business time in ``direction``.

        Forward:  06:00 -> 10:00 same day, 22:00 -> 10:00 next business day.
        Backward: 06:00 -> 19:00 previous business day, 22:00 -> 19:00 same day.

        The result is expressed in the configured timezone, not the
        caller's; this is a helper for the other operations.
        """
        direction = Direction(direction)
        local = self._to_local(instant)
        start = self._start_of_window(local)
        end = self._end_of_window(local)

        if start <= local <= end and self.is_business_day(local):
            return local

        if local < start:
            local = start if direction is Direction.FORWARD else self._next_window(local, direction)
        elif local > end:
            local = self._next_window(local, direction) if direction is Direction.FORWARD else end

        for _ in _bounded(self._max_idle_days + 2, "Snapping into business time"):
            day = self._window_day(local, direction)
            if self.is_business_day(day):
                return local
            local = self._next_window(day, direction)

    # -- intervals ----------------------------------------------------------

    def compute_business_time_in_interval(
        self,
        start: InstantLike,
        end: InstantLike,
        unit: TimeUnit = TimeUnit.SECONDS,
    ) -> float:
        """
        Sum the business time between ``start`` and ``end``.

        Args:
            start: Beginning of the interval
            end: End of the interval
            unit: Unit of the returned amount

        Returns:
            Business time in ``unit``, as an exact fraction

        Raises:
            IntervalOrderError: If ``start`` is after ``end``
        """
        unit = TimeUnit(unit)
        start_dt = ensure_instant(start, self._timezone)
        end_dt = ensure_instant(end, self._timezone)
        if start_dt > end_dt:
            raise IntervalOrderError(f"Start {start_dt} is after end {end_dt}")

        cursor = self.snap_into_business_time(start_dt)
        stop = self.snap_into_business_time(end_dt)

        total = 0.0
        limit = max(stop.toordinal() - cursor.toordinal(), 0) + 3
        for _ in _bounded(limit, "Interval accumulation"):
            if cursor >= stop:
                break
            if not self.is_business_day(cursor):
                cursor = self._next_window(cursor, Direction.FORWARD)
                continue
            if cursor.date() == stop.date():
                total += _elapsed_seconds(cursor, stop)
                cursor = stop
            else:
                total += _elapsed_seconds(cursor, self._end_of_window(cursor))
                cursor = self._next_window(cursor, Direction.FORWARD)

        amount = total / unit.seconds
        logger.debug(
            "Business time from %s to %s: %s %s",
            start_dt.isoformat(),
            end_dt.isoformat(),
            amount,
            unit.value,
        )
        return amount

    def compute_business_days_in_interval(self, start: InstantLike, end: InstantLike) -> float:
        """Business hours in the interval divided by the window length."""
        hours = self.compute_business_hours_in_interval(start, end)
        return self.hours_to_days(hours)

    def compute_business_hours_in_interval(self, start: InstantLike, end: InstantLike) -> float:
        return self.compute_business_time_in_interval(start, end, TimeUnit.HOURS)

    def compute_business_minutes_in_interval(self, start: InstantLike, end: InstantLike) -> float:
        return self.compute_business_time_in_interval(start, end, TimeUnit.MINUTES)

    def compute_business_seconds_in_interval(self, start: InstantLike, end: InstantLike) -> float:
        return self.compute_business_time_in_interval(start, end, TimeUnit.SECONDS)

    # -- shifting -----------------------------------------------------------

    def add_business_seconds_to_date(self, instant: InstantLike, seconds: float) -> DateTime:
        """
        Move ``instant`` forward by ``seconds`` of business time.

        The result is truncated to the minute and expressed in the
        timezone of ``instant``. Zero seconds returns ``instant`` as is.
        """
        return self._shift(instant, seconds, Direction.FORWARD)

    def add_business_hours_to_date(self, instant: InstantLike, hours: float) -> DateTime:
        return self.add_business_seconds_to_date(instant, 3600 * hours)

    def remove_business_seconds_from_date(self, instant: InstantLike, seconds: float) -> DateTime:
        """
        Move ``instant`` backward by ``seconds`` of business time.

        The result is truncated to the minute and expressed in the
        timezone of ``instant``. Zero seconds returns ``instant`` as is.
        """
        return self._shift(instant, seconds, Direction.BACKWARD)

    def remove_business_hours_from_date(self, instant: InstantLike, hours: float) -> DateTime:
        return self.remove_business_seconds_from_date(instant, 3600 * hours)

    def _shift(self, instant: InstantLike, seconds: float, direction: Direction) -> DateTime:
        if seconds < 0:
            raise InvalidDurationError(f"Duration must not be negative, got {seconds} seconds")
        if seconds == 0:
            return instant

        original = ensure_instant(instant, self._timezone)
        cursor = self.snap_into_business_time(original, direction)
        remaining = seconds

        windows_needed = math.ceil(seconds / self._window.seconds) + 2
        limit = windows_needed * (self._max_idle_days + 2)
        for _ in _bounded(limit, "Shifting by business time"):
            if remaining <= 0:
                break
            day = self._window_day(cursor, direction)
            if not self.is_business_day(day):
                cursor = self._next_window(day, direction)
                continue

            if direction is Direction.FORWARD:
                available = _elapsed_seconds(cursor, self._end_of_window(day))
            else:
                available = _elapsed_seconds(self._start_of_window(day), cursor)

            if remaining <= available:
                cursor = cursor.add(seconds=direction.step * remaining)
                remaining = 0
            else:
                remaining -= available
                cursor = self._next_window(day, direction)

        result = cursor.set(second=0, microsecond=0).in_timezone(original.tzinfo)
        logger.debug(
            "Shifted %s %s by %s business seconds: %s",
            original.isoformat(),
            direction.value,
            seconds,
            result.isoformat(),
        )
        return result
