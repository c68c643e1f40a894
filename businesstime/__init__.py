"""
businesstime
~~~~~~~~~~~~

Business-hours arithmetic over a weekly schedule with recurring holidays.

Basic usage::

    from businesstime import BusinessTime

    bt = BusinessTime(
        timezone="Europe/Rome",
        business_days=["monday", "tuesday", "wednesday", "thursday", "friday"],
        start_hour=10,
        end_hour=19,
        holidays=["25/12", "26/12"],
    )
    bt.compute_business_hours_in_interval(
        "2020-12-28T13:45:00+01:00", "2020-12-28T14:00:00+01:00"
    )  # 0.25
    bt.add_business_hours_to_date("2020-12-28T10:45:00+01:00", 10)
"""

from businesstime.domain import (
    BusinessTime,
    BusinessTimeError,
    ConfigurationError,
    Direction,
    IntervalOrderError,
    InvalidDurationError,
    InvalidInstantError,
    TimeUnit,
    compute_working_hours,
)

__version__ = "0.1.0"

__all__ = [
    "BusinessTime",
    "BusinessTimeError",
    "ConfigurationError",
    "Direction",
    "IntervalOrderError",
    "InvalidDurationError",
    "InvalidInstantError",
    "TimeUnit",
    "compute_working_hours",
    "__version__",
]
