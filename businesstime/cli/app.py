"""
Main CLI application using Typer.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import NoReturn, Optional, Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ..config import BusinessTimeConfig, get_default_config_path
from ..domain.business_time import BusinessTime
from ..domain.exceptions import BusinessTimeError
from ..domain.models import WEEKDAY_NAMES, Direction

app = typer.Typer(
    name="businesstime",
    help="Compute and shift business time over a weekly schedule",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./businesstime.yaml"),
]


class IntervalUnit(str, Enum):
    days = "days"
    hours = "hours"
    minutes = "minutes"
    seconds = "seconds"


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    Business time calculations driven by a YAML configuration.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


def _load_engine(config_file: Optional[Path]) -> BusinessTime:
    config_path = config_file or get_default_config_path()
    config = BusinessTimeConfig.load_from_yaml(config_path)
    return config.build_engine()


def _fail(error: Exception) -> NoReturn:
    console.print(f"[bold red]Error:[/bold red] {escape(str(error))}")
    raise typer.Exit(1)


def _format_amount(amount: float) -> str:
    if float(amount).is_integer():
        return str(int(amount))
    return str(amount)


def _duration_seconds(hours: Optional[float], seconds: Optional[float]) -> float:
    if (hours is None) == (seconds is None):
        console.print("[red]Error: pass exactly one of --hours or --seconds.[/red]")
        raise typer.Exit(1)
    return 3600 * hours if hours is not None else seconds


@app.command("is-business-day")
def is_business_day(
    instant: Annotated[str, typer.Argument(help="ISO-8601 date-time, e.g. 2020-12-28T14:00:00+01:00")],
    config_file: ConfigOption = None,
):
    """
    Check whether an instant falls on a business day.
    """
    try:
        engine = _load_engine(config_file)
        result = engine.is_business_day(instant)
    except (FileNotFoundError, BusinessTimeError) as e:
        _fail(e)

    if result:
        console.print(f"[green]✓ {instant} is a business day[/green]")
    else:
        console.print(f"[yellow]✗ {instant} is not a business day[/yellow]")


@app.command()
def interval(
    start: Annotated[str, typer.Argument(help="Start of the interval (ISO-8601)")],
    end: Annotated[str, typer.Argument(help="End of the interval (ISO-8601)")],
    unit: Annotated[IntervalUnit, typer.Option("--unit", "-u", help="Unit of the result")] = IntervalUnit.hours,
    config_file: ConfigOption = None,
):
    """
    Measure the business time between two instants.

    Examples:

        businesstime interval 2020-12-18T14:00:00+01:00 2020-12-21T14:30:00+01:00

        businesstime interval 2020-12-28T13:45:00+01:00 2020-12-28T14:00:00+01:00 --unit minutes
    """
    try:
        engine = _load_engine(config_file)
        measure = {
            IntervalUnit.days: engine.compute_business_days_in_interval,
            IntervalUnit.hours: engine.compute_business_hours_in_interval,
            IntervalUnit.minutes: engine.compute_business_minutes_in_interval,
            IntervalUnit.seconds: engine.compute_business_seconds_in_interval,
        }[unit]
        amount = measure(start, end)
    except (FileNotFoundError, BusinessTimeError) as e:
        _fail(e)

    console.print(f"{_format_amount(amount)} business {unit.value}")


@app.command()
def add(
    instant: Annotated[str, typer.Argument(help="Instant to shift (ISO-8601)")],
    hours: Annotated[Optional[float], typer.Option("--hours", help="Business hours to add")] = None,
    seconds: Annotated[Optional[float], typer.Option("--seconds", help="Business seconds to add")] = None,
    config_file: ConfigOption = None,
):
    """
    Move an instant forward by business time.
    """
    amount = _duration_seconds(hours, seconds)
    try:
        engine = _load_engine(config_file)
        result = engine.add_business_seconds_to_date(instant, amount)
    except (FileNotFoundError, BusinessTimeError) as e:
        _fail(e)

    console.print(result.isoformat() if amount else instant)


@app.command()
def remove(
    instant: Annotated[str, typer.Argument(help="Instant to shift (ISO-8601)")],
    hours: Annotated[Optional[float], typer.Option("--hours", help="Business hours to remove")] = None,
    seconds: Annotated[Optional[float], typer.Option("--seconds", help="Business seconds to remove")] = None,
    config_file: ConfigOption = None,
):
    """
    Move an instant backward by business time.
    """
    amount = _duration_seconds(hours, seconds)
    try:
        engine = _load_engine(config_file)
        result = engine.remove_business_seconds_from_date(instant, amount)
    except (FileNotFoundError, BusinessTimeError) as e:
        _fail(e)

    console.print(result.isoformat() if amount else instant)


@app.command()
def snap(
    instant: Annotated[str, typer.Argument(help="Instant to snap (ISO-8601)")],
    backward: Annotated[bool, typer.Option("--backward", help="Snap to the previous business window instead of the next one.")] = False,
    config_file: ConfigOption = None,
):
    """
    Snap an instant onto the nearest business time.
    """
    direction = Direction.BACKWARD if backward else Direction.FORWARD
    try:
        engine = _load_engine(config_file)
        result = engine.snap_into_business_time(instant, direction)
    except (FileNotFoundError, BusinessTimeError) as e:
        _fail(e)

    console.print(result.isoformat())


@app.command("hours-to-days")
def hours_to_days(
    hours: Annotated[float, typer.Argument(help="Business hours to convert")],
    config_file: ConfigOption = None,
):
    """
    Convert business hours into business days of the configured window.
    """
    try:
        engine = _load_engine(config_file)
    except (FileNotFoundError, BusinessTimeError) as e:
        _fail(e)

    console.print(f"{_format_amount(engine.hours_to_days(hours))} business days")


@app.command("show-config")
def show_config(
    config_file: ConfigOption = None,
):
    """
    Show the resolved business calendar.
    """
    try:
        engine = _load_engine(config_file)
    except (FileNotFoundError, BusinessTimeError) as e:
        _fail(e)

    table = Table(
        title="Business calendar",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Setting", style="bold yellow")
    table.add_column("Value")

    table.add_row("Timezone", engine.timezone)
    table.add_row(
        "Business days",
        ", ".join(day for day in WEEKDAY_NAMES if day in engine.business_days),
    )
    table.add_row("Business hours", f"{engine.window} ({engine.working_hours} h/day)")
    table.add_row("Holidays", ", ".join(sorted(engine.holidays, key=_holiday_sort_key)) or "-")

    console.print()
    console.print(table)
    console.print()


def _holiday_sort_key(holiday: str):
    day, month = holiday.split("/")
    return int(month), int(day)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]businesstime[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
