"""
Main CLI application using Typer.

Browses availability and checks bookings against a YAML fixture store.
"""

import logging
from datetime import date, time
from pathlib import Path
from typing import Annotated, Optional

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.clock import SystemClock
from ..adapters.memory_store import InMemoryStore
from ..config import AppConfig, get_default_config_path
from ..domain.conflict_checker import ConflictChecker
from ..domain.exceptions import ClinicSlotsError
from ..domain.models import BookingRequest, TimeInterval, WEEKDAY_NAMES
from ..domain.slot_generator import SlotGenerator
from ..services.availability import AvailabilityService
from ..services.reservations import ReservationService

app = typer.Typer(
    name="clinicslots",
    help="Inspect clinic appointment availability",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./clinicslots.yaml"),
]
DataOption = Annotated[
    Optional[Path],
    typer.Option("--data", help="Path to a YAML data file. Overrides data_file from the config."),
]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load(config_file: Optional[Path], data_file: Optional[Path]):
    """Load configuration and the data store, or exit with an error."""
    config_path = config_file or get_default_config_path()
    if config_path.exists():
        config = AppConfig.load_from_yaml(config_path)
    elif config_file is None:
        config = AppConfig()
    else:
        raise FileNotFoundError(f"Config file not found: {config_path}")

    data_path = data_file or config.data_file
    if data_path is None:
        console.print("[bold red]Error:[/bold red] No data file given. Use --data or set data_file in the config.")
        raise typer.Exit(1)

    return config, InMemoryStore.from_yaml(data_path)


def _build_checker(config: AppConfig) -> ConflictChecker:
    return ConflictChecker(
        cancellation_lead_hours=config.booking.cancellation_lead_hours,
        one_reservation_per_day=config.booking.one_reservation_per_day,
    )


def _build_availability(config: AppConfig, store: InMemoryStore) -> AvailabilityService:
    return AvailabilityService(
        working_hour_store=store,
        reservation_store=store,
        slot_generator=SlotGenerator(),
        conflict_checker=_build_checker(config),
        rules=config.booking,
    )


def _parse_date(value: str) -> date:
    try:
        return pendulum.from_format(value, "YYYY-MM-DD").date()
    except ValueError as e:
        console.print(f"[red]Could not parse date '{value}': {e}[/red]")
        raise typer.Exit(1)


def _parse_time(value: str) -> time:
    try:
        return time.fromisoformat(value)
    except ValueError as e:
        console.print(f"[red]Could not parse time '{value}': {e}[/red]")
        raise typer.Exit(1)


def _fail(error: Exception) -> None:
    console.print(f"[bold red]Error:[/bold red] {error}")
    raise typer.Exit(1)


@app.command()
def slots(
    specialty_id: Annotated[int, typer.Argument(help="Specialty id")],
    on_date: Annotated[Optional[str], typer.Option("--date", "-d", help="Date (YYYY-MM-DD). Defaults to today.")] = None,
    duration: Annotated[Optional[int], typer.Option("--duration", help="Use the flat clinic window with this slot length in minutes")] = None,
    config_file: ConfigOption = None,
    data_file: DataOption = None,
    verbose: VerboseOption = False,
):
    """
    List free slots of a specialty on one day.

    Examples:

        clinicslots slots 1 --date 2026-10-19
        clinicslots slots 1 --date 2026-10-19 --duration 20
    """
    _configure_logging(verbose)
    try:
        config, store = _load(config_file, data_file)
        day = _parse_date(on_date) if on_date else pendulum.today(config.timezone).date()
        service = _build_availability(config, store)

        if duration is not None:
            found = service.available_slots_for_window(specialty_id, day, duration_minutes=duration)
        else:
            found = service.available_slots_for_day(specialty_id, day)
    except (FileNotFoundError, ValueError, ClinicSlotsError) as e:
        _fail(e)

    console.print()
    if not found:
        console.print(f"[yellow]No free slots for specialty {specialty_id} on {day}.[/yellow]\n")
        return

    console.print(f"[bold green]{len(found)} free slot(s) on {WEEKDAY_NAMES[day.weekday()]}, {day}:[/bold green]\n")
    for slot in found:
        console.print(f"  {slot.format_display()}")
    console.print()


@app.command(name="range")
def range_(
    specialty_id: Annotated[int, typer.Argument(help="Specialty id")],
    start: Annotated[str, typer.Option("--start", help="Start date (YYYY-MM-DD)")],
    end: Annotated[str, typer.Option("--end", help="End date (YYYY-MM-DD)")],
    extended: Annotated[bool, typer.Option("--extended", help="Allow the extended range limit")] = False,
    config_file: ConfigOption = None,
    data_file: DataOption = None,
    verbose: VerboseOption = False,
):
    """
    Show free slots per day over a date range.
    """
    _configure_logging(verbose)
    try:
        config, store = _load(config_file, data_file)
        service = _build_availability(config, store)
        max_days = config.booking.extended_range_days if extended else None
        outcome = service.available_slots_for_range(
            specialty_id, _parse_date(start), _parse_date(end), max_days=max_days
        )
    except (FileNotFoundError, ValueError, ClinicSlotsError) as e:
        _fail(e)

    if not outcome:
        console.print(f"[bold red]Error:[/bold red] {outcome.message}")
        raise typer.Exit(1)

    table = Table(
        title=f"Availability for specialty {specialty_id}",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Date", style="bold yellow")
    table.add_column("Day")
    table.add_column("Free", justify="right")
    table.add_column("Slots", style="dim")

    for day, day_slots in outcome.value.items():
        table.add_row(
            day.isoformat(),
            WEEKDAY_NAMES[day.weekday()],
            str(len(day_slots)),
            ", ".join(str(slot.interval) for slot in day_slots) or "-",
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def working_hours(
    specialty_id: Annotated[int, typer.Argument(help="Specialty id")],
    config_file: ConfigOption = None,
    data_file: DataOption = None,
):
    """
    List the active working-hour windows of a specialty.
    """
    try:
        _, store = _load(config_file, data_file)
    except (FileNotFoundError, ValueError, ClinicSlotsError) as e:
        _fail(e)

    rows = store.working_hours.all_active(specialty_id)
    if not rows:
        console.print(f"[yellow]No working hours configured for specialty {specialty_id}.[/yellow]")
        return

    table = Table(
        title=f"Working hours of specialty {specialty_id}",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Id", justify="right")
    table.add_column("Day", style="bold yellow")
    table.add_column("Window")
    table.add_column("Slot (min)", justify="right")

    for row in rows:
        table.add_row(str(row.id), row.day_name, str(row.interval), str(row.slot_duration_minutes))

    console.print()
    console.print(table)
    console.print()


@app.command()
def check_booking(
    specialty_id: Annotated[int, typer.Argument(help="Specialty id")],
    user_id: Annotated[int, typer.Argument(help="Requesting user id")],
    on_date: Annotated[str, typer.Option("--date", "-d", help="Date (YYYY-MM-DD)")],
    start: Annotated[str, typer.Option("--start", help="Start time (HH:MM)")],
    end: Annotated[str, typer.Option("--end", help="End time (HH:MM)")],
    config_file: ConfigOption = None,
    data_file: DataOption = None,
    verbose: VerboseOption = False,
):
    """
    Check whether a booking request would be admitted.
    """
    _configure_logging(verbose)
    try:
        config, store = _load(config_file, data_file)
        request = BookingRequest(
            specialty_id=specialty_id,
            date=_parse_date(on_date),
            interval=TimeInterval(start=_parse_time(start), end=_parse_time(end)),
            requesting_user_id=user_id,
        )
        service = ReservationService(
            reservation_store=store,
            conflict_checker=_build_checker(config),
            clock=SystemClock(config.timezone),
        )
        outcome = service.check_create(request)
    except (FileNotFoundError, ValueError, ClinicSlotsError) as e:
        _fail(e)

    if outcome:
        console.print(f"[green]✓ {request.interval} on {request.date} can be booked.[/green]")
    else:
        console.print(f"[bold red]✗ Rejected ({outcome.rejection.value}):[/bold red] {outcome.message}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]clinicslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
