"""
Main CLI application using Typer.
"""

import asyncio
import logging
from datetime import date
from pathlib import Path
from typing import Annotated, Optional

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..adapters.memory_store import LoggingNotifier, MemoryStore
from ..adapters.supabase_notifier import SupabaseNotifier
from ..adapters.supabase_store import SupabaseStore
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import (
    ConfigError,
    SlotConflict,
    StoreUnavailable,
    ValidationError,
)
from ..services.booking_service import BookingService

app = typer.Typer(
    name="barberbooking",
    help="Resolve bookable slots and manage barbershop appointments",
    add_completion=False
)
availability_app = typer.Typer(help="Manage barber availability windows")
app.add_typer(availability_app, name="availability")

console = Console()

ConfigOption = Annotated[
    Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")
]
MockOption = Annotated[
    bool, typer.Option("--mock", help="Use the bundled mock data instead of the hosted backend.")
]

STATUS_STYLES = {
    "confirmed": "green",
    "pending": "yellow",
    "cancelled": "red",
    "completed": "blue",
}


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """Barbershop booking tools."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path], mock: bool) -> AppConfig:
    config_path = config_file or get_default_config_path()
    if mock and not config_path.exists():
        # Mock mode works without any configuration
        return AppConfig()
    return AppConfig.load_from_yaml(config_path)


def _build_service(config: AppConfig, mock: bool) -> BookingService:
    """Wire the booking service to the hosted backend or the mock store."""
    if mock:
        console.print("[yellow]⚠  MOCK MODE: using bundled test data[/yellow]\n")
        return BookingService(
            store=MemoryStore.from_fixture(today=pendulum.now(config.timezone).date()),
            config=config,
            notifier=LoggingNotifier(),
        )

    if not config.has_backend:
        raise ConfigError("supabase_url and supabase_key must be configured (or use --mock).")

    timeout = config.booking.request_timeout_seconds
    return BookingService(
        store=SupabaseStore(config.supabase_url, config.supabase_key, timeout=timeout),
        config=config,
        notifier=SupabaseNotifier(
            config.supabase_url,
            config.supabase_key,
            function_name=config.notifications.function_name,
            timeout=timeout,
        ),
    )


def _parse_date(value: Optional[str], config: AppConfig) -> date:
    if not value:
        return pendulum.now(config.timezone).date()
    try:
        return pendulum.from_format(value, "YYYY-MM-DD").date()
    except ValueError as e:
        raise ValidationError(f"Invalid date '{value}' (expected YYYY-MM-DD): {e}") from e


def _fail(message: str) -> None:
    console.print(f"[bold red]Error:[/bold red] {message}")
    raise typer.Exit(1)


def _run(coro):
    """
    Run a coroutine and turn booking errors into user-facing messages.
    """
    try:
        return asyncio.run(coro)
    except ValidationError as e:
        for message in e.messages:
            console.print(f"[bold red]✗[/bold red] {message}")
        raise typer.Exit(1)
    except SlotConflict as e:
        _fail(str(e))
    except StoreUnavailable as e:
        logging.getLogger(__name__).debug("Store failure: %s", e)
        _fail("The booking system is temporarily unavailable. Please try again.")


def _guard_setup(config_file: Optional[Path], mock: bool):
    try:
        config = _load_config(config_file, mock)
        return config, _build_service(config, mock)
    except ConfigError as e:
        _fail(str(e))


@app.command()
def slots(
    barber_id: Annotated[str, typer.Argument(help="Barber id")],
    day: Annotated[Optional[str], typer.Option("--date", "-d", help="Date (YYYY-MM-DD), default today")] = None,
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Show the bookable slots of one barber for one day.

    Examples:

        barberbooking slots b-ahmad --date 2026-10-20

        barberbooking slots b-mikkel --mock
    """
    config, service = _guard_setup(config_file, mock)

    async def _resolve():
        target = _parse_date(day, config)
        return target, await service.get_day_slots(barber_id, target)

    target, day_slots = _run(_resolve())

    if not day_slots:
        console.print(
            f"[yellow]⚠ No opening hours for {barber_id} on {target.isoformat()}.[/yellow]\n"
            "The barber is closed that day. Try another date."
        )
        return

    available_count = sum(1 for slot in day_slots if slot.available)
    table = Table(
        title=f"{target.isoformat()} · {available_count}/{len(day_slots)} available",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Time", style="bold")
    table.add_column("Status")
    table.add_column("Reason", style="dim")

    for slot in day_slots:
        style = "green" if slot.available else ("red" if slot.booked else "dim")
        table.add_row(slot.time, f"[{style}]{slot.status}[/{style}]", slot.reason or "")

    console.print()
    console.print(table)
    console.print()


@app.command()
def book(
    barber_id: Annotated[str, typer.Argument(help="Barber id")],
    day: Annotated[str, typer.Option("--date", "-d", help="Date (YYYY-MM-DD)")],
    time: Annotated[str, typer.Option("--time", "-t", help="Time (HH:MM)")],
    name: Annotated[str, typer.Option("--name", help="Customer name")],
    email: Annotated[str, typer.Option("--email", help="Customer email")],
    phone: Annotated[str, typer.Option("--phone", help="Customer phone")],
    service_type: Annotated[Optional[str], typer.Option("--service", "-s", help="Service id from the catalog")] = None,
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Book an appointment in a free slot.
    """
    config, service = _guard_setup(config_file, mock)

    async def _book():
        return await service.book(
            {
                "customer_name": name,
                "customer_email": email,
                "customer_phone": phone,
                "barber_id": barber_id,
                "appointment_date": _parse_date(day, config),
                "appointment_time": time,
                "service_type": service_type,
            }
        )

    appointment = _run(_book())

    console.print(Panel.fit(
        f"[bold green]✓ Booking confirmed![/bold green]\n\n"
        f"[bold]Date:[/bold] {appointment.appointment_date.isoformat()} {appointment.appointment_time}\n"
        f"[bold]Barber:[/bold] {appointment.barber_id}\n"
        f"[bold]Service:[/bold] {config.service_name(appointment.service_type)}\n"
        f"[bold]Reference:[/bold] {appointment.id}",
        title="Appointment"
    ))


@app.command()
def barbers(
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    List active barbers and whether they work today.
    """
    config, service = _guard_setup(config_file, mock)

    async def _load():
        return await service.list_barbers(), await service.barbers_available_on()

    active, available_today = _run(_load())

    if not active:
        console.print("[yellow]No active barbers.[/yellow]")
        return

    table = Table(title="Barbers", show_header=True, header_style="bold cyan")
    table.add_column("Id", style="dim")
    table.add_column("Name", style="bold yellow")
    table.add_column("Today")

    for barber in active:
        today = "[green]available[/green]" if available_today.get(barber.id) else "[dim]off[/dim]"
        table.add_row(barber.id, barber.name, today)

    console.print()
    console.print(table)
    console.print()


@app.command()
def services(
    language: Annotated[str, typer.Option("--language", "-l", help="Display language (en, da)")] = "en",
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    List the services catalog.
    """
    try:
        config = _load_config(config_file, mock)
    except ConfigError as e:
        _fail(str(e))

    catalog = config.active_services()
    if not catalog:
        console.print("[yellow]No services in the catalog.[/yellow]")
        return

    table = Table(title="Services", show_header=True, header_style="bold cyan")
    table.add_column("Id", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Category")
    table.add_column("Duration")
    table.add_column("Price", justify="right")

    for item in catalog:
        name = item.display_name(language)
        if item.featured:
            name = f"★ {name}"
        table.add_row(item.id, name, item.category, item.duration or "", item.display_price())

    console.print()
    console.print(table)
    console.print()


@app.command()
def appointments(
    status: Annotated[str, typer.Option("--status", help="all, confirmed, pending, cancelled or completed")] = "all",
    view: Annotated[str, typer.Option("--view", help="today, upcoming or all")] = "today",
    sort_by: Annotated[str, typer.Option("--sort", help="date, time, customer, barber or status")] = "date",
    ascending: Annotated[bool, typer.Option("--asc/--desc", help="Sort order")] = False,
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    List appointments for the admin dashboard.
    """
    config, service = _guard_setup(config_file, mock)

    async def _load():
        listed = await service.list_appointments(
            status=status, view=view, sort_by=sort_by, ascending=ascending
        )
        names = {barber.id: barber.name for barber in await service.list_barbers()}
        return listed, names

    listed, barber_names = _run(_load())

    if not listed:
        scope = f"{status} " if status != "all" else ""
        console.print(f"[yellow]No {scope}appointments found ({view}).[/yellow]")
        return

    table = Table(title=f"Appointments ({view})", show_header=True, header_style="bold cyan")
    table.add_column("Date")
    table.add_column("Time")
    table.add_column("Customer", style="bold")
    table.add_column("Phone", style="dim")
    table.add_column("Barber")
    table.add_column("Service")
    table.add_column("Status")
    table.add_column("Id", style="dim")

    for appointment in listed:
        style = STATUS_STYLES.get(appointment.status.value, "white")
        table.add_row(
            appointment.appointment_date.isoformat(),
            appointment.appointment_time,
            appointment.customer_name,
            appointment.customer_phone,
            barber_names.get(appointment.barber_id, "Unknown"),
            config.service_name(appointment.service_type),
            f"[{style}]{appointment.status.value}[/{style}]",
            appointment.id or "",
        )

    console.print()
    console.print(table)
    console.print()


@app.command("appointment-status")
def appointment_status(
    appointment_id: Annotated[str, typer.Argument(help="Appointment id")],
    status: Annotated[str, typer.Argument(help="confirmed, pending, cancelled or completed")],
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Change the status of an appointment.
    """
    _, service = _guard_setup(config_file, mock)

    updated = _run(service.update_appointment_status(appointment_id, status))
    console.print(f"[green]✓ Appointment {updated.id} is now {updated.status.value}.[/green]")


@availability_app.command("list")
def availability_list(
    barber_id: Annotated[str, typer.Argument(help="Barber id")],
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Show a barber's availability windows.
    """
    _, service = _guard_setup(config_file, mock)

    windows = _run(service.list_availability(barber_id))

    if not windows:
        console.print(f"[yellow]No availability windows for {barber_id}.[/yellow]")
        return

    table = Table(title=f"Availability · {barber_id}", show_header=True, header_style="bold cyan")
    table.add_column("Id", style="dim")
    table.add_column("From")
    table.add_column("To")
    table.add_column("Hours")
    table.add_column("Available")

    for window in windows:
        table.add_row(
            window.id or "",
            window.from_date.isoformat(),
            window.to_date.isoformat(),
            f"{window.start_time} – {window.end_time}",
            "✅" if window.is_available else "❌",
        )

    console.print()
    console.print(table)
    console.print()


@availability_app.command("set")
def availability_set(
    barber_id: Annotated[str, typer.Argument(help="Barber id")],
    from_date: Annotated[str, typer.Option("--from", help="First day (YYYY-MM-DD)")],
    to_date: Annotated[str, typer.Option("--to", help="Last day (YYYY-MM-DD), inclusive")],
    start_time: Annotated[str, typer.Option("--start", help="Daily opening time (HH:MM)")] = "09:00",
    end_time: Annotated[str, typer.Option("--end", help="Daily closing time (HH:MM)")] = "18:00",
    unavailable: Annotated[bool, typer.Option("--unavailable", help="Mark the range as not bookable.")] = False,
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Create or update the window for an exact date range.
    """
    config, service = _guard_setup(config_file, mock)

    async def _set():
        return await service.set_availability(
            barber_id,
            _parse_date(from_date, config),
            _parse_date(to_date, config),
            start_time,
            end_time,
            is_available=not unavailable,
        )

    window = _run(_set())
    console.print(f"[green]✓ Availability updated:[/green] {window}")


@availability_app.command("delete")
def availability_delete(
    window_id: Annotated[str, typer.Argument(help="Availability window id")],
    config_file: ConfigOption = None,
    mock: MockOption = False,
):
    """
    Delete an availability window.
    """
    _, service = _guard_setup(config_file, mock)

    _run(service.delete_availability(window_id))
    console.print(f"[green]✓ Availability window {window_id} deleted.[/green]")


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]barberbooking[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
