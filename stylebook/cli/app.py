"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, Optional

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ..adapters.http_store import HttpDocumentStore
from ..adapters.mock_store import MockDocumentStore
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import StylebookError
from ..domain.models import Weekday
from ..domain.slot_generator import SlotGenerator, group_slots_by_date
from ..services.availability import AvailabilityService, DocumentStoreProtocol

app = typer.Typer(
    name="stylebook",
    help="Bookable appointment slots from a stylist's weekly hours",
    add_completion=False
)

console = Console()

logger = logging.getLogger(__name__)

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")
]
MockOption = Annotated[
    bool,
    typer.Option("--mock", help="Use the bundled mock data instead of the document store.")
]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    """
    Load the config file.

    An explicit --config must exist; a missing default config.yaml just
    means built-in defaults.
    """
    if config_file is not None:
        return AppConfig.load_from_yaml(config_file)

    config_path = get_default_config_path()
    if not config_path.exists():
        logger.debug("No config file at %s, using defaults", config_path)
        return AppConfig()
    return AppConfig.load_from_yaml(config_path)


def _build_store(config: AppConfig, mock: bool) -> DocumentStoreProtocol:
    if mock:
        return MockDocumentStore(data_file=config.store.mock_data_file)

    if not config.store.base_url:
        raise ValueError(
            "No document store configured. Set store.base_url in the config file "
            "or use --mock."
        )

    return HttpDocumentStore(
        base_url=config.store.base_url,
        api_key=config.store.api_key,
        timeout=config.store.timeout_seconds
    )


def _parse_now(value: Optional[str], tz: str) -> Optional[pendulum.DateTime]:
    if value is None:
        return None
    try:
        parsed = pendulum.parse(value, tz=tz)
    except Exception as e:
        raise ValueError(f"Could not parse --now '{value}': {e}") from e
    if not isinstance(parsed, pendulum.DateTime):
        raise ValueError(f"--now must be a date and time, got '{value}'")
    return parsed


def _parse_date(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    try:
        parsed = pendulum.from_format(value, "YYYY-MM-DD")
    except ValueError as e:
        raise ValueError(f"--date must be YYYY-MM-DD, got '{value}'") from e
    return parsed.to_date_string()


@app.command()
def slots(
    provider: Annotated[str, typer.Argument(help="Stylist id or configured alias")],
    service: Annotated[Optional[str], typer.Option("--service", "-s", help="Size slots to one of the stylist's services")] = None,
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Service duration in minutes")] = None,
    days: Annotated[Optional[int], typer.Option("--days", help="Number of days to look ahead")] = None,
    now: Annotated[Optional[str], typer.Option("--now", help="Pretend it is this moment (e.g. '2024-11-23 14:00')")] = None,
    date: Annotated[Optional[str], typer.Option("--date", help="Only show slots on this day (YYYY-MM-DD)")] = None,
    config_file: ConfigOption = None,
    mock: MockOption = False,
    verbose: VerboseOption = False,
):
    """
    List bookable slots for a stylist, grouped by day.

    Examples:

        stylebook slots amara-okafor --mock

        stylebook slots amara-okafor --service knotless-braids --mock

        stylebook slots amara-okafor --duration 90 --days 7

        stylebook slots amara-okafor --date 2024-11-23 --mock
    """
    _configure_logging(verbose)

    try:
        config = _load_config(config_file)
        tz = config.timezone or pendulum.local_timezone().name

        provider_id = config.resolve_provider(provider)
        days_forward = days if days is not None else config.defaults.days_forward
        service_duration = duration if duration is not None else config.defaults.service_duration_minutes
        generation_time = _parse_now(now, tz)
        selected_date = _parse_date(date)

        availability_service = AvailabilityService(
            store=_build_store(config, mock),
            slot_generator=SlotGenerator(timezone=tz)
        )

        if service:
            found = asyncio.run(
                availability_service.find_slots_for_service(
                    provider_id,
                    service,
                    days_forward=days_forward,
                    now=generation_time
                )
            )
        else:
            found = asyncio.run(
                availability_service.find_slots(
                    provider_id,
                    service_duration_minutes=service_duration,
                    days_forward=days_forward,
                    now=generation_time
                )
            )

        groups = group_slots_by_date(found)
        if selected_date is not None:
            groups = {key: day_slots for key, day_slots in groups.items() if key == selected_date}
            found = groups.get(selected_date, [])

        console.print()
        if not groups:
            period = f"on {selected_date}" if selected_date else f"in the next {days_forward} days"
            console.print(f"[yellow]⚠ No availability for {provider_id} {period}.[/yellow]")
            console.print()
            return

        table = Table(
            title=f"Bookable slots for {provider_id}",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Date", style="bold yellow")
        table.add_column("Start")
        table.add_column("End")

        for date_key, day_slots in groups.items():
            for index, slot in enumerate(day_slots):
                table.add_row(
                    date_key if index == 0 else "",
                    slot.start_at.format("h:mm A", locale="en"),
                    slot.end_at.format("h:mm A", locale="en")
                )

        console.print(table)
        console.print(f"\n[bold green]✓ {len(found)} slot(s) on {len(groups)} day(s)[/bold green]\n")

    except (FileNotFoundError, ValueError, StylebookError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def hours(
    provider: Annotated[str, typer.Argument(help="Stylist id or configured alias")],
    config_file: ConfigOption = None,
    mock: MockOption = False,
    verbose: VerboseOption = False,
):
    """
    Show a stylist's weekly open hours.
    """
    _configure_logging(verbose)

    try:
        config = _load_config(config_file)
        provider_id = config.resolve_provider(provider)

        availability_service = AvailabilityService(store=_build_store(config, mock))
        availability = asyncio.run(availability_service.get_availability(provider_id))

        table = Table(
            title=f"Weekly availability for {provider_id}",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Day", style="bold yellow")
        table.add_column("Hours")

        for day in Weekday:
            blocks = availability.blocks_for(day)
            if blocks:
                table.add_row(day.display_name, "\n".join(block.label() for block in blocks))
            else:
                table.add_row(day.display_name, "[dim]Closed[/dim]")

        console.print()
        console.print(table)
        console.print()

    except (FileNotFoundError, ValueError, StylebookError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def list_providers(config_file: ConfigOption = None):
    """
    List all configured provider aliases.
    """
    try:
        config = _load_config(config_file)

        if not config.providers:
            console.print("[yellow]No provider aliases defined in the config file.[/yellow]")
            return

        table = Table(
            title="Configured providers",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Name (Alias)", style="bold yellow")
        table.add_column("Provider ID", style="dim")

        for provider in config.providers:
            table.add_row(provider.name, provider.provider_id)

        console.print()
        console.print(table)
        console.print()

    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]stylebook[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
