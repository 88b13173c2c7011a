"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import pendulum
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..adapters.config_settings_store import ConfigSettingsStore
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import BookingWindowError
from ..domain.models import format_clock
from ..services.booking_window import BookingWindowService

app = typer.Typer(
    name="bookingwindow",
    help="Validate booking windows against organization working hours",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]


def _load_config(config_file: Optional[Path], verbose: bool = False) -> AppConfig:
    config_path = config_file or get_default_config_path()
    config = AppConfig.load_from_yaml(config_path)
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, config.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )
    return config


def _build_service(config: AppConfig) -> BookingWindowService:
    return BookingWindowService(settings_store=ConfigSettingsStore(config))


@app.command()
def check(
    organization: Annotated[str, typer.Argument(help="Organization id")],
    start: Annotated[str, typer.Argument(help="Booking start (ISO-8601, UTC if no offset)")],
    end: Annotated[str, typer.Argument(help="Booking end (ISO-8601, UTC if no offset)")],
    now: Annotated[Optional[str], typer.Option("--now", help="Evaluate as if it were this instant")] = None,
    config_file: ConfigOption = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
):
    """
    Check whether a booking window is allowed.

    Examples:

        bookingwindow check acme 2024-11-25T10:00 2024-11-26T16:00

        bookingwindow check acme 2024-11-25T10:00 2024-11-25T12:00 --now 2024-11-25T05:00
    """
    try:
        config = _load_config(config_file, verbose)
        service = _build_service(config)
        verdict = service.validate_booking(
            organization_id=organization,
            start=start,
            end=end,
            now=now,
        )
    except (FileNotFoundError, BookingWindowError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if verdict.valid:
        console.print("[bold green]✓ Booking window is valid[/bold green]")
        return

    console.print(f"[bold red]✗ Booking window is not allowed ({len(verdict.violations)} problem(s)):[/bold red]")
    for message in verdict.messages():
        console.print(f"  • {message}")
    raise typer.Exit(1)


@app.command()
def hours(
    organization: Annotated[str, typer.Argument(help="Organization id")],
    from_date: Annotated[Optional[str], typer.Option("--from", help="First day to preview (YYYY-MM-DD). Defaults to today")] = None,
    days: Annotated[int, typer.Option("--days", "-d", help="Number of days to preview")] = 14,
    config_file: ConfigOption = None,
):
    """
    Show working hours, booking policy and a day-by-day preview.
    """
    try:
        config = _load_config(config_file)
        service = _build_service(config)
        organization_settings = config.find_organization(organization)

        if from_date:
            try:
                first_day = pendulum.from_format(from_date, "YYYY-MM-DD", tz="UTC").date()
            except ValueError as e:
                console.print(f"[red]Could not parse start date: {e}[/red]")
                raise typer.Exit(1)
        else:
            first_day = pendulum.now("UTC").date()

        summary = service.working_hours_summary(organization)
        hints = service.policy_hints(organization)
        preview = service.preview_days(organization, first_day, days)
    except (FileNotFoundError, BookingWindowError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    info_lines = summary.lines() if summary else ["Working hours are not enforced"]
    info_lines.extend(hints)
    console.print()
    console.print(Panel.fit("\n".join(info_lines), title=organization_settings.display_name()))

    if summary is None:
        console.print()
        return

    table = Table(
        title="Upcoming days (UTC)",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Date", style="bold")
    table.add_column("Day")
    table.add_column("Hours")
    table.add_column("Note", style="dim")

    for day in preview:
        if day.is_open:
            hours_text = f"[green]{format_clock(day.open_time)} - {format_clock(day.close_time)}[/green]"
        else:
            hours_text = "[red]Closed[/red]"
        note = day.reason or ("Special hours" if day.source == "override" else "")
        table.add_row(day.date.isoformat(), day.weekday, hours_text, note)

    console.print()
    console.print(table)
    console.print()


@app.command()
def list_organizations(
    config_file: ConfigOption = None,
):
    """
    List all configured organizations.
    """
    try:
        config = _load_config(config_file)
    except (FileNotFoundError, BookingWindowError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    if not config.organizations:
        console.print("[yellow]No organizations defined in the config file.[/yellow]")
        return

    table = Table(
        title="Configured organizations",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Id", style="bold yellow")
    table.add_column("Name")
    table.add_column("Working hours")
    table.add_column("Buffer (h)", justify="right")
    table.add_column("Max length (h)", justify="right")

    for organization in config.organizations:
        policy = organization.booking_policy
        table.add_row(
            organization.id,
            organization.display_name(),
            "enabled" if organization.working_hours.enabled else "disabled",
            str(policy.buffer_start_time),
            str(policy.max_booking_length) if policy.max_booking_length else "-",
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]bookingwindow[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
