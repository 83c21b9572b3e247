"""
Main CLI application using Typer.
"""

import logging
from datetime import date
from pathlib import Path
from typing import Annotated, List, Optional

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.schedule_store import JsonScheduleStore
from ..config import AppConfig
from ..domain.exceptions import FreespanError
from ..services.scheduling_query import SchedulingQueryService

app = typer.Typer(
    name="freespan",
    help="Find candidates with enough uninterrupted free time on a given day",
    add_completion=False
)

console = Console()


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _parse_day(value: str) -> date:
    try:
        return pendulum.from_format(value, "YYYY-MM-DD").date()
    except ValueError as exc:
        raise ValueError(f"Invalid date {value!r}, expected YYYY-MM-DD") from exc


def _build_service(config: AppConfig, data_file: Optional[Path]) -> SchedulingQueryService:
    store = JsonScheduleStore(
        data_file=data_file or config.get_data_file(),
        timezone=config.timezone,
    )
    return SchedulingQueryService(
        store,
        timezone=config.timezone,
        commitment_padding=config.get_commitment_padding(),
    )


def _load_config(config_file: Optional[Path], verbose: bool) -> AppConfig:
    config = AppConfig.load(config_file)
    _configure_logging("DEBUG" if verbose else config.log_level)
    return config


@app.command()
def find(
    day: Annotated[str, typer.Option("--date", help="Day to check (YYYY-MM-DD)")],
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Minimum free span in minutes")] = None,
    candidates: Annotated[Optional[List[str]], typer.Option("--candidate", help="Restrict to these candidates (repeatable)")] = None,
    data_file: Annotated[Optional[Path], typer.Option("--data", help="Schedule JSON file")] = None,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
):
    """
    List candidates whose longest free span on a day meets the duration.

    Examples:

        freespan find --date 2024-11-25

        freespan find --date 2024-11-25 --duration 60 --candidate alice --candidate carol
    """
    try:
        config = _load_config(config_file, verbose)
        query_day = _parse_day(day)
        min_duration = (
            pendulum.duration(minutes=duration) if duration is not None else config.defaults.get_min_duration()
        )

        service = _build_service(config, data_file)
        qualifying = service.qualifying_candidates(
            min_duration=min_duration,
            day=query_day,
            population=candidates or None,
        )
    except (FreespanError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    minutes = int(min_duration.total_seconds() // 60)
    console.print()
    if not qualifying:
        console.print(
            f"[yellow]No candidate has {minutes} free minutes on {query_day.isoformat()}.[/yellow]"
        )
        console.print()
        return

    table = Table(
        title=f"Candidates with {minutes}+ free minutes on {query_day.isoformat()}",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Candidate", style="bold yellow")

    for candidate_id in sorted(qualifying):
        table.add_row(candidate_id)

    console.print(table)
    console.print()


@app.command()
def gaps(
    candidate: Annotated[str, typer.Argument(help="Candidate identifier")],
    day: Annotated[str, typer.Option("--date", help="Day to check (YYYY-MM-DD)")],
    data_file: Annotated[Optional[Path], typer.Option("--data", help="Schedule JSON file")] = None,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
):
    """
    Show the free fragments left in a candidate's availability on a day.
    """
    try:
        config = _load_config(config_file, verbose)
        query_day = _parse_day(day)
        service = _build_service(config, data_file)
        fragments = service.candidate_free_spans(candidate, query_day)
    except (FreespanError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print()
    if not fragments:
        console.print(f"[yellow]{candidate} has no free time on {query_day.isoformat()}.[/yellow]")
        console.print()
        return

    table = Table(
        title=f"Free time for {candidate}",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Fragment", style="bold yellow")
    table.add_column("Minutes", justify="right")

    for fragment in fragments:
        table.add_row(fragment.format_display(config.timezone), str(fragment.duration_minutes()))

    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]freespan[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
