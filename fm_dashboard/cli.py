"""
FM Dashboard - Command Line Interface
Shows the priority inbox and KPI snapshot for a work-order export
"""

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from dateutil import parser as date_parser
from rich.console import Console

from fm_dashboard.core import (
    ClockSource,
    Config,
    FixedClock,
    FMDashboardError,
    LoadResult,
    SystemClock,
    load_records_file,
)
from fm_dashboard.dashboard import DashboardFormatter, KPIAggregator, Prioritizer, summarize_inbox

app = typer.Typer(help="FM Dashboard - priority inbox and KPIs for facility work orders")
console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Configure logging for all commands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )


def get_clock(now: Optional[str], config: Config) -> ClockSource:
    """Fixed clock for --now, otherwise the system clock."""
    if now is None:
        return SystemClock()
    try:
        instant = date_parser.parse(now)
    except (ValueError, OverflowError) as exc:
        raise FMDashboardError(f"Could not parse --now value: {now}") from exc
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=config.get_timezone())
    return FixedClock(instant)


def load(records_file: Path, config: Config) -> LoadResult:
    result = load_records_file(records_file, config.get_timezone())
    if result.errors:
        err_console.print(
            f"[yellow]⚠ Excluded {result.excluded} record(s) with invalid dates[/yellow]",
            highlight=False,
        )
        for error in result.errors:
            logger.debug("Rejected: %s", error)
    return result


@app.command()
def inbox(
    records_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON file with an array of work orders"),
    top: Optional[int] = typer.Option(None, "--top", "-n", min=0, help="Number of items to show"),
    now: Optional[str] = typer.Option(None, "--now", help="Reference time (ISO 8601); defaults to the current time"),
    config_dir: Optional[Path] = typer.Option(None, "--config", "-c", help="Configuration directory"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of panels"),
):
    """
    Show open work orders ranked by urgency

    Example:
      fm-dashboard inbox work_orders.json --top 10
    """
    try:
        config = Config(config_dir)
        current = get_clock(now, config).now()
        result = load(records_file, config)
        top_n = top if top is not None else config.get_inbox_top_n()

        items = Prioritizer(config).build_inbox(result.records, current)

        if as_json:
            typer.echo(json.dumps({
                "generated_at": current.isoformat(),
                "summary": summarize_inbox(items, top_n),
                "items": [item.to_dict() for item in items[:top_n]],
            }, indent=2))
        else:
            DashboardFormatter(console).render_inbox(items, top_n)

    except (FMDashboardError, ValueError) as e:
        console.print(f"[red]Error building inbox: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def kpis(
    records_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON file with an array of work orders"),
    now: Optional[str] = typer.Option(None, "--now", help="Reference time (ISO 8601); defaults to the current time"),
    config_dir: Optional[Path] = typer.Option(None, "--config", "-c", help="Configuration directory"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of panels"),
):
    """
    Show the KPI snapshot

    Example:
      fm-dashboard kpis work_orders.json --now 2025-03-07T09:00
    """
    try:
        config = Config(config_dir)
        current = get_clock(now, config).now()
        result = load(records_file, config)

        metrics = KPIAggregator().aggregate(result.records, current, result.excluded)

        if as_json:
            typer.echo(json.dumps(metrics.to_dict(), indent=2))
        else:
            DashboardFormatter(console).render_kpis(metrics)

    except (FMDashboardError, ValueError) as e:
        console.print(f"[red]Error computing KPIs: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def show(
    records_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON file with an array of work orders"),
    top: Optional[int] = typer.Option(None, "--top", "-n", min=0, help="Number of inbox items to show"),
    now: Optional[str] = typer.Option(None, "--now", help="Reference time (ISO 8601); defaults to the current time"),
    config_dir: Optional[Path] = typer.Option(None, "--config", "-c", help="Configuration directory"),
):
    """
    Show the full dashboard: KPIs followed by the priority inbox
    """
    try:
        config = Config(config_dir)
        current = get_clock(now, config).now()
        result = load(records_file, config)
        top_n = top if top is not None else config.get_inbox_top_n()

        items = Prioritizer(config).build_inbox(result.records, current)
        metrics = KPIAggregator().aggregate(result.records, current, result.excluded)

        DashboardFormatter(console).render_dashboard(items, metrics, top_n)

    except (FMDashboardError, ValueError) as e:
        console.print(f"[red]Error loading dashboard: {e}[/red]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
