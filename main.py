#!/usr/bin/env python3
"""
Ratio Trade Arbitrage

Evaluates dollar arbitrage cycles (MEP / CCL) between pairs of bond legs
against order book snapshots.

Usage:
    python main.py evaluate books.json   # Rank every ratio trade in a snapshot
    python main.py config                # Show current configuration
    python main.py version               # Show version
"""

import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box
from rich.markup import escape

from ratio_arb.config import get_config
from ratio_arb.logger import setup_logging, get_logger, track_time
from ratio_arb.engine.ratio_monitor import RatioTradeMonitor
from ratio_arb.engine.ratio_trade import NOT_TRADABLE
from ratio_arb.snapshot import SnapshotError, load_snapshot

# Initialize
app = typer.Typer(
    name="ratio-arb",
    help="Ratio trade arbitrage evaluator",
    add_completion=False,
)
console = Console()
logger = None


def setup():
    """Initialize logging and configuration."""
    global logger
    setup_logging()
    logger = get_logger("main")


def _format_profit(value) -> str:
    if value == NOT_TRADABLE:
        return "[dim]n/a[/dim]"
    color = "green" if value > 0 else "red"
    return f"[{color}]{value:.2%}[/{color}]"


@app.command()
def evaluate(
    snapshot: Path = typer.Argument(..., help="JSON order book snapshot"),
    min_profit: Optional[float] = typer.Option(
        None, "--min-profit", min=-1.0, max=1.0,
        help="Override the minimum profit for opportunities",
    ),
):
    """
    Rank the ratio trades of a snapshot by best-quote profit.

    When the snapshot lists no ratio trades, every pairing of its legs is evaluated.
    """
    setup()

    config = get_config()
    if min_profit is not None:
        config.ratio.min_profit = min_profit

    try:
        loaded = load_snapshot(snapshot)
    except SnapshotError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    monitor = RatioTradeMonitor()
    if loaded.ratio_trades:
        for ratio_trade in loaded.ratio_trades:
            monitor.add(ratio_trade)
    else:
        monitor.pair_legs(loaded.legs.values())

    with track_time(f"evaluation of {snapshot.name}", component="main"):
        snapshots = monitor.scan()

    if not snapshots:
        console.print("[yellow]No ratio trades to evaluate[/yellow]")
        return

    table = Table(title="Ratio Trades", box=box.ROUNDED)
    table.add_column("Pair", style="cyan")
    table.add_column("Profit", justify="right")
    table.add_column("Last", justify="right")
    table.add_column("Max Size", justify="right")
    table.add_column("Book")

    for s in snapshots:
        table.add_row(
            s.name,
            _format_profit(s.profit),
            _format_profit(s.profit_last),
            str(s.owned_venta_max_size),
            str(s.readiness),
        )

    console.print(table)
    console.print(
        f"\n[dim]{len(snapshots)} ratio trades, "
        f"{monitor.metrics['opportunities_found']} above {config.ratio.min_profit:.2%}[/dim]"
    )


@app.command()
def config():
    """Show current configuration."""
    cfg = get_config()

    table = Table(title="Configuration", box=box.ROUNDED)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Min Profit", f"{cfg.ratio.min_profit:.2%}")
    table.add_row("Min Tradable Size", str(cfg.ratio.min_tradable_size))
    table.add_row("Opportunity Cooldown", f"{cfg.ratio.opportunity_cooldown_seconds}s")
    table.add_row("Log Level", cfg.monitoring.log_level)
    table.add_row("Debug Mode", "Yes" if cfg.is_debug else "No")

    console.print(table)


@app.command()
def version():
    """Show version information."""
    from ratio_arb import __version__

    console.print(Panel.fit(
        f"[bold]Ratio Trade Arbitrage[/bold]\n"
        f"Version: {__version__}\n"
        f"Python: {sys.version.split()[0]}",
        border_style="blue",
    ))


if __name__ == "__main__":
    app()
