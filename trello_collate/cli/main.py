"""CLI entry point for trello-collate.

Usage:
    trello-collate run --once
    trello-collate run --config boards.yaml --auth auth.yaml --period 15m
    trello-collate run --once --output json
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from ..core.config import (
    DEFAULT_AUTH_PATH,
    DEFAULT_CONFIG_PATH,
    DEFAULT_PERIOD,
    load_auth,
    load_config,
    parse_period,
)
from ..core.exceptions import ConfigurationError
from ..core.models import PassResult
from ..core.types import BoardErrorPolicy
from ..output.formatters import JSONFormatter, TableFormatter
from ..providers.trello import TrelloClient
from ..scheduler import Scheduler

# Initialize app
app = typer.Typer(
    name="trello-collate",
    help="Add tagged cards to checklists on per-bucket rollup cards",
    add_completion=False,
)

console = Console()
# Logs go to stderr so stdout carries only the pass report
err_console = Console(stderr=True)
logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


@app.command()
def run(
    config: Path = typer.Option(
        DEFAULT_CONFIG_PATH,
        "--config", "-c",
        help="Config file telling what boards and columns to update",
    ),
    auth: Path = typer.Option(
        DEFAULT_AUTH_PATH,
        "--auth",
        help="Location of auth token and app key",
    ),
    period: str = typer.Option(
        DEFAULT_PERIOD,
        "--period", "-p",
        help="How often to update cards (e.g. 30m, 1h, 90s)",
    ),
    once: bool = typer.Option(
        False,
        "--once",
        help="Run a single pass instead of every period",
    ),
    on_board_error: Optional[BoardErrorPolicy] = typer.Option(
        None,
        "--on-board-error",
        help="abort: stop the pass at the first failing board; continue: try the rest",
        case_sensitive=False,
    ),
    output: str = typer.Option(
        "table",
        "--output", "-o",
        help="Output format: table, json",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """
    Sync rollup checklists on every configured board.

    Examples:
        trello-collate run --once
        trello-collate run --period 15m --on-board-error continue
    """
    setup_logging(verbose)

    output_lower = output.lower()
    if output_lower not in ("table", "json"):
        console.print(f"[red]Invalid output format: {output}[/]")
        raise typer.Exit(1)

    try:
        collate_config = load_config(config)
        credentials = load_auth(auth)
        period_seconds = parse_period(period)
    except ConfigurationError as e:
        console.print(f"[red]{escape(str(e))}[/]")
        raise typer.Exit(1)

    if output_lower == "json":
        formatter = JSONFormatter()
    else:
        formatter = TableFormatter(color=console.is_terminal)

    def report(result: PassResult) -> None:
        print(formatter.format(result), end="" if output_lower == "table" else "\n")

    scheduler = Scheduler(
        service=TrelloClient(credentials),
        config=collate_config,
        period=period_seconds,
        once=once,
        policy=on_board_error,
        on_pass=report,
    )

    try:
        result = scheduler.run()
    except KeyboardInterrupt:
        logger.info("Interrupted")
        raise typer.Exit(130)

    if not result.success:
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show version information."""
    from .. import __version__
    console.print(f"trello-collate v{__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
