"""Output formatters for pass results.

Provides two output formats:
- JSON: Machine-readable, complete data
- Table: Human-readable CLI output
"""

import json
import logging
from abc import ABC, abstractmethod
from io import StringIO

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..core.models import PassResult

logger = logging.getLogger(__name__)


class OutputFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def format(self, result: PassResult) -> str:
        """Format the result as a string."""
        pass

    def format_to_file(self, result: PassResult, filepath: str) -> None:
        """Write formatted result to a file."""
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(self.format(result))


class JSONFormatter(OutputFormatter):
    """Formats results as JSON."""

    def __init__(self, indent: int = 2, include_api_calls: bool = False):
        """
        Initialize JSON formatter.

        Args:
            indent: JSON indentation level
            include_api_calls: Include the per-call audit trail
        """
        self.indent = indent
        self.include_api_calls = include_api_calls

    def format(self, result: PassResult) -> str:
        """Format result as JSON string."""
        exclude = None if self.include_api_calls else {"api_calls"}
        data = result.model_dump(mode="json", exclude=exclude)
        data["success"] = result.success
        data["mutation_count"] = result.mutation_count
        return json.dumps(data, indent=self.indent)


class TableFormatter(OutputFormatter):
    """Formats results as human-readable tables for CLI output."""

    def __init__(self, width: int = 100, color: bool = True):
        """
        Initialize table formatter.

        Args:
            width: Maximum table width
            color: Emit terminal color codes
        """
        self.width = width
        self.color = color

    def format(self, result: PassResult) -> str:
        """Format result as readable tables."""
        output = StringIO()
        console = Console(
            file=output,
            force_terminal=self.color,
            no_color=not self.color,
            width=self.width,
        )

        status = "[green]OK[/]" if result.success else "[red]FAILED[/]"
        duration = result.duration_seconds
        console.print(Panel(
            f"Status: {status}\n"
            f"Boards: {len(result.boards)}   Changes: {result.mutation_count}   "
            f"API calls: {len(result.api_calls)}"
            + (f"   Duration: {duration:.1f}s" if duration is not None else "")
            + ("\n[yellow]Pass aborted after a board failure[/]" if result.aborted else ""),
            title="Collate Pass",
            expand=False,
        ))

        for board in result.boards:
            if not board.success:
                console.print(f"[bold]{escape(board.board_name)}[/]: [red]{escape(board.error or '')}[/]")
                continue

            table = Table(title=escape(board.board_name or board.board_id))
            table.add_column("Card", style="cyan")
            table.add_column("Checklist")
            table.add_column("Added", justify="right", style="green")
            table.add_column("Removed", justify="right", style="red")

            for rec in board.reconciliations:
                checklist = rec.checklist_name + (" (new)" if rec.checklist_created else "")
                table.add_row(escape(rec.card_name), escape(checklist), str(len(rec.created)), str(len(rec.deleted)))
            console.print(table)

            if board.unknown_buckets:
                console.print(f"  [yellow]Unknown buckets:[/] {escape(', '.join(board.unknown_buckets))}")

        return output.getvalue()
