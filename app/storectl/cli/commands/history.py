"""History command for viewing past deletions.

This module provides the `storectl history` command for viewing
the audit trail of content store deletions.
"""

import json
from datetime import datetime
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from storectl.core.state import StateManager
from storectl.models.history import HistoryEntry
from storectl.utils.formatting import console, print_info

app = typer.Typer(
    name="history",
    help="View history of content store deletions.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def history(
    ctx: typer.Context,
    limit: Annotated[
        int,
        typer.Option(
            "--limit",
            "-n",
            help="Maximum number of entries to show.",
        ),
    ] = 20,
    since: Annotated[
        str | None,
        typer.Option(
            "--since",
            help="Show entries since date (YYYY-MM-DD).",
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
) -> None:
    """Show history of content store deletions.

    Displays past deletion batches recorded by storectl, newest first.
    Each entry shows when it ran, who it ran for, and which files
    were deleted.

    Examples:
        storectl history              # Show last 20 entries
        storectl history -n 50        # Show last 50 entries
        storectl history --since 2026-01-01
        storectl history --json       # JSON output for scripting
    """
    if ctx.invoked_subcommand is not None:
        return

    entries = StateManager().get_history(limit=limit)

    if since:
        try:
            since_parsed = datetime.fromisoformat(since)
        except ValueError:
            typer.echo(f"Invalid date format: {since}. Use YYYY-MM-DD.", err=True)
            raise typer.Exit(code=1) from None
        if since_parsed.tzinfo is None:
            # Naive dates compare against the UTC calendar day
            since_date = since_parsed.strftime("%Y-%m-%d")
            entries = [e for e in entries if e.timestamp[:10] >= since_date]
        else:
            entries = [e for e in entries if _parse_timestamp(e.timestamp) >= since_parsed]

    if not entries:
        print_info("No history entries found.")
        return

    if json_output:
        _print_json(entries)
    else:
        _print_table(entries)


def _print_table(entries: list[HistoryEntry]) -> None:
    """Print history as Rich table.

    Args:
        entries: List of history entries to display.
    """
    table = Table(
        title="Deletion History",
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("ID", style="dim")
    table.add_column("Timestamp", style="info")
    table.add_column("Actor", style="success")
    table.add_column("Files")

    for entry in entries:
        count = len(entry.items)
        names = ", ".join(escape(item.path) for item in entry.items[:3])
        if count > 3:
            names += f" (+{count - 3} more)"

        table.add_row(
            entry.id[:8],
            _parse_timestamp(entry.timestamp).strftime("%Y-%m-%d %H:%M"),
            escape(entry.actor),
            names,
        )

    console.print(table)


def _parse_timestamp(iso_timestamp: str) -> datetime:
    return datetime.fromisoformat(iso_timestamp.replace("Z", "+00:00"))


def _print_json(entries: list[HistoryEntry]) -> None:
    """Print history as JSON for scripting."""
    output = [entry.to_dict() for entry in entries]
    typer.echo(json.dumps(output, indent=2))
