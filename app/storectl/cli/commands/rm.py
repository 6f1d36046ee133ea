"""Delete command implementation.

Deletes one or more content store files through the deletion
orchestrator, records successful deletions to history, and refreshes
the store statistics afterwards.
"""

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from storectl.cli.display import create_report_table, print_report_summary
from storectl.cli.types import OutputFormat, require_context
from storectl.core.context import AdminContext, Selection
from storectl.core.state import record_deletions
from storectl.store.models import BulkDeletionReport
from storectl.store.orchestrator import DeletionOrchestrator
from storectl.store.tree import TreeBuilder
from storectl.utils.formatting import (
    console,
    format_size,
    print_error,
    print_info,
    print_warning,
)


def rm(
    ctx: typer.Context,
    paths: Annotated[
        list[str] | None,
        typer.Argument(
            help="Logical paths to delete, e.g. audio/user_1/track.mp3.",
            show_default=False,
        ),
    ] = None,
    from_file: Annotated[
        Path | None,
        typer.Option(
            "--from-file",
            "-F",
            help="Read additional paths from a file, one per line ('-' for stdin).",
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be deleted."),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """Delete files from the content store.

    Every path is authorized against the allowed roots right before it is
    deleted. Directories are never deleted. Items are processed in the
    order given and a failure never stops the remaining items.

    Exits with code 1 if any item failed.

    Examples:
        storectl rm audio/user_1/a.mp3 covers/x.png
        storectl rm --dry-run audio/user_1/a.mp3
        storectl rm -y -F paths.txt --format json
    """
    context = require_context(ctx)

    candidates = list(paths or [])
    if from_file is not None:
        candidates.extend(_read_paths(from_file))

    if not candidates:
        print_error("No paths given.")
        raise typer.Exit(code=1)

    json_output = output_format == OutputFormat.JSON

    if not json_output:
        _print_deletion_plan(candidates, dry_run)

    # Confirm unless --yes or --dry-run
    if not dry_run and not yes:
        confirmed = typer.confirm(
            f"\nProceed with deleting {len(candidates)} file(s)?",
            default=False,
        )
        if not confirmed:
            print_info("Aborted.")
            raise typer.Exit(code=0)

    orchestrator = DeletionOrchestrator(context.roots, dry_run=dry_run)

    if len(candidates) == 1:
        outcome = orchestrator.delete_one(candidates[0])
        report = BulkDeletionReport(outcomes=(outcome,))
        payload: object = outcome.to_dict()
    else:
        report = orchestrator.delete_many(candidates)
        payload = report.to_dict()

    if json_output:
        typer.echo(json.dumps(payload, indent=2))
    else:
        console.print(create_report_table(report))
        print_report_summary(report)

    # Record to history (only actual deletions, not dry-run)
    if not dry_run and report.any_succeeded:
        try:
            if record_deletions(report, actor=context.actor) is not None and not json_output:
                print_info("Deletions recorded to history.")
        except (OSError, RuntimeError) as e:
            print_warning(f"Could not record to history: {e}")

        if not json_output:
            _refresh(context.with_selection(Selection(frozenset(candidates))), report)

    # Exit with error if any deletion failed
    if report.failed:
        raise typer.Exit(code=1)


# === Private helper functions ===


def _read_paths(source: Path) -> list[str]:
    """Read newline-separated paths, skipping blank lines and comments."""
    try:
        if str(source) == "-":
            text = typer.get_text_stream("stdin").read()
        else:
            text = source.read_text(encoding="utf-8")
    except OSError as e:
        print_error(f"Cannot read paths from {source}: {e}")
        raise typer.Exit(code=1) from e

    return [
        line.strip()
        for line in text.splitlines()
        if line.strip() and not line.lstrip().startswith("#")
    ]


def _print_deletion_plan(paths: list[str], dry_run: bool) -> None:
    """Display planned deletions in submission order."""
    label = "Planned Deletions (dry-run)" if dry_run else "Planned Deletions"
    table = Table(title=label, show_lines=False, border_style="border")
    table.add_column("#", justify="right", style="muted")
    table.add_column("Path", style="bold")

    for position, path in enumerate(paths, start=1):
        table.add_row(str(position), escape(path))

    console.print(table)


def _refresh(context: AdminContext, report: BulkDeletionReport) -> None:
    """Re-enumerate the store after a batch with at least one success.

    Prints the refreshed totals and warns about submitted paths that
    still exist as files.

    Args:
        context: Context whose selection holds the submitted paths.
        report: Report of the batch that just ran.
    """
    forest = TreeBuilder().build_forest(context.roots)
    stats = forest.stats
    console.print(
        f"\n[muted]Store now holds {stats.total_files} file(s) "
        f"({format_size(stats.total_bytes)}) in {stats.total_directories} "
        f"director{'y' if stats.total_directories == 1 else 'ies'}.[/muted]"
    )

    remaining = context.selection.without_deleted(report).prune(forest)
    for path in remaining.ordered():
        print_warning(f"Still present: {path}")
