"""Shared Rich display functions for trees and deletion results.

Provides reusable renderers for enumerated forests and table builders
and summary printers for deletion reports across CLI commands.
"""

from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from storectl.core.theme import status_style
from storectl.store.models import AggregateStats, BulkDeletionReport, TreeNode
from storectl.utils.formatting import console, format_size, print_success


def _node_label(node: TreeNode) -> str:
    name = escape(node.name)
    if node.is_directory:
        count = len(node.children or ())
        return f"[directory]{name}/[/directory] [muted]({count})[/muted]"
    size = f"[size]{format_size(node.size)}[/size]"
    if node.is_symlink:
        return f"[symlink]{name}[/symlink] [muted]symlink[/muted] {size}"
    return f"[file]{name}[/file] {size}"


def render_tree(node: TreeNode, max_depth: int | None = None) -> Tree:
    """Build a Rich tree for one enumerated root.

    Args:
        node: Top-level node of a root.
        max_depth: Deepest level to render below the root; None for all.

    Returns:
        Rich Tree mirroring the node's structure and ordering.
    """
    tree = Tree(_node_label(node), guide_style="border")
    stack: list[tuple[TreeNode, Tree, int]] = [(node, tree, 0)]

    while stack:
        current, branch, depth = stack.pop()
        if max_depth is not None and depth >= max_depth:
            if current.children:
                branch.add("[muted]...[/muted]")
            continue
        pending: list[tuple[TreeNode, Tree, int]] = []
        for child in current.children or ():
            sub = branch.add(_node_label(child))
            if child.is_directory:
                pending.append((child, sub, depth + 1))
        stack.extend(reversed(pending))

    return tree


def create_stats_table(stats: AggregateStats) -> Table:
    """Create a Rich table with per-root and total statistics.

    Args:
        stats: Aggregate statistics from an enumeration.

    Returns:
        Rich Table with one row per root plus a total row.
    """
    table = Table(
        title="Content Store",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Root", no_wrap=True)
    table.add_column("Files", justify="right")
    table.add_column("Directories", justify="right")
    table.add_column("Size", style="size", justify="right")

    for name, root_stats in stats.per_root.items():
        table.add_row(
            escape(name),
            str(root_stats.files),
            str(root_stats.directories),
            format_size(root_stats.bytes),
        )

    table.add_row(
        "[bold]Total[/bold]",
        f"[bold]{stats.total_files}[/bold]",
        f"[bold]{stats.total_directories}[/bold]",
        f"[bold]{format_size(stats.total_bytes)}[/bold]",
    )
    return table


def create_report_table(report: BulkDeletionReport) -> Table:
    """Create a Rich table displaying deletion outcomes in submission order.

    Args:
        report: Report returned by the deletion orchestrator.

    Returns:
        Rich Table configured for results display.
    """
    table = Table(
        title="Deletion Results",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("#", justify="right", style="muted")
    table.add_column("Status", width=10, justify="center")
    table.add_column("Path", no_wrap=True)
    table.add_column("Class", width=16)
    table.add_column("Details")

    for position, outcome in enumerate(report.outcomes, start=1):
        if outcome.dry_run:
            status = "[outcome.dry_run]dry-run[/]"
            kind = ""
            detail = "Would delete"
        elif outcome.success:
            status = "[success]deleted[/success]"
            kind = ""
            detail = ""
        else:
            error_kind = outcome.error_kind
            if error_kind is None:
                status = "[error]FAIL[/error]"
                kind = ""
            else:
                style = status_style(error_kind.status_class)
                status = f"[{style}]FAIL[/]"
                kind = f"[{style}]{error_kind.value} ({error_kind.status_class.code})[/]"
            detail = outcome.error or "Unknown error"

        table.add_row(
            str(position),
            status,
            escape(outcome.path),
            kind,
            f"[muted]{escape(detail)}[/muted]",
        )

    return table


def print_report_summary(report: BulkDeletionReport) -> None:
    """Print a summary of a deletion report.

    Shows a success message when every item succeeded, or the counts of
    succeeded and failed items otherwise.

    Args:
        report: Report returned by the deletion orchestrator.
    """
    dry_count = sum(1 for o in report.outcomes if o.dry_run)

    if dry_count:
        console.print(f"\n[info]Dry-run: {dry_count} file(s) would be deleted.[/info]")
    if report.failed == 0:
        if not dry_count:
            print_success(f"All {report.succeeded} file(s) deleted successfully.")
    else:
        console.print(
            f"\n[success]{report.succeeded} succeeded[/success], "
            f"[error]{report.failed} failed[/error]"
        )
