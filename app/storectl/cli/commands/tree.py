"""Tree command implementation.

Enumerates the configured roots and prints the resulting forest
together with aggregate statistics.
"""

import json
from typing import Annotated

import typer

from storectl.cli.display import create_stats_table, render_tree
from storectl.cli.types import OutputFormat, require_context
from storectl.store.models import Forest
from storectl.store.tree import TreeBuilder
from storectl.utils.formatting import console, print_error, print_info, print_warning

app = typer.Typer(
    help="Show the content store as a tree.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def tree(
    ctx: typer.Context,
    root: Annotated[
        list[str] | None,
        typer.Option(
            "--root",
            "-r",
            help="Only enumerate this root (repeatable).",
        ),
    ] = None,
    max_depth: Annotated[
        int | None,
        typer.Option(
            "--max-depth",
            "-d",
            min=0,
            help="Limit how many levels are rendered below each root.",
        ),
    ] = None,
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
    """Enumerate the allowed roots and show their contents.

    Each directory lists its subdirectories before its files, both by
    name, followed by per-root and total statistics.

    Examples:
        storectl tree                  # All roots
        storectl tree -r audio -d 2    # One root, two levels deep
        storectl tree --format json    # JSON output for scripting
    """
    context = require_context(ctx)

    selected = context.roots
    if root:
        unknown = sorted(set(root) - set(context.root_names()))
        if unknown:
            print_error(f"Unknown root(s): {', '.join(unknown)}")
            print_info(f"Configured roots: {', '.join(context.root_names())}")
            raise typer.Exit(code=1)
        selected = tuple(r for r in context.roots if r.name in root)

    forest = TreeBuilder().build_forest(selected)

    if output_format == OutputFormat.JSON:
        typer.echo(json.dumps(forest.to_dict(), indent=2))
        return

    _print_forest(forest, max_depth)


def _print_forest(forest: Forest, max_depth: int | None) -> None:
    """Print each root as a Rich tree followed by the statistics table.

    Args:
        forest: Result of the enumeration.
        max_depth: Render depth limit, or None for the full tree.
    """
    for node in forest.roots.values():
        console.print(render_tree(node, max_depth))

    for unavailable in forest.unavailable_roots:
        print_warning(f"Root '{unavailable.name}' is unavailable: {unavailable.reason}")

    if forest.warnings:
        print_warning(f"{len(forest.warnings)} unreadable entries were omitted.")

    if forest.roots:
        console.print()
        console.print(create_stats_table(forest.stats))
