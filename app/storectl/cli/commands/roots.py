"""Roots command implementation.

Lists the configured allowed roots and whether each one can be read.
"""

import json
import os
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from storectl.cli.types import OutputFormat, require_context
from storectl.store.models import AllowedRoot
from storectl.utils.formatting import console

app = typer.Typer(
    help="List the configured allowed roots.",
    invoke_without_command=True,
)


def root_status(root: AllowedRoot) -> str:
    """Describe whether a root can be enumerated.

    Args:
        root: Configured allowed root.

    Returns:
        One of "available", "missing", "not a directory" or "unreadable".
    """
    if not root.path.exists():
        return "missing"
    if not root.path.is_dir():
        return "not a directory"
    if not os.access(root.path, os.R_OK | os.X_OK):
        return "unreadable"
    return "available"


@app.callback(invoke_without_command=True)
def roots(
    ctx: typer.Context,
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
    """Show the allowed roots, their backing paths and availability."""
    context = require_context(ctx)

    if output_format == OutputFormat.JSON:
        data = [
            {"name": r.name, "path": str(r.path), "status": root_status(r)}
            for r in context.roots
        ]
        typer.echo(json.dumps(data, indent=2))
        return

    table = Table(
        title="Allowed Roots",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Name", style="directory", no_wrap=True)
    table.add_column("Path")
    table.add_column("Status")

    for root in context.roots:
        status = root_status(root)
        style = "success" if status == "available" else "warning"
        table.add_row(escape(root.name), escape(str(root.path)), f"[{style}]{status}[/]")

    console.print(table)
