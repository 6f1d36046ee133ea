"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

from storectl import __version__
from storectl.cli.commands import history, init, rm, roots, tree

# Create main Typer app
app = typer.Typer(
    name="storectl",
    help="Browse and prune a server-side content store.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"storectl version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool, quiet: bool) -> None:
    """Route library log records to stderr at the requested level."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)
    logging.getLogger("storectl").setLevel(level)


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to the allowed-roots file (default: $STORECTL_CONFIG or XDG config).",
        ),
    ] = None,
    actor: Annotated[
        str | None,
        typer.Option(
            "--actor",
            help="Administrator name recorded in history (default: current user).",
        ),
    ] = None,
) -> None:
    """storectl - Browse and prune a server-side content store.

    Enumerate the configured roots as a tree and delete selected
    files, with every path re-authorized against the allowed roots.
    """
    configure_logging(verbose, quiet)

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config"] = config
    ctx.obj["actor"] = actor


# Register commands
app.add_typer(init.app, name="init")
app.add_typer(roots.app, name="roots")
app.add_typer(tree.app, name="tree")
app.command(name="rm")(rm.rm)
app.add_typer(history.app, name="history")


if __name__ == "__main__":
    app()
