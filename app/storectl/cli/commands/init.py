"""Init command implementation.

Creates the allowed-roots configuration file.
"""

from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.markup import escape

from storectl.cli.types import get_options
from storectl.store.config import (
    RootEntry,
    StoreConfig,
    StoreConfigError,
    resolve_config_path,
    save_store_config,
)
from storectl.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Create the allowed-roots configuration.",
    invoke_without_command=True,
)


def parse_root_option(value: str) -> RootEntry:
    """Parse a NAME=PATH option into a root entry.

    The path is resolved to an absolute location relative to the
    current working directory.

    Args:
        value: Option value such as "audio=/srv/content/audio".

    Returns:
        Validated RootEntry.

    Raises:
        ValueError: If the value is malformed or the name is invalid.
    """
    name, sep, raw_path = value.partition("=")
    if not sep or not name.strip() or not raw_path.strip():
        msg = f"Expected NAME=PATH, got {value!r}"
        raise ValueError(msg)
    path = Path(raw_path.strip()).expanduser().resolve()
    return RootEntry(name=name.strip(), path=path)


@app.callback(invoke_without_command=True)
def init(
    ctx: typer.Context,
    root: Annotated[
        list[str],
        typer.Option(
            "--root",
            "-r",
            help="Allowed root as NAME=PATH (repeatable).",
        ),
    ],
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            help="Overwrite existing configuration.",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Show what would be written without creating the file.",
        ),
    ] = False,
) -> None:
    """Write the allowed-roots configuration file.

    The roots listed here are the only locations storectl will ever
    enumerate or delete from.

    Examples:
        storectl init -r audio=/srv/content/audio -r covers=/srv/content/covers
        storectl init -r audio=./audio --force
    """
    options = get_options(ctx)
    config_option = options.get("config")
    config_path = resolve_config_path(config_option if isinstance(config_option, Path) else None)

    if config_path.exists() and not force and not dry_run:
        print_error(f"Configuration already exists: {config_path}")
        print_info("Use --force to overwrite.")
        raise typer.Exit(code=1)

    try:
        config = StoreConfig(roots=[parse_root_option(value) for value in root])
    except (ValueError, ValidationError) as e:
        print_error(f"Invalid root definition: {escape(str(e))}")
        raise typer.Exit(code=1) from e

    for entry in config.roots:
        if not entry.path.is_dir():
            print_info(f"Root '{entry.name}' does not exist yet: {entry.path}")

    if dry_run:
        print_info("Dry-run: would write configuration:")
        for entry in config.roots:
            console.print(f"  [directory]{entry.name}[/] -> {entry.path}")
        return

    try:
        saved_path = save_store_config(config, config_path)
    except StoreConfigError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    print_success(f"Configuration written to {saved_path}")
    print_info(f"{len(config.roots)} allowed root(s) configured.")
