"""Shared types and utilities for CLI commands.

This module provides common enums and helper functions used across
multiple CLI command modules to avoid code duplication.
"""

import getpass
from enum import Enum
from pathlib import Path

import typer
from rich.markup import escape

from storectl.core.context import AdminContext
from storectl.store.config import StoreConfigError, load_store_config
from storectl.utils.formatting import print_error


UNKNOWN_ACTOR = "unknown"


class OutputFormat(str, Enum):
    """Output format options for commands that print results."""

    TABLE = "table"
    JSON = "json"


def get_options(ctx: typer.Context) -> dict[str, object]:
    """Return the global options stored by the main callback."""
    ctx.ensure_object(dict)
    return ctx.obj


def default_actor() -> str:
    """Login name of the invoking user, or "unknown" if none can be resolved."""
    try:
        return getpass.getuser()
    except OSError:
        return UNKNOWN_ACTOR


def require_context(ctx: typer.Context) -> AdminContext:
    """Build the AdminContext for a command or exit with an error.

    Loads the allowed-roots configuration once and binds it, together
    with the acting administrator, into an explicit context value.

    Args:
        ctx: Typer context carrying the global options.

    Returns:
        AdminContext for the current invocation.

    Raises:
        typer.Exit: If the configuration cannot be loaded or defines no roots.
    """
    options = get_options(ctx)
    config_path = options.get("config")
    actor = options.get("actor")

    try:
        config = load_store_config(config_path if isinstance(config_path, Path) else None)
    except StoreConfigError as e:
        print_error(escape(str(e)))
        print_error("Run 'storectl init --root NAME=PATH' to create a configuration.")
        raise typer.Exit(code=1) from e

    roots = config.allowed_roots()
    if not roots:
        print_error("No allowed roots configured.")
        raise typer.Exit(code=1)

    return AdminContext.create(
        actor=actor if isinstance(actor, str) and actor else default_actor(),
        roots=roots,
    )
