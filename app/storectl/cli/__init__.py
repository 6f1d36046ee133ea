"""CLI package for storectl.

This package contains the Typer application and all subcommands.
"""

from storectl.cli.main import app

__all__ = ["app"]
