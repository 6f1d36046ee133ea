"""CLI commands for storectl.

This package contains all subcommand implementations.
"""

from storectl.cli.commands import history, init, rm, roots, tree

__all__ = ["history", "init", "rm", "roots", "tree"]
