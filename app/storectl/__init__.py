"""storectl - Browse and prune a server-side content store."""

__version__ = "0.1.0"
