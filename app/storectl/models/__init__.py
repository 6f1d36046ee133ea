"""Data models for storectl.

This module exports the history structures used to audit deletions.
"""

from storectl.models.history import (
    HistoryActionType,
    HistoryEntry,
    HistoryItem,
    create_history_entry,
)

__all__ = [
    "HistoryActionType",
    "HistoryEntry",
    "HistoryItem",
    "create_history_entry",
]
