"""State management for the deletion history.

This module provides the StateManager class for persisting and querying
history entries in a JSONL file format, and a helper that records the
successful items of a deletion report.
"""

import json
import logging
from pathlib import Path

from storectl.core.paths import ensure_state_dir, get_state_dir
from storectl.models.history import (
    HistoryActionType,
    HistoryEntry,
    HistoryItem,
    create_history_entry,
)
from storectl.store.models import SEPARATOR, BulkDeletionReport

logger = logging.getLogger(__name__)


class StateManager:
    """Manages history state in JSONL file.

    Storage location: ~/.local/state/storectl/history.jsonl

    The history file uses JSON Lines format where each line is a complete
    JSON object representing a HistoryEntry. Entries are only ever
    appended, so the file is an audit trail in execution order.

    Attributes:
        state_dir: Directory containing the history file.
    """

    HISTORY_FILENAME = "history.jsonl"

    def __init__(self, state_dir: Path | None = None) -> None:
        """Initialize StateManager.

        Args:
            state_dir: Optional override for state directory.
                      Default: ~/.local/state/storectl
        """
        self._state_dir = state_dir if state_dir is not None else get_state_dir()

    @property
    def history_path(self) -> Path:
        """Path to history.jsonl file."""
        return self._state_dir / self.HISTORY_FILENAME

    def record_action(self, entry: HistoryEntry) -> None:
        """Append action to history file.

        Creates file and parent directories if they don't exist.

        Args:
            entry: The history entry to record.

        Raises:
            RuntimeError: If the state directory cannot be created.
            OSError: If the file cannot be written.
        """
        if self._state_dir == get_state_dir():
            ensure_state_dir()
        else:
            self._state_dir.mkdir(parents=True, exist_ok=True)

        line = entry.to_json_line()

        with self.history_path.open(mode="a", encoding="utf-8") as f:
            f.write(line + "\n")
            f.flush()

    def get_history(self, limit: int | None = None) -> list[HistoryEntry]:
        """Read history entries, newest first.

        Args:
            limit: Maximum number of entries to return.
                  If None, returns all entries.

        Returns:
            List of HistoryEntry, newest first.
            Returns empty list if file doesn't exist.
        """
        if not self.history_path.exists():
            return []

        entries: list[HistoryEntry] = []

        with self.history_path.open(encoding="utf-8") as f:
            for line_num, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue

                try:
                    entries.append(HistoryEntry.from_json_line(line))
                except (json.JSONDecodeError, KeyError, ValueError) as e:
                    logger.warning(
                        "Skipping corrupt history line %d: %s",
                        line_num,
                        str(e),
                    )
                    continue

        entries.reverse()

        if limit is not None:
            return entries[:limit]

        return entries


def record_deletions(
    report: BulkDeletionReport,
    actor: str,
    command: str = "storectl rm",
    state: StateManager | None = None,
) -> HistoryEntry | None:
    """Record the successful items of a deletion report to history.

    Dry-run outcomes and failures are not recorded.

    Args:
        report: Report returned by the deletion orchestrator.
        actor: Administrator the batch was executed for.
        command: Command that triggered the deletions.
        state: StateManager to write to. Defaults to the standard location.

    Returns:
        The recorded HistoryEntry, or None if nothing was deleted.
    """
    deleted = [o.logical_path or o.path for o in report.outcomes if o.success and not o.dry_run]
    items = [HistoryItem(path=path, root=path.split(SEPARATOR, 1)[0]) for path in deleted]
    if not items:
        return None

    entry = create_history_entry(
        action_type=HistoryActionType.DELETE,
        items=items,
        actor=actor,
        metadata={"command": command, "failed": report.failed, "total": report.total},
    )
    (state or StateManager()).record_action(entry)
    return entry
