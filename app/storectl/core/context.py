"""Explicit request context for administrative operations.

Operations receive an AdminContext value instead of reading process-wide
state. The context carries who the request is for, which roots are
allowed, and the current selection of paths layered on top of an
immutable tree snapshot.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field, replace

from storectl.store.models import AllowedRoot, BulkDeletionReport, Forest


@dataclass(frozen=True, slots=True)
class Selection:
    """Immutable set of selected logical paths.

    Every mutator returns a new Selection; the snapshot the paths were
    picked from is never modified.
    """

    paths: frozenset[str] = frozenset()

    def __contains__(self, path: object) -> bool:
        return path in self.paths

    def __len__(self) -> int:
        return len(self.paths)

    def add(self, *paths: str) -> "Selection":
        return Selection(self.paths | frozenset(paths))

    def discard(self, *paths: str) -> "Selection":
        return Selection(self.paths - frozenset(paths))

    def toggle(self, path: str) -> "Selection":
        if path in self.paths:
            return self.discard(path)
        return self.add(path)

    def clear(self) -> "Selection":
        return Selection()

    def ordered(self) -> list[str]:
        """Selected paths in ascending order, for submission as a batch."""
        return sorted(self.paths)

    def prune(self, forest: Forest) -> "Selection":
        """Drop paths that are no longer files in a fresh snapshot.

        Args:
            forest: Snapshot produced by a re-enumeration.

        Returns:
            Selection restricted to paths still present as files.
        """
        return Selection(self.paths & forest.file_paths())

    def without_deleted(self, report: BulkDeletionReport) -> "Selection":
        """Drop paths the report shows as deleted."""
        deleted = {
            o.logical_path or o.path for o in report.outcomes if o.success and not o.dry_run
        }
        return Selection(self.paths - deleted)


@dataclass(frozen=True, slots=True)
class AdminContext:
    """Context threaded through enumeration and deletion calls.

    The caller is assumed to have been authenticated and authorized as an
    administrator before the context is built.

    Attributes:
        actor: Name of the administrator the request is performed for.
        roots: The closed set of allowed roots, fixed at process start.
        selection: Paths currently selected for a bulk operation.
    """

    actor: str
    roots: tuple[AllowedRoot, ...]
    selection: Selection = field(default_factory=Selection)

    @classmethod
    def create(cls, actor: str, roots: Iterable[AllowedRoot]) -> "AdminContext":
        return cls(actor=actor, roots=tuple(roots))

    def root_names(self) -> list[str]:
        return [root.name for root in self.roots]

    def with_selection(self, selection: Selection) -> "AdminContext":
        """Return a copy of this context with a different selection."""
        return replace(self, selection=selection)
