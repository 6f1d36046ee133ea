"""Tree enumeration of the allowed content store roots.

Walks each allowed root depth-first into a TreeNode forest and
accumulates aggregate statistics during the same pass. The walk uses an
explicit work stack, so nesting depth is bounded by memory rather than
by the interpreter's recursion limit.
"""

import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import cast

from storectl.store.models import (
    SEPARATOR,
    AggregateStats,
    AllowedRoot,
    Forest,
    RootStats,
    TreeNode,
    UnavailableRoot,
    WalkWarning,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _DirFrame:
    """Work-stack frame for one directory being enumerated."""

    name: str
    path: str
    location: str
    entries: list["_DirFrame | TreeNode"] = field(default_factory=list)
    failed: bool = False
    node: TreeNode | None = None


class RootUnavailableError(OSError):
    """Raised when an allowed root itself cannot be enumerated."""


class TreeBuilder:
    """Builds a fresh snapshot of the allowed roots on every call.

    The builder holds no state between calls and never caches results,
    so independent calls may run concurrently.

    Example:
        >>> forest = TreeBuilder().build_forest(roots)
        >>> forest.stats.total_files
        42
    """

    def build_forest(self, roots: Iterable[AllowedRoot]) -> Forest:
        """Enumerate every allowed root into a forest.

        A root that does not exist or cannot be read is reported in
        ``unavailable_roots``; the remaining roots are still enumerated.

        Args:
            roots: The configured allowed roots, in display order.

        Returns:
            Forest with one top-level node per available root.
        """
        nodes: dict[str, TreeNode] = {}
        per_root: dict[str, RootStats] = {}
        unavailable: list[UnavailableRoot] = []
        warnings: list[WalkWarning] = []

        for root in roots:
            stats = RootStats()
            try:
                nodes[root.name] = self.build_root(root, stats, warnings)
            except RootUnavailableError as e:
                logger.warning("Root '%s' unavailable: %s", root.name, e)
                unavailable.append(UnavailableRoot(name=root.name, reason=str(e)))
                continue
            per_root[root.name] = stats

        return Forest(
            roots=nodes,
            stats=AggregateStats.from_roots(per_root),
            unavailable_roots=tuple(unavailable),
            warnings=tuple(warnings),
        )

    def build_root(
        self,
        root: AllowedRoot,
        stats: RootStats,
        warnings: list[WalkWarning],
    ) -> TreeNode:
        """Enumerate a single allowed root.

        Args:
            root: Root to walk.
            stats: Counters updated in place during the walk.
            warnings: Omitted entries are appended here.

        Returns:
            Top-level directory node for the root.

        Raises:
            RootUnavailableError: If the root is missing, not a directory,
                or cannot be listed.
        """
        top = _DirFrame(name=root.name, path=root.name, location=str(root.path))
        visited: list[_DirFrame] = []
        stack: list[_DirFrame] = [top]

        while stack:
            frame = stack.pop()
            try:
                subdirs, files = self._list_directory(frame, warnings)
            except OSError as e:
                if frame is top:
                    raise RootUnavailableError(f"{_reason(e)}: {frame.location}") from e
                logger.warning("Omitting unreadable directory %s: %s", frame.path, e)
                warnings.append(WalkWarning(path=frame.path, reason=_reason(e)))
                frame.failed = True
                continue

            visited.append(frame)
            if frame is not top:
                stats.directories += 1

            for node in files:
                stats.files += 1
                stats.bytes += node.size or 0

            frame.entries.extend(subdirs)
            frame.entries.extend(files)
            # Reversed so the lexicographically first directory is walked next
            stack.extend(reversed(subdirs))

        # Pre-order visit list: reversing it finalizes children before parents
        for frame in reversed(visited):
            children: list[TreeNode] = []
            for entry in frame.entries:
                if isinstance(entry, TreeNode):
                    children.append(entry)
                elif not entry.failed and entry.node is not None:
                    children.append(entry.node)
            frame.node = TreeNode(
                name=frame.name,
                path=frame.path,
                is_directory=True,
                children=tuple(children),
            )

        return cast(TreeNode, top.node)

    def _list_directory(
        self,
        frame: _DirFrame,
        warnings: list[WalkWarning],
    ) -> tuple[list[_DirFrame], list[TreeNode]]:
        """List one directory into child frames and file nodes.

        Both groups are sorted by name. Entries whose type or size cannot
        be read are omitted and recorded as warnings.

        Raises:
            OSError: If the directory itself cannot be listed.
        """
        with os.scandir(frame.location) as it:
            entries = sorted(it, key=lambda e: e.name)

        subdirs: list[_DirFrame] = []
        files: list[TreeNode] = []
        for entry in entries:
            path = f"{frame.path}{SEPARATOR}{entry.name}"
            try:
                if entry.is_dir(follow_symlinks=False):
                    subdirs.append(_DirFrame(name=entry.name, path=path, location=entry.path))
                    continue
                size = entry.stat(follow_symlinks=False).st_size
                is_symlink = entry.is_symlink()
            except OSError as e:
                logger.warning("Omitting unreadable entry %s: %s", path, e)
                warnings.append(WalkWarning(path=path, reason=_reason(e)))
                continue
            files.append(
                TreeNode(
                    name=entry.name,
                    path=path,
                    is_directory=False,
                    size=size,
                    is_symlink=is_symlink,
                )
            )
        return subdirs, files


def _reason(error: OSError) -> str:
    return error.strerror or str(error)


def build_forest(roots: Iterable[AllowedRoot]) -> Forest:
    """Enumerate the allowed roots with a fresh TreeBuilder."""
    return TreeBuilder().build_forest(roots)
