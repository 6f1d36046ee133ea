"""Content store domain models for enumeration and deletion.

This module defines the core data structures shared by the tree walk,
the path validator and the deletion orchestrator: tree nodes, aggregate
statistics, authorization results and deletion outcomes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

# Canonical separator for logical paths exposed to callers
SEPARATOR = "/"

# Logical root names are a single path segment
ROOT_NAME_PATTERN = re.compile(r"[A-Za-z0-9._-]+")


class ErrorKind(str, Enum):
    """Classification of a failed authorization or deletion.

    Attributes:
        INVALID_PATH: Empty, whitespace-only or otherwise malformed path.
        TRAVERSAL: Path contains a parent-directory segment.
        OUTSIDE_ROOTS: Path does not resolve strictly inside an allowed root.
        DIRECTORY_TARGET: Path names a directory; only files may be deleted.
        NOT_FOUND: Authorized path does not exist in the store.
        IO_ERROR: The store rejected the operation for another reason.
    """

    INVALID_PATH = "invalid_path"
    TRAVERSAL = "traversal"
    OUTSIDE_ROOTS = "outside_roots"
    DIRECTORY_TARGET = "directory_target"
    NOT_FOUND = "not_found"
    IO_ERROR = "io_error"

    @property
    def status_class(self) -> StatusClass:
        """Semantic status class of this error kind."""
        return _STATUS_CLASSES[self]

    @property
    def is_validation_error(self) -> bool:
        """Whether the error is a caller mistake detected before any deletion."""
        return self in (
            ErrorKind.INVALID_PATH,
            ErrorKind.TRAVERSAL,
            ErrorKind.OUTSIDE_ROOTS,
            ErrorKind.DIRECTORY_TARGET,
        )


class StatusClass(str, Enum):
    """Transport-agnostic status class for a failure.

    The ``code`` property gives the HTTP-style equivalent.
    """

    BAD_REQUEST = "bad_request"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    IO_FAILURE = "io_failure"

    @property
    def code(self) -> int:
        """HTTP-style status code for this class."""
        return _STATUS_CODES[self]


_STATUS_CLASSES: dict[ErrorKind, StatusClass] = {
    ErrorKind.INVALID_PATH: StatusClass.BAD_REQUEST,
    ErrorKind.TRAVERSAL: StatusClass.FORBIDDEN,
    ErrorKind.OUTSIDE_ROOTS: StatusClass.FORBIDDEN,
    ErrorKind.DIRECTORY_TARGET: StatusClass.FORBIDDEN,
    ErrorKind.NOT_FOUND: StatusClass.NOT_FOUND,
    ErrorKind.IO_ERROR: StatusClass.IO_FAILURE,
}

_STATUS_CODES: dict[StatusClass, int] = {
    StatusClass.BAD_REQUEST: 400,
    StatusClass.FORBIDDEN: 403,
    StatusClass.NOT_FOUND: 404,
    StatusClass.IO_FAILURE: 500,
}


@dataclass(frozen=True, slots=True)
class AllowedRoot:
    """A fixed mapping from a logical name to a backing directory.

    Attributes:
        name: Logical name, a single path segment (e.g. "audio").
        path: Absolute backing directory on the local filesystem.
    """

    name: str
    path: Path

    def __post_init__(self) -> None:
        """Validate root data after initialization."""
        if not ROOT_NAME_PATTERN.fullmatch(self.name) or self.name in (".", ".."):
            msg = f"Invalid root name: {self.name!r}"
            raise ValueError(msg)
        if not self.path.is_absolute():
            msg = f"Root path must be absolute, got {self.path}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class TreeNode:
    """One file or directory entry in an enumerated forest.

    Directories carry ``children`` (possibly empty) and no ``size``;
    everything else carries ``size`` and no ``children``.

    Attributes:
        name: The entry's own name, without separators.
        path: Logical path ("<root name>/<path inside root>").
        is_directory: Whether the entry is a directory.
        size: Byte count for non-directories, None for directories.
        children: Ordered child nodes for directories, None for files.
        is_symlink: Whether the entry is a symbolic link (never followed).
    """

    name: str
    path: str
    is_directory: bool
    size: int | None = None
    children: tuple[TreeNode, ...] | None = None
    is_symlink: bool = False

    def __post_init__(self) -> None:
        """Validate node shape after initialization."""
        if not self.name or SEPARATOR in self.name:
            msg = f"Invalid node name: {self.name!r}"
            raise ValueError(msg)
        if self.is_directory:
            if self.size is not None or self.children is None:
                msg = f"Directory node {self.path} must have children and no size"
                raise ValueError(msg)
        elif self.size is None or self.children is not None:
            msg = f"File node {self.path} must have a size and no children"
            raise ValueError(msg)

    def iter_nodes(self) -> list[TreeNode]:
        """Return this node and all descendants in pre-order."""
        nodes: list[TreeNode] = []
        stack: list[TreeNode] = [self]
        while stack:
            node = stack.pop()
            nodes.append(node)
            if node.children:
                stack.extend(reversed(node.children))
        return nodes

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dictionary.

        Returns:
            Dictionary with ``size`` for files and ``children`` for directories.
        """
        result: dict[str, Any] = {
            "name": self.name,
            "path": self.path,
            "is_directory": self.is_directory,
        }
        if self.is_directory:
            result["children"] = [child.to_dict() for child in self.children or ()]
        else:
            result["size"] = self.size
        if self.is_symlink:
            result["is_symlink"] = True
        return result


@dataclass(slots=True)
class RootStats:
    """Per-root counters accumulated during a walk."""

    files: int = 0
    directories: int = 0
    bytes: int = 0

    @property
    def items(self) -> int:
        """Total number of entries below the root."""
        return self.files + self.directories

    def to_dict(self) -> dict[str, int]:
        return {
            "files": self.files,
            "directories": self.directories,
            "bytes": self.bytes,
            "items": self.items,
        }


@dataclass(frozen=True, slots=True)
class AggregateStats:
    """Statistics computed once per enumeration call.

    Attributes:
        total_files: Number of non-directory entries across all roots.
        total_bytes: Sum of file sizes across all roots.
        total_directories: Number of directories below the roots.
        per_root: Counters keyed by logical root name.
    """

    total_files: int
    total_bytes: int
    total_directories: int
    per_root: dict[str, RootStats] = field(default_factory=lambda: {})

    @classmethod
    def from_roots(cls, per_root: dict[str, RootStats]) -> AggregateStats:
        """Build totals from per-root counters."""
        return cls(
            total_files=sum(s.files for s in per_root.values()),
            total_bytes=sum(s.bytes for s in per_root.values()),
            total_directories=sum(s.directories for s in per_root.values()),
            per_root=dict(per_root),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_files": self.total_files,
            "total_bytes": self.total_bytes,
            "total_directories": self.total_directories,
            "per_root": {name: stats.to_dict() for name, stats in self.per_root.items()},
        }


@dataclass(frozen=True, slots=True)
class WalkWarning:
    """A subtree or entry omitted from a forest.

    Attributes:
        path: Logical path of the omitted entry.
        reason: Underlying OS error message.
    """

    path: str
    reason: str

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path, "reason": self.reason}


@dataclass(frozen=True, slots=True)
class UnavailableRoot:
    """An allowed root that could not be enumerated at all."""

    name: str
    reason: str

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "reason": self.reason}


@dataclass(frozen=True, slots=True)
class Forest:
    """Result of one enumeration call.

    Attributes:
        roots: Top-level node per available root, keyed by logical name.
        stats: Aggregate statistics accumulated during the walk.
        unavailable_roots: Roots that could not be enumerated.
        warnings: Entries omitted because they could not be read.
    """

    roots: dict[str, TreeNode]
    stats: AggregateStats
    unavailable_roots: tuple[UnavailableRoot, ...] = ()
    warnings: tuple[WalkWarning, ...] = ()

    def find(self, path: str) -> TreeNode | None:
        """Find a node by logical path.

        Args:
            path: Logical path of the node.

        Returns:
            The matching TreeNode, or None if the snapshot has no such node.
        """
        for top in self.roots.values():
            if path != top.path and not path.startswith(top.path + SEPARATOR):
                continue
            node = top
            remainder = path[len(top.path) :].strip(SEPARATOR)
            for segment in remainder.split(SEPARATOR) if remainder else ():
                children = node.children or ()
                match = next((c for c in children if c.name == segment), None)
                if match is None:
                    break
                node = match
            else:
                return node
        return None

    def file_paths(self) -> set[str]:
        """Logical paths of every non-directory node in the forest."""
        return {
            node.path
            for top in self.roots.values()
            for node in top.iter_nodes()
            if not node.is_directory
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "roots": {name: node.to_dict() for name, node in self.roots.items()},
            "stats": self.stats.to_dict(),
            "unavailable_roots": [r.to_dict() for r in self.unavailable_roots],
            "warnings": [w.to_dict() for w in self.warnings],
        }


@dataclass(frozen=True, slots=True)
class AuthorizedPath:
    """A candidate path accepted by the validator.

    Bound to exactly one allowed root and suitable for exactly one
    storage-layer call.

    Attributes:
        root: The owning allowed root.
        relative: Normalized path inside the root ("/"-separated, non-empty).
        location: Absolute resolved location on the backing store.
    """

    root: AllowedRoot
    relative: str
    location: Path

    @property
    def logical_path(self) -> str:
        """Canonical logical path ("<root name>/<relative>")."""
        return f"{self.root.name}{SEPARATOR}{self.relative}"


@dataclass(frozen=True, slots=True)
class Rejection:
    """A candidate path refused by the validator.

    Attributes:
        candidate: The path as submitted.
        kind: Error classification.
        reason: Human-readable explanation.
    """

    candidate: str
    kind: ErrorKind
    reason: str


@dataclass(frozen=True, slots=True)
class DeletionOutcome:
    """Result of a single deletion attempt.

    Attributes:
        path: The path as submitted.
        success: Whether the file was deleted (or would be, in dry-run).
        error_kind: Classification of the failure, None on success.
        error: Failure message, None on success.
        dry_run: Whether this was a dry-run (no actual deletion).
        logical_path: Canonical logical path, set once the validator accepted it.
    """

    path: str
    success: bool
    error_kind: ErrorKind | None = None
    error: str | None = None
    dry_run: bool = False
    logical_path: str | None = None

    def __post_init__(self) -> None:
        """Validate outcome consistency after initialization."""
        if self.success and self.error_kind is not None:
            msg = "Successful outcome cannot carry an error classification"
            raise ValueError(msg)
        if not self.success and self.error_kind is None:
            msg = "Failed outcome must carry an error classification"
            raise ValueError(msg)

    @property
    def failed(self) -> bool:
        """Check if the deletion failed."""
        return not self.success

    @classmethod
    def ok(cls, path: str, logical_path: str, *, dry_run: bool = False) -> DeletionOutcome:
        return cls(path=path, success=True, dry_run=dry_run, logical_path=logical_path)

    @classmethod
    def fail(
        cls, path: str, kind: ErrorKind, error: str, logical_path: str | None = None
    ) -> DeletionOutcome:
        return cls(
            path=path,
            success=False,
            error_kind=kind,
            error=error or kind.value,
            logical_path=logical_path,
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"path": self.path, "success": self.success}
        if self.logical_path is not None:
            result["logical_path"] = self.logical_path
        if self.error_kind is not None:
            result["error_kind"] = self.error_kind.value
            result["status"] = self.error_kind.status_class.code
            result["error"] = self.error
        if self.dry_run:
            result["dry_run"] = True
        return result


@dataclass(frozen=True, slots=True)
class BulkDeletionReport:
    """Ordered, itemized result of a bulk deletion.

    Attributes:
        outcomes: One outcome per submitted path, in submission order.
    """

    outcomes: tuple[DeletionOutcome, ...] = ()

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.success)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.failed)

    @property
    def any_succeeded(self) -> bool:
        """Whether at least one item succeeded (re-enumeration trigger)."""
        return self.succeeded > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "outcomes": [o.to_dict() for o in self.outcomes],
            "succeeded": self.succeeded,
            "failed": self.failed,
            "total": self.total,
        }
