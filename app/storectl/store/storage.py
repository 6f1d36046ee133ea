"""Storage layer primitives for the content store.

This module defines the ContentStore interface the deletion orchestrator
talks to, and the local filesystem implementation used in production.
"""

import logging
import os
import stat
from abc import ABC, abstractmethod

from storectl.store.models import AuthorizedPath

logger = logging.getLogger(__name__)


class PathEscapeError(OSError):
    """Raised when a target's real location lies outside its owning root.

    This happens when an intermediate directory inside the root is a
    symbolic link pointing elsewhere.
    """


class ContentStore(ABC):
    """Abstract interface to the backing store.

    Every method takes an AuthorizedPath produced by the validator for
    exactly this call; implementations never accept raw user paths.

    Example:
        >>> store = LocalContentStore()
        >>> if not store.is_directory(target):
        ...     store.delete_file(target)
    """

    @abstractmethod
    def is_directory(self, target: AuthorizedPath) -> bool:
        """Check whether the target is a directory, without following symlinks.

        Args:
            target: Authorized location to probe.

        Returns:
            True if the entry is a real directory.

        Raises:
            FileNotFoundError: If nothing exists at the location.
            OSError: If the entry cannot be inspected.
        """

    def ensure_contained(self, target: AuthorizedPath) -> None:
        """Confirm the target really lies inside its owning root.

        The default implementation trusts the validator's lexical check.

        Raises:
            PathEscapeError: If the location resolves outside its root.
        """

    @abstractmethod
    def delete_file(self, target: AuthorizedPath) -> None:
        """Delete a single non-directory entry.

        Args:
            target: Authorized location of the file to delete.

        Raises:
            FileNotFoundError: If nothing exists at the location.
            IsADirectoryError: If the location is a directory.
            PathEscapeError: If the location resolves outside its root.
            OSError: For any other storage failure.
        """


class LocalContentStore(ContentStore):
    """ContentStore backed by the local filesystem.

    Symbolic links are never followed: probing uses ``lstat`` and deleting
    a link removes the link itself, not its target.
    """

    def is_directory(self, target: AuthorizedPath) -> bool:
        return stat.S_ISDIR(os.lstat(target.location).st_mode)

    def delete_file(self, target: AuthorizedPath) -> None:
        self.ensure_contained(target)

        if self.is_directory(target):
            msg = f"Is a directory: {target.logical_path}"
            raise IsADirectoryError(msg)

        target.location.unlink()
        logger.debug("Unlinked %s", target.location)

    def ensure_contained(self, target: AuthorizedPath) -> None:
        """Refuse targets whose parent resolves outside the root.

        Raises:
            PathEscapeError: If the real parent directory escapes the root.
        """
        real_root = os.path.realpath(target.root.path)
        real_parent = os.path.realpath(target.location.parent)
        prefix = real_root.rstrip(os.sep) + os.sep
        if real_parent != real_root and not real_parent.startswith(prefix):
            msg = f"Path resolves outside root '{target.root.name}': {target.logical_path}"
            raise PathEscapeError(msg)
