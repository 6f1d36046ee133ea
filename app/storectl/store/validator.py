"""Path-safety gate for content store operations.

Decides whether a candidate logical path ("<root name>/<path inside root>")
may be used to construct a filesystem operation. The decision is purely
lexical: the validator never touches the filesystem, so a rejection is
always reached without any I/O.
"""

import os
import re
from collections.abc import Iterable
from pathlib import Path
from urllib.parse import unquote

from storectl.store.models import (
    SEPARATOR,
    AllowedRoot,
    AuthorizedPath,
    ErrorKind,
    Rejection,
)

# Upper bound on nested percent-decoding passes ("%252e%252e" -> "%2e%2e" -> "..")
_MAX_DECODE_PASSES = 5

_DRIVE_PATTERN = re.compile(r"^[A-Za-z]:")

_PARENT_SEGMENT = ".."


def _fold(candidate: str) -> str:
    """Fold backslashes into the canonical separator.

    Only used to spot traversal and absolute input written with Windows
    separators. On POSIX a backslash is a legal filename character, so
    names are never resolved from the folded form.
    """
    return candidate.replace("\\", SEPARATOR)


def _decode(candidate: str) -> str:
    """Percent-decode until stable, then fold separators."""
    decoded = candidate
    for _ in range(_MAX_DECODE_PASSES):
        step = unquote(decoded)
        if step == decoded:
            break
        decoded = step
    return _fold(decoded)


def _segments(path: str) -> list[str]:
    """Split on the canonical separator, dropping empty and "." segments."""
    return [s for s in path.split(SEPARATOR) if s not in ("", ".")]


def _is_strict_descendant(location: str, root: str) -> bool:
    return location != root and location.startswith(root.rstrip(os.sep) + os.sep)


def validate(candidate: str, roots: Iterable[AllowedRoot]) -> AuthorizedPath | Rejection:
    """Authorize or reject a candidate logical path.

    The checks run in a fixed order: malformed input, traversal, root
    membership, then containment of the lexically resolved location.

    Args:
        candidate: Path as submitted by the caller (e.g. "audio/user_1/a.mp3").
        roots: The configured allowed roots.

    Returns:
        AuthorizedPath bound to one root on success, Rejection otherwise.
    """
    if not candidate or not candidate.strip():
        return Rejection(candidate, ErrorKind.INVALID_PATH, "Path is empty")

    folded = _fold(candidate)
    decoded = _decode(candidate)
    if "\x00" in folded or "\x00" in decoded:
        return Rejection(candidate, ErrorKind.INVALID_PATH, "Path contains a NUL byte")

    # Traversal takes precedence over every other shape problem. Folded and
    # decoded forms are only inspected here; names come from the raw input.
    if _PARENT_SEGMENT in folded.split(SEPARATOR) or _PARENT_SEGMENT in decoded.split(SEPARATOR):
        return Rejection(
            candidate,
            ErrorKind.TRAVERSAL,
            f"Path contains a parent-directory segment: {candidate}",
        )

    if folded.startswith(SEPARATOR) or _DRIVE_PATTERN.match(folded):
        return Rejection(candidate, ErrorKind.INVALID_PATH, f"Path must be relative: {candidate}")

    segments = _segments(candidate)
    if not segments:
        return Rejection(candidate, ErrorKind.INVALID_PATH, f"Path has no segments: {candidate}")

    root_name, relative_segments = segments[0], segments[1:]
    root = next((r for r in roots if r.name == root_name), None)
    if root is None:
        return Rejection(
            candidate,
            ErrorKind.OUTSIDE_ROOTS,
            f"Path is outside allowed roots: {candidate}",
        )
    if not relative_segments:
        return Rejection(
            candidate,
            ErrorKind.OUTSIDE_ROOTS,
            f"Path names the root itself, not an entry inside it: {candidate}",
        )

    relative = SEPARATOR.join(relative_segments)
    root_location = os.path.normpath(str(root.path))
    location = os.path.normpath(os.path.join(root_location, *relative_segments))
    if not _is_strict_descendant(location, root_location):
        return Rejection(
            candidate,
            ErrorKind.OUTSIDE_ROOTS,
            f"Path resolves outside root '{root.name}': {candidate}",
        )

    return AuthorizedPath(root=root, relative=relative, location=Path(location))


def is_authorized(result: AuthorizedPath | Rejection) -> bool:
    """Check if a validation result is an authorization."""
    return isinstance(result, AuthorizedPath)
