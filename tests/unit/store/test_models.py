"""Unit tests for content store models.

Tests for tree nodes, statistics, forests and deletion outcomes.
"""

from pathlib import Path

import pytest
from storectl.store.models import (
    AggregateStats,
    AllowedRoot,
    AuthorizedPath,
    BulkDeletionReport,
    DeletionOutcome,
    ErrorKind,
    Forest,
    RootStats,
    StatusClass,
    TreeNode,
)


def _forest() -> Forest:
    track = TreeNode(name="track.mp3", path="audio/u/track.mp3", is_directory=False, size=10)
    user = TreeNode(name="u", path="audio/u", is_directory=True, children=(track,))
    audio = TreeNode(name="audio", path="audio", is_directory=True, children=(user,))
    return Forest(
        roots={"audio": audio},
        stats=AggregateStats.from_roots({"audio": RootStats(files=1, directories=1, bytes=10)}),
    )


class TestErrorKind:
    """Tests for ErrorKind classification."""

    @pytest.mark.parametrize(
        ("kind", "code"),
        [
            (ErrorKind.INVALID_PATH, 400),
            (ErrorKind.TRAVERSAL, 403),
            (ErrorKind.OUTSIDE_ROOTS, 403),
            (ErrorKind.DIRECTORY_TARGET, 403),
            (ErrorKind.NOT_FOUND, 404),
            (ErrorKind.IO_ERROR, 500),
        ],
    )
    def test_status_codes(self, kind: ErrorKind, code: int) -> None:
        """Each error kind maps to its semantic status code."""
        assert kind.status_class.code == code

    def test_forbidden_class(self) -> None:
        """Traversal is a forbidden request."""
        assert ErrorKind.TRAVERSAL.status_class == StatusClass.FORBIDDEN

    def test_validation_errors(self) -> None:
        """Only pre-deletion checks count as validation errors."""
        assert ErrorKind.TRAVERSAL.is_validation_error
        assert ErrorKind.DIRECTORY_TARGET.is_validation_error
        assert not ErrorKind.NOT_FOUND.is_validation_error
        assert not ErrorKind.IO_ERROR.is_validation_error


class TestAllowedRoot:
    """Tests for AllowedRoot validation."""

    def test_valid(self) -> None:
        """A single-segment name and absolute path are accepted."""
        root = AllowedRoot(name="audio", path=Path("/srv/audio"))
        assert root.name == "audio"

    @pytest.mark.parametrize("name", ["", "a/b", "..", ".", "with space"])
    def test_invalid_name(self, name: str) -> None:
        """Names must be a single safe segment."""
        with pytest.raises(ValueError, match="Invalid root name"):
            AllowedRoot(name=name, path=Path("/srv/audio"))

    def test_relative_path(self) -> None:
        """Backing paths must be absolute."""
        with pytest.raises(ValueError, match="absolute"):
            AllowedRoot(name="audio", path=Path("srv/audio"))


class TestTreeNode:
    """Tests for TreeNode shape validation and serialization."""

    def test_directory_requires_children(self) -> None:
        """A directory without children is rejected."""
        with pytest.raises(ValueError, match="must have children"):
            TreeNode(name="d", path="r/d", is_directory=True)

    def test_file_requires_size(self) -> None:
        """A file without a size is rejected."""
        with pytest.raises(ValueError, match="must have a size"):
            TreeNode(name="f", path="r/f", is_directory=False)

    def test_name_cannot_contain_separator(self) -> None:
        """Node names are single segments."""
        with pytest.raises(ValueError, match="Invalid node name"):
            TreeNode(name="a/b", path="r/a/b", is_directory=False, size=1)

    def test_empty_directory_has_empty_children(self) -> None:
        """An empty directory serializes with an empty children list."""
        node = TreeNode(name="d", path="r/d", is_directory=True, children=())
        assert node.to_dict() == {"name": "d", "path": "r/d", "is_directory": True, "children": []}

    def test_file_to_dict(self) -> None:
        """Files serialize their size and no children."""
        node = TreeNode(name="f", path="r/f", is_directory=False, size=3, is_symlink=True)
        assert node.to_dict() == {
            "name": "f",
            "path": "r/f",
            "is_directory": False,
            "size": 3,
            "is_symlink": True,
        }

    def test_iter_nodes_pre_order(self) -> None:
        """iter_nodes yields a node before its descendants."""
        top = _forest().roots["audio"]
        assert [n.path for n in top.iter_nodes()] == ["audio", "audio/u", "audio/u/track.mp3"]


class TestForest:
    """Tests for Forest lookups and serialization."""

    def test_find(self) -> None:
        """find resolves logical paths to nodes."""
        forest = _forest()

        assert forest.find("audio") is forest.roots["audio"]
        node = forest.find("audio/u/track.mp3")
        assert node is not None
        assert node.size == 10

    def test_find_missing(self) -> None:
        """find returns None for paths not in the snapshot."""
        forest = _forest()

        assert forest.find("audio/u/other.mp3") is None
        assert forest.find("covers/x.png") is None
        assert forest.find("audiox/u") is None

    def test_file_paths(self) -> None:
        """file_paths lists only non-directory nodes."""
        assert _forest().file_paths() == {"audio/u/track.mp3"}

    def test_to_dict(self) -> None:
        """to_dict includes roots, stats, unavailable roots and warnings."""
        data = _forest().to_dict()

        assert set(data) == {"roots", "stats", "unavailable_roots", "warnings"}
        assert data["stats"]["total_files"] == 1
        assert data["stats"]["per_root"]["audio"]["items"] == 2


class TestAuthorizedPath:
    """Tests for AuthorizedPath."""

    def test_logical_path(self) -> None:
        """The logical path joins the root name and the relative path."""
        root = AllowedRoot(name="audio", path=Path("/srv/audio"))
        target = AuthorizedPath(root=root, relative="u/a.mp3", location=Path("/srv/audio/u/a.mp3"))
        assert target.logical_path == "audio/u/a.mp3"


class TestDeletionOutcome:
    """Tests for DeletionOutcome consistency and serialization."""

    def test_success_cannot_have_error(self) -> None:
        """A success with a classification is inconsistent."""
        with pytest.raises(ValueError):
            DeletionOutcome(path="a", success=True, error_kind=ErrorKind.IO_ERROR)

    def test_failure_requires_kind(self) -> None:
        """A failure without a classification is inconsistent."""
        with pytest.raises(ValueError):
            DeletionOutcome(path="a", success=False)

    def test_fail_to_dict(self) -> None:
        """Failures serialize their kind, status code and message."""
        outcome = DeletionOutcome.fail("audio/x", ErrorKind.NOT_FOUND, "gone", "audio/x")

        assert outcome.failed
        assert outcome.to_dict() == {
            "path": "audio/x",
            "success": False,
            "logical_path": "audio/x",
            "error_kind": "not_found",
            "status": 404,
            "error": "gone",
        }

    def test_fail_defaults_message(self) -> None:
        """An empty message falls back to the kind's value."""
        assert DeletionOutcome.fail("x", ErrorKind.IO_ERROR, "").error == "io_error"

    def test_dry_run_to_dict(self) -> None:
        """Dry-run successes are flagged."""
        outcome = DeletionOutcome.ok("audio/x", "audio/x", dry_run=True)
        assert outcome.to_dict()["dry_run"] is True


class TestBulkDeletionReport:
    """Tests for BulkDeletionReport counts."""

    def test_counts(self) -> None:
        """succeeded, failed and total are derived from the outcomes."""
        report = BulkDeletionReport(
            outcomes=(
                DeletionOutcome.ok("a", "a/1"),
                DeletionOutcome.fail("b", ErrorKind.NOT_FOUND, "gone"),
                DeletionOutcome.ok("c", "c/1"),
            )
        )

        assert report.total == 3
        assert report.succeeded == 2
        assert report.failed == 1
        assert report.any_succeeded
        assert report.to_dict()["failed"] == 1

    def test_all_failed(self) -> None:
        """A report without successes does not trigger re-enumeration."""
        report = BulkDeletionReport(
            outcomes=(DeletionOutcome.fail("b", ErrorKind.TRAVERSAL, "no"),)
        )
        assert not report.any_succeeded
