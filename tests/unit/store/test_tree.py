"""Unit tests for TreeBuilder.

Tests for enumeration of allowed roots into a forest.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from storectl.store.models import AllowedRoot, TreeNode
from storectl.store.tree import TreeBuilder, build_forest


def _names(node: TreeNode) -> list[str]:
    return [child.name for child in node.children or ()]


class TestBuildForest:
    """Tests for the overall forest structure."""

    def test_one_top_node_per_root(self, roots: tuple[AllowedRoot, ...]) -> None:
        """Each available root becomes a top-level node named after it."""
        forest = TreeBuilder().build_forest(roots)

        assert list(forest.roots) == ["audio", "covers"]
        audio = forest.roots["audio"]
        assert audio.name == "audio"
        assert audio.path == "audio"
        assert audio.is_directory
        assert audio.size is None

    def test_book_scenario(self, tmp_path: Path) -> None:
        """Nested directories, a file and an empty directory are all represented."""
        base = tmp_path / "audio"
        (base / "user_1" / "book_2").mkdir(parents=True)
        (base / "user_1" / "book_3").mkdir()
        (base / "user_1" / "book_2" / "track.mp3").write_bytes(b"x" * 2048)

        forest = build_forest([AllowedRoot(name="audio", path=base)])

        top = forest.roots["audio"]
        assert _names(top) == ["user_1"]
        user = (top.children or ())[0]
        assert user.is_directory
        assert _names(user) == ["book_2", "book_3"]

        book_2, book_3 = user.children or ()
        assert book_2.path == "audio/user_1/book_2"
        assert _names(book_2) == ["track.mp3"]
        track = (book_2.children or ())[0]
        assert track.path == "audio/user_1/book_2/track.mp3"
        assert not track.is_directory
        assert track.size == 2048
        assert track.children is None

        assert book_3.is_directory
        assert book_3.children == ()

    def test_directories_before_files(self, tmp_path: Path) -> None:
        """Each level lists directories first, then files, both by name."""
        base = tmp_path / "mixed"
        base.mkdir()
        for name in ("b.txt", "A.txt", "a.txt"):
            (base / name).write_text("x")
        for name in ("zdir", "Bdir", "adir"):
            (base / name).mkdir()

        forest = build_forest([AllowedRoot(name="mixed", path=base)])

        assert _names(forest.roots["mixed"]) == [
            "Bdir",
            "adir",
            "zdir",
            "A.txt",
            "a.txt",
            "b.txt",
        ]

    def test_every_node_path_starts_with_root(self, roots: tuple[AllowedRoot, ...]) -> None:
        """Node paths are root-prefixed and extend their parent's path by one name."""
        forest = build_forest(roots)

        for name, top in forest.roots.items():
            stack = [top]
            while stack:
                node = stack.pop()
                assert node.path == name or node.path.startswith(f"{name}/")
                for child in node.children or ():
                    assert child.path == f"{node.path}/{child.name}"
                    stack.append(child)

    def test_re_enumeration_is_identical(self, roots: tuple[AllowedRoot, ...]) -> None:
        """Two calls without mutation yield equal forests."""
        first = build_forest(roots)
        second = build_forest(roots)

        assert first.roots == second.roots
        assert first.stats == second.stats

    def test_fresh_snapshot_each_call(self, roots: tuple[AllowedRoot, ...]) -> None:
        """A file created between calls appears in the second forest."""
        builder = TreeBuilder()
        before = builder.build_forest(roots)
        (roots[1].path / "y.png").write_bytes(b"1")
        after = builder.build_forest(roots)

        assert before.find("covers/y.png") is None
        assert after.find("covers/y.png") is not None

    def test_deep_tree_does_not_recurse(self, tmp_path: Path) -> None:
        """Very deep trees are walked without hitting the recursion limit."""
        base = tmp_path / "deep"
        current = base
        for _ in range(300):
            current = current / "d"
        current.mkdir(parents=True)
        (current / "leaf.txt").write_text("x")

        forest = build_forest([AllowedRoot(name="deep", path=base)])

        assert forest.stats.total_files == 1
        assert forest.stats.total_directories == 300


class TestStats:
    """Tests for aggregate statistics."""

    def test_totals(self, roots: tuple[AllowedRoot, ...]) -> None:
        """Totals count files, bytes and directories below the roots."""
        forest = build_forest(roots)

        assert forest.stats.total_files == 3
        assert forest.stats.total_bytes == 3 + 2048 + 5
        assert forest.stats.total_directories == 3

    def test_per_root(self, roots: tuple[AllowedRoot, ...]) -> None:
        """Per-root counters are keyed by root name."""
        stats = build_forest(roots).stats.per_root

        assert stats["audio"].files == 2
        assert stats["audio"].bytes == 2051
        assert stats["audio"].directories == 3
        assert stats["covers"].files == 1
        assert stats["covers"].items == 1


class TestUnavailable:
    """Tests for roots and entries that cannot be read."""

    def test_missing_root_is_reported(self, roots: tuple[AllowedRoot, ...], tmp_path: Path) -> None:
        """A missing root is reported while others are still enumerated."""
        missing = AllowedRoot(name="gone", path=tmp_path / "does-not-exist")

        forest = build_forest((*roots, missing))

        assert "gone" not in forest.roots
        assert "audio" in forest.roots
        assert [u.name for u in forest.unavailable_roots] == ["gone"]
        assert "gone" not in forest.stats.per_root

    def test_root_that_is_a_file(self, tmp_path: Path) -> None:
        """A root pointing at a regular file is unavailable."""
        target = tmp_path / "file.txt"
        target.write_text("x")

        forest = build_forest([AllowedRoot(name="file", path=target)])

        assert forest.roots == {}
        assert forest.unavailable_roots[0].name == "file"

    def test_unreadable_subdirectory_is_omitted(self, roots: tuple[AllowedRoot, ...]) -> None:
        """A subtree that cannot be listed is left out with a warning."""
        blocked = str(roots[0].path / "user_1" / "book_2")
        real_scandir = os.scandir

        def fake_scandir(path: str) -> object:
            if str(path) == blocked:
                raise PermissionError(13, "Permission denied", path)
            return real_scandir(path)

        with patch("storectl.store.tree.os.scandir", side_effect=fake_scandir):
            forest = build_forest(roots)

        user = forest.find("audio/user_1")
        assert user is not None
        assert _names(user) == ["book_3"]
        assert forest.find("audio/user_1/book_2") is None
        assert [w.path for w in forest.warnings] == ["audio/user_1/book_2"]
        assert forest.warnings[0].reason == "Permission denied"
        assert forest.roots["covers"].children is not None

    def test_unreadable_root_listing(self, roots: tuple[AllowedRoot, ...]) -> None:
        """A root whose listing fails is reported as unavailable."""
        blocked = str(roots[1].path)
        real_scandir = os.scandir

        def fake_scandir(path: str) -> object:
            if str(path) == blocked:
                raise PermissionError(13, "Permission denied", path)
            return real_scandir(path)

        with patch("storectl.store.tree.os.scandir", side_effect=fake_scandir):
            forest = build_forest(roots)

        assert list(forest.roots) == ["audio"]
        assert forest.unavailable_roots[0].name == "covers"
        assert "Permission denied" in forest.unavailable_roots[0].reason


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
class TestSymlinks:
    """Tests for symbolic link handling."""

    def test_directory_symlink_is_not_followed(self, tmp_path: Path) -> None:
        """A symlink to a directory is listed as a leaf, never descended into."""
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "secret.txt").write_text("secret")
        base = tmp_path / "root"
        base.mkdir()
        (base / "link").symlink_to(outside, target_is_directory=True)

        forest = build_forest([AllowedRoot(name="root", path=base)])

        link = forest.find("root/link")
        assert link is not None
        assert link.is_symlink
        assert not link.is_directory
        assert link.children is None
        assert forest.find("root/link/secret.txt") is None
        assert forest.stats.total_files == 1

    def test_dangling_symlink_is_listed(self, tmp_path: Path) -> None:
        """A dangling symlink is still reported with its own size."""
        base = tmp_path / "root"
        base.mkdir()
        (base / "dangling").symlink_to(tmp_path / "nowhere")

        forest = build_forest([AllowedRoot(name="root", path=base)])

        node = forest.find("root/dangling")
        assert node is not None
        assert node.is_symlink
        assert node.size is not None
