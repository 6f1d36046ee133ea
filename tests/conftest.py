"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from pathlib import Path

import pytest
from storectl.store.models import AllowedRoot


@pytest.fixture(autouse=True)
def isolated_xdg(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG config and state directories at a temporary location."""
    xdg = tmp_path / "xdg"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(xdg / "config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(xdg / "state"))
    monkeypatch.delenv("STORECTL_CONFIG", raising=False)
    return xdg


@pytest.fixture
def store_dir(tmp_path: Path) -> Path:
    """Create a small content store with an audio and a covers root.

    Layout:
        audio/a.mp3                       (3 bytes)
        audio/user_1/book_2/track.mp3     (2048 bytes)
        audio/user_1/book_3/              (empty)
        covers/x.png                      (5 bytes)
    """
    base = tmp_path / "content"
    audio = base / "audio"
    covers = base / "covers"

    (audio / "user_1" / "book_2").mkdir(parents=True)
    (audio / "user_1" / "book_3").mkdir()
    covers.mkdir(parents=True)

    (audio / "a.mp3").write_bytes(b"abc")
    (audio / "user_1" / "book_2" / "track.mp3").write_bytes(b"\0" * 2048)
    (covers / "x.png").write_bytes(b"12345")
    return base


@pytest.fixture
def roots(store_dir: Path) -> tuple[AllowedRoot, ...]:
    """Allowed roots for the sample content store."""
    return (
        AllowedRoot(name="audio", path=store_dir / "audio"),
        AllowedRoot(name="covers", path=store_dir / "covers"),
    )


@pytest.fixture
def config_file(store_dir: Path, tmp_path: Path) -> Path:
    """Write a roots.toml describing the sample content store."""
    path = tmp_path / "roots.toml"
    path.write_text(
        "[[roots]]\n"
        'name = "audio"\n'
        f'path = "{store_dir / "audio"}"\n'
        "\n"
        "[[roots]]\n"
        'name = "covers"\n'
        f'path = "{store_dir / "covers"}"\n'
    )
    return path
