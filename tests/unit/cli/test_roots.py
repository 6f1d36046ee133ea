"""Unit tests for the roots command."""

import json
from pathlib import Path

from storectl.cli.commands.roots import root_status
from storectl.cli.main import app
from storectl.store.models import AllowedRoot
from typer.testing import CliRunner

runner = CliRunner()


class TestRootStatus:
    """Tests for root_status."""

    def test_available(self, roots: tuple[AllowedRoot, ...]) -> None:
        """An existing directory is available."""
        assert root_status(roots[0]) == "available"

    def test_missing(self, tmp_path: Path) -> None:
        """A missing directory is reported as missing."""
        assert root_status(AllowedRoot(name="x", path=tmp_path / "nope")) == "missing"

    def test_not_a_directory(self, tmp_path: Path) -> None:
        """A regular file is not a usable root."""
        target = tmp_path / "file"
        target.write_text("x")
        assert root_status(AllowedRoot(name="x", path=target)) == "not a directory"


class TestRootsCommand:
    """Tests for `storectl roots`."""

    def test_table(self, config_file: Path) -> None:
        """The table lists every configured root."""
        result = runner.invoke(app, ["--config", str(config_file), "roots"])

        assert result.exit_code == 0
        assert "Allowed Roots" in result.stdout
        assert "audio" in result.stdout
        assert "covers" in result.stdout
        assert "available" in result.stdout

    def test_json(self, config_file: Path, store_dir: Path) -> None:
        """JSON output includes name, path and status."""
        result = runner.invoke(app, ["--config", str(config_file), "roots", "-f", "json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [r["name"] for r in data] == ["audio", "covers"]
        assert data[0]["path"] == str((store_dir / "audio").resolve())
        assert data[1]["status"] == "available"

    def test_empty_config(self, tmp_path: Path) -> None:
        """A configuration without roots is an error."""
        config_path = tmp_path / "roots.toml"
        config_path.write_text("")

        result = runner.invoke(app, ["--config", str(config_path), "roots"])

        assert result.exit_code == 1
        assert "No allowed roots" in result.output
