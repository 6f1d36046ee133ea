"""Unit tests for console formatting helpers."""

import pytest
from storectl.utils.formatting import format_size, print_error, print_success


class TestFormatSize:
    """Tests for format_size."""

    @pytest.mark.parametrize(
        ("size", "expected"),
        [
            (None, "0 B"),
            (0, "0 B"),
            (512, "512 B"),
            (2048, "2.0 KB"),
            (1536 * 1024, "1.5 MB"),
            (3 * 1024**3, "3.0 GB"),
            (2 * 1024**4, "2.0 TB"),
        ],
    )
    def test_units(self, size: int | None, expected: str) -> None:
        """Sizes are rendered with the largest fitting unit."""
        assert format_size(size) == expected


class TestPrintHelpers:
    """Tests for the print_* helpers."""

    def test_success_goes_to_stdout(self, capsys: pytest.CaptureFixture[str]) -> None:
        """print_success writes to standard output."""
        print_success("done")

        assert "done" in capsys.readouterr().out

    def test_error_goes_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        """print_error writes a prefixed message to standard error."""
        print_error("boom")

        captured = capsys.readouterr()
        assert "Error:" in captured.err
        assert "boom" in captured.err
        assert captured.out == ""
