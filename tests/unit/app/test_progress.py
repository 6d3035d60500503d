"""Unit tests for the terminal progress bar."""

import pytest

from dir_analyzer.app.progress import BAR_LENGTH, ProgressBar, create_progress_callback, format_progress_line


class TestFormatProgressLine:
    def test_quarter(self) -> None:
        line = format_progress_line(1, 4)

        assert line == "[" + "█" * 10 + "░" * 30 + "] 25% (1/4)"

    def test_complete(self) -> None:
        assert format_progress_line(3, 3).startswith("[" + "█" * BAR_LENGTH + "] 100%")

    def test_zero_total_is_complete(self) -> None:
        assert "100% (0/0)" in format_progress_line(0, 0)

    def test_overshoot_is_clamped(self) -> None:
        assert "100% (5/4)" in format_progress_line(5, 4)

    def test_short_label_kept(self) -> None:
        assert format_progress_line(1, 2, "/data/a.txt", width=200).endswith(" /data/a.txt")

    def test_long_label_truncated_from_left(self) -> None:
        label = "/very/long/path/" + "x" * 200 + "/tail.txt"

        line = format_progress_line(1, 2, label, width=80)

        assert line.endswith("tail.txt")
        assert "..." in line
        assert len(line) <= 80


class TestProgressBar:
    def test_writes_to_stderr_and_finishes_line(self, capsys: pytest.CaptureFixture[str]) -> None:
        bar = ProgressBar(update_interval=0)

        bar(1, 2, None)
        bar(2, 2, None)

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "\r[" in captured.err
        assert "100% (2/2)" in captured.err
        assert captured.err.endswith("\n")

    def test_throttles_intermediate_updates(self, capsys: pytest.CaptureFixture[str]) -> None:
        bar = ProgressBar(update_interval=3600)

        bar(1, 10)
        bar(2, 10)
        bar(10, 10)

        err = capsys.readouterr().err
        assert "(1/10)" in err
        assert "(2/10)" not in err
        assert "(10/10)" in err


class TestCreateProgressCallback:
    def test_disabled(self) -> None:
        assert create_progress_callback(False) is None

    def test_enabled(self) -> None:
        assert isinstance(create_progress_callback(True), ProgressBar)
