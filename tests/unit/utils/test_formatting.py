"""Unit tests for formatting utilities.

Tests cover:
- All unit boundaries (Bytes, KB, MB, GB, TB)
- Precision control
- MiB conversion used by the JSON report
- Duration formatting
- Property-based testing with Hypothesis
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from dir_analyzer.utils.formatting import format_duration, format_size, format_size_mb


class TestFormatSize:
    """Test suite for format_size function."""

    @pytest.mark.parametrize(
        ("bytes_value", "expected"),
        [
            (0, "0 Bytes"),
            (1, "1 Bytes"),
            (1023, "1023 Bytes"),
            (1024, "1.0 KB"),
            (1536, "1.5 KB"),
            (1024**2, "1.0 MB"),
            (1024**2 * 5, "5.0 MB"),
            (1024**3, "1.0 GB"),
            (1024**3 * 10, "10.0 GB"),
            (1024**4, "1.0 TB"),
            (2748779069440, "2.5 TB"),
            (1024**5, "1024.0 TB"),
        ],
    )
    def test_unit_boundaries(self, bytes_value: int, expected: str) -> None:
        assert format_size(bytes_value) == expected

    def test_precision(self) -> None:
        assert format_size(1536, precision=2) == "1.50 KB"
        assert format_size(1536, precision=0) == "2 KB"

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            _ = format_size(-1)

    @given(st.integers(min_value=0, max_value=1024**5))
    def test_always_has_unit(self, bytes_value: int) -> None:
        """Property: every output ends with a known unit."""
        assert format_size(bytes_value).rsplit(" ", 1)[1] in {"Bytes", "KB", "MB", "GB", "TB"}


class TestFormatSizeMb:
    def test_rounding(self) -> None:
        assert format_size_mb(1572864) == 1.5
        assert format_size_mb(10) == 0.0

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValueError):
            _ = format_size_mb(-5)


class TestFormatDuration:
    """Test suite for format_duration function."""

    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [
            (0, "0.0s"),
            (0.5, "0.5s"),
            (59, "59.0s"),
            (60, "1m"),
            (90, "1m 30s"),
            (3600, "1h"),
            (3665, "1h 1m"),
            (7322, "2h 2m"),
        ],
    )
    def test_formats(self, seconds: float, expected: str) -> None:
        assert format_duration(seconds) == expected

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            _ = format_duration(-0.1)
