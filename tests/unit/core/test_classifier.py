"""Unit tests for file-type classification.

Tests cover:
- Extension extraction (case folding, dotless and trailing-dot names)
- Category lookup for every bucket
- Fallback to OTHER
- Count accumulation and reset
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from dir_analyzer.core.classifier import (
    FILE_TYPE_EXTENSIONS,
    FileClassifier,
    classify,
    empty_counts,
    get_file_extension,
)
from dir_analyzer.types.models import FileCategory


class TestGetFileExtension:
    """Test extension extraction."""

    @pytest.mark.parametrize(
        ("filename", "expected"),
        [
            ("photo.png", ".png"),
            ("Photo.JPG", ".jpg"),
            ("archive.tar.gz", ".gz"),
            (".bashrc", ".bashrc"),
            ("Makefile", ""),
            ("trailing.", ""),
            ("", ""),
        ],
    )
    def test_extension(self, filename: str, expected: str) -> None:
        assert get_file_extension(filename) == expected


class TestClassify:
    """Test the category lookup."""

    @pytest.mark.parametrize(
        ("filename", "category"),
        [
            ("holiday.jpeg", FileCategory.IMAGES),
            ("logo.SVG", FileCategory.IMAGES),
            ("movie.mkv", FileCategory.VIDEOS),
            ("report.pdf", FileCategory.DOCUMENTS),
            ("notes.txt", FileCategory.DOCUMENTS),
            ("song.flac", FileCategory.AUDIO),
            ("main.py", FileCategory.CODE),
            ("config.yaml", FileCategory.CODE),
            ("backup.7z", FileCategory.ARCHIVES),
            ("bundle.tar.gz", FileCategory.ARCHIVES),
        ],
    )
    def test_known_extensions(self, filename: str, category: FileCategory) -> None:
        assert classify(filename) is category

    def test_unknown_extension_is_other(self) -> None:
        assert classify("data.xyz") is FileCategory.OTHER

    def test_no_extension_is_other(self) -> None:
        assert classify("README") is FileCategory.OTHER

    def test_trailing_dot_is_other(self) -> None:
        assert classify("weird.") is FileCategory.OTHER

    def test_extension_tables_are_disjoint(self) -> None:
        """No extension appears in two categories."""
        seen: set[str] = set()
        for extensions in FILE_TYPE_EXTENSIONS.values():
            assert not (seen & extensions)
            seen |= extensions

    @given(st.text(max_size=40))
    def test_classify_is_total(self, filename: str) -> None:
        """Property: every name maps to exactly one of the seven categories."""
        assert classify(filename) in set(FileCategory)


class TestFileClassifier:
    """Test count accumulation."""

    def test_starts_with_all_categories_at_zero(self) -> None:
        classifier = FileClassifier()

        assert classifier.get_classification() == empty_counts()
        assert len(classifier.get_classification()) == 7

    def test_counts_accumulate(self) -> None:
        classifier = FileClassifier()
        for name in ("a.png", "b.png", "c.mp3", "d"):
            _ = classifier.classify_file(name)

        counts = classifier.get_classification()
        assert counts[FileCategory.IMAGES] == 2
        assert counts[FileCategory.AUDIO] == 1
        assert counts[FileCategory.OTHER] == 1
        assert sum(counts.values()) == 4

    def test_classify_file_returns_category(self) -> None:
        assert FileClassifier().classify_file("x.rs") is FileCategory.CODE

    def test_get_classification_returns_copy(self) -> None:
        classifier = FileClassifier()
        snapshot = classifier.get_classification()
        _ = classifier.classify_file("a.zip")

        assert snapshot[FileCategory.ARCHIVES] == 0

    def test_reset(self) -> None:
        classifier = FileClassifier()
        _ = classifier.classify_file("a.zip")
        classifier.reset()

        assert classifier.get_classification() == empty_counts()
