"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest

from dir_analyzer.utils.logging import clear_scan_id
from tests.fixtures.fake_filesystem import FakeFileSystem
from tests.fixtures.recording import RecordingProgress


@pytest.fixture
def fake_fs() -> FakeFileSystem:
    """Empty in-memory filesystem rooted at /data."""
    return FakeFileSystem("/data")


@pytest.fixture
def progress() -> RecordingProgress:
    return RecordingProgress()


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Small on-disk tree: a.txt, b/c.txt (same content) and an empty b/empty.dat."""
    _ = (tmp_path / "a.txt").write_bytes(b"hello")
    (tmp_path / "b").mkdir()
    _ = (tmp_path / "b" / "c.txt").write_bytes(b"hello")
    _ = (tmp_path / "b" / "empty.dat").write_bytes(b"")
    return tmp_path


@pytest.fixture(autouse=True)
def reset_logging_state() -> Generator[None, None, None]:
    """Restore root logger handlers and the scan ID after each test."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
    clear_scan_id()
