"""Throttled single-line progress bar written to stderr."""

from __future__ import annotations

import shutil
import time
from typing import Final

import click

from dir_analyzer.types.protocols import ProgressCallback

BAR_LENGTH: Final[int] = 40
UPDATE_INTERVAL_SECONDS: Final[float] = 0.1


class ProgressBar:
    """Renders ``[████░░░░] 42% (42/100) path`` on a single terminal line.

    Redraws at most every ``update_interval`` seconds, except for the final
    ``current == total`` call which is always drawn and ends the line.
    """

    def __init__(self, update_interval: float = UPDATE_INTERVAL_SECONDS) -> None:
        self.update_interval: float = update_interval
        self._last_update: float | None = None

    def __call__(self, current: int, total: int, label: str | None = None) -> None:
        self.show(current, total, label)

    def show(self, current: int, total: int, label: str | None = None) -> None:
        now = time.monotonic()
        finished = total > 0 and current >= total
        if not finished and self._last_update is not None and now - self._last_update < self.update_interval:
            return
        self._last_update = now

        click.echo(f"\r{format_progress_line(current, total, label)}", nl=False, err=True)
        if finished:
            click.echo("", err=True)


def format_progress_line(current: int, total: int, label: str | None = None, width: int | None = None) -> str:
    """Build the progress line text.

    Long labels are shortened from the left so the end of a path stays
    visible.

    Examples:
        >>> format_progress_line(1, 4, None)
        '[██████████░░░░░░░░░░░░░░░░░░░░░░░░░░░░░░] 25% (1/4)'
    """
    ratio = min(current / total, 1.0) if total > 0 else 1.0
    filled = round(ratio * BAR_LENGTH)
    bar = "█" * filled + "░" * (BAR_LENGTH - filled)
    text = f"[{bar}] {round(ratio * 100)}% ({current}/{total})"

    if label:
        columns = width if width is not None else shutil.get_terminal_size().columns
        max_label = max(columns - len(text) - 5, 10)
        if len(label) > max_label:
            label = "..." + label[-(max_label - 3) :]
        text = f"{text} {label}"
    return text


def create_progress_callback(enabled: bool = True) -> ProgressCallback | None:
    """Return a fresh progress bar, or None when progress output is disabled."""
    if not enabled:
        return None
    return ProgressBar()
