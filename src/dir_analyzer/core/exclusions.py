"""Exclusion pattern matching for directory traversal.

Patterns are either literal names or ``*``-globs. A glob is a regular
expression with ``*`` widened to ``.*`` and matches anywhere in the name
(substring semantics), so ``cache*`` also excludes ``my_cache_dir`` and
``*.log`` also excludes ``catalog``. Directories always carry the built-in
defaults; files only use the user patterns, and additionally match any
pattern that is a suffix of the name.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from functools import lru_cache
from typing import Final

logger = logging.getLogger(__name__)

DEFAULT_DIRECTORY_EXCLUDES: Final[frozenset[str]] = frozenset(
    {"node_modules", ".git", ".svn", ".hg", "dist", "build", ".cache"}
)


@lru_cache(maxsize=256)
def _compile_glob(pattern: str) -> re.Pattern[str] | None:
    """Translate a ``*``-glob into a substring regex.

    Returns None when the result is not a valid regular expression.
    """
    try:
        return re.compile(pattern.replace("*", ".*"))
    except re.error as exc:
        logger.warning("Invalid exclusion pattern %r, matching it literally: %s", pattern, exc)
        return None


def matches_pattern(name: str, pattern: str) -> bool:
    """Check ``name`` against a single pattern (exact or ``*``-glob).

    Examples:
        >>> matches_pattern("node_modules", "node_modules")
        True
        >>> matches_pattern("debug.log", "*.log")
        True
        >>> matches_pattern("logs", "*.log")
        False
    """
    if name == pattern:
        return True
    if "*" not in pattern:
        return False
    compiled = _compile_glob(pattern)
    return compiled is not None and compiled.search(name) is not None


def should_exclude_directory(name: str, exclude_patterns: Iterable[str] = ()) -> bool:
    """Decide whether a directory is skipped (never descended into).

    Args:
        name: Directory base name
        exclude_patterns: User patterns, unioned with the built-in defaults

    Returns:
        True if the directory must be skipped
    """
    if name in DEFAULT_DIRECTORY_EXCLUDES:
        return True
    return any(matches_pattern(name, pattern) for pattern in exclude_patterns)


def should_exclude_file(name: str, exclude_patterns: Iterable[str] = ()) -> bool:
    """Decide whether a file is skipped (not counted, not collected).

    Besides the exact and glob checks, a pattern matches when it is a suffix
    of the name, so both ``*.log`` and ``.log`` exclude ``debug.log``.

    Args:
        name: File base name
        exclude_patterns: User patterns (files have no built-in defaults)

    Returns:
        True if the file must be skipped
    """
    return any(name.endswith(pattern) or matches_pattern(name, pattern) for pattern in exclude_patterns)


class ExclusionFilter:
    """Bundles a pattern set for repeated directory and file checks."""

    def __init__(self, patterns: Iterable[str] = ()) -> None:
        # Empty patterns would match every file as a suffix
        self.patterns: frozenset[str] = frozenset(p for p in patterns if p)

    def excludes_directory(self, name: str) -> bool:
        return should_exclude_directory(name, self.patterns)

    def excludes_file(self, name: str) -> bool:
        return should_exclude_file(name, self.patterns)
