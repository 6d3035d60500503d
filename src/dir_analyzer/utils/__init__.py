"""Shared utility modules for common operations.

This package provides:
- Data size and duration formatting (pure, stateless)
- Logging configuration with per-scan ID tracking
"""

from dir_analyzer.utils.formatting import (
    format_duration,
    format_size,
    format_size_mb,
)

__all__ = [
    "format_duration",
    "format_size",
    "format_size_mb",
]
