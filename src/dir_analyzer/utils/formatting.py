"""Pure formatting utilities for human-readable output.

This module provides stateless formatting functions for converting raw byte
counts and durations into human-readable strings. All functions are pure
with no side effects.
"""

# Binary unit constants (1024-based)
_KB = 1024
_MB = _KB * 1024  # 1,048,576
_GB = _MB * 1024  # 1,073,741,824
_TB = _GB * 1024  # 1,099,511,627,776

_UNITS: tuple[tuple[int, str], ...] = (
    (_TB, "TB"),
    (_GB, "GB"),
    (_MB, "MB"),
    (_KB, "KB"),
)

# Time unit constants
_MINUTE = 60
_HOUR = _MINUTE * 60  # 3,600


def format_size(bytes: int, *, precision: int = 1) -> str:
    """Convert bytes to human-readable size format.

    Uses binary units (1024-based) for consistency with system tools such as
    ``du -h``.

    Args:
        bytes: Number of bytes to format (must be non-negative)
        precision: Number of decimal places for KB and above (default: 1)

    Returns:
        Human-readable string representation of the size.

    Examples:
        >>> format_size(512)
        '512 Bytes'
        >>> format_size(1536)
        '1.5 KB'
        >>> format_size(5242880)
        '5.0 MB'
        >>> format_size(2748779069440)
        '2.5 TB'
    """
    if bytes < 0:
        msg = "bytes must be non-negative"
        raise ValueError(msg)

    for unit_size, unit_name in _UNITS:
        if bytes >= unit_size:
            return f"{bytes / unit_size:.{precision}f} {unit_name}"

    return f"{bytes} Bytes"


def format_size_mb(bytes: int) -> float:
    """Convert bytes to MiB rounded to one decimal place.

    Examples:
        >>> format_size_mb(1572864)
        1.5
        >>> format_size_mb(0)
        0.0
    """
    if bytes < 0:
        msg = "bytes must be non-negative"
        raise ValueError(msg)
    return round(bytes / _MB, 1)


def format_duration(seconds: float) -> str:
    """Convert seconds to a short human-readable duration.

    Args:
        seconds: Duration in seconds (must be non-negative)

    Returns:
        - Hours: "Xh Ym"
        - Minutes: "Xm Ys"
        - Under a minute: "X.Ys" with one decimal place

    Examples:
        >>> format_duration(0.5)
        '0.5s'
        >>> format_duration(90)
        '1m 30s'
        >>> format_duration(3665)
        '1h 1m'
    """
    if seconds < 0:
        msg = "seconds must be non-negative"
        raise ValueError(msg)

    if seconds < _MINUTE:
        return f"{seconds:.1f}s"

    total_seconds = int(seconds)

    if total_seconds >= _HOUR:
        hours = total_seconds // _HOUR
        minutes = (total_seconds % _HOUR) // _MINUTE
        if minutes > 0:
            return f"{hours}h {minutes}m"
        return f"{hours}h"

    minutes = total_seconds // _MINUTE
    remaining = total_seconds % _MINUTE
    if remaining > 0:
        return f"{minutes}m {remaining}s"
    return f"{minutes}m"
