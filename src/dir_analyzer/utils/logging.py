"""Logging infrastructure with scan ID tracking.

Every ``analyze`` run sets a short scan ID in a ContextVar. The ID is
inherited by the asyncio tasks and worker threads spawned during the run, so
warnings emitted from deep inside the traversal can be traced back to the run
that produced them.
"""

import contextvars
import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Final, override

# Scan ID context variable, inherited by asyncio tasks and asyncio.to_thread
scan_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "scan_id",
    default=None,
)

# Log format constants
DEFAULT_LOG_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - [%(scan_id)s] - %(message)s"

CONSOLE_LOG_FORMAT: Final[str] = "%(levelname)s: %(message)s"

SYSLOG_LOG_FORMAT: Final[str] = "dir-analyzer[%(process)d]: %(levelname)s - [%(scan_id)s] - %(name)s - %(message)s"

DEFAULT_SYSLOG_ADDRESS: Final[str] = "/dev/log"


class ScanIdFilter(logging.Filter):
    """Logging filter that adds the current scan ID to log records.

    Records emitted outside of a scan carry ``N/A``.
    """

    @override
    def filter(self, record: logging.LogRecord) -> bool:
        scan_id = scan_id_var.get()
        record.scan_id = scan_id if scan_id is not None else "N/A"
        return True


def configure_logging(
    *,
    log_level: str = "WARNING",
    enable_console: bool = True,
    enable_syslog: bool = False,
    syslog_address: str = DEFAULT_SYSLOG_ADDRESS,
    log_file: Path | None = None,
) -> None:
    """Configure application logging.

    Console output goes to stderr so that machine-readable reports written
    to stdout are never interleaved with diagnostics.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        enable_console: Enable the stderr console handler
        enable_syslog: Enable the syslog handler
        syslog_address: Syslog socket address
        log_file: Optional file receiving the full structured format

    Example:
        >>> configure_logging(log_level="INFO")
        >>> logging.getLogger(__name__).info("Scan started")
    """
    root_logger = logging.getLogger()

    level = getattr(logging, log_level.upper(), logging.WARNING)
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    scan_filter = ScanIdFilter()

    if enable_syslog:
        try:
            syslog_handler = logging.handlers.SysLogHandler(
                address=syslog_address,
                facility=logging.handlers.SysLogHandler.LOG_USER,
            )
            syslog_handler.setFormatter(logging.Formatter(SYSLOG_LOG_FORMAT))
            syslog_handler.addFilter(scan_filter)
            root_logger.addHandler(syslog_handler)
        except OSError as exc:
            # Syslog not available, fall back to the remaining handlers
            print(
                f"Warning: Could not connect to syslog at {syslog_address}: {exc}",
                file=sys.stderr,
            )

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(DEFAULT_LOG_FORMAT))
        file_handler.addFilter(scan_filter)
        root_logger.addHandler(file_handler)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_format = DEFAULT_LOG_FORMAT if level <= logging.DEBUG else CONSOLE_LOG_FORMAT
        console_handler.setFormatter(logging.Formatter(console_format))
        console_handler.addFilter(scan_filter)
        root_logger.addHandler(console_handler)


def set_scan_id(scan_id: str) -> contextvars.Token[str | None]:
    """Set the scan ID for the current context.

    Args:
        scan_id: Identifier of the running analysis

    Returns:
        Token that restores the previous value when passed to ``reset_scan_id``
    """
    return scan_id_var.set(scan_id)


def reset_scan_id(token: contextvars.Token[str | None]) -> None:
    """Restore the scan ID that was active before ``set_scan_id``."""
    scan_id_var.reset(token)


def get_scan_id() -> str | None:
    """Get the current scan ID, or None outside of a scan."""
    return scan_id_var.get()


def clear_scan_id() -> None:
    """Clear the scan ID from the current context."""
    _ = scan_id_var.set(None)
