"""Exception hierarchy for dir-analyzer.

Only ``PathError`` crosses the boundary of ``analyze``; every per-entry
filesystem failure is logged and absorbed by the core. Configuration errors
are raised by the config loader before an analysis starts.
"""


class DirAnalyzerError(Exception):
    """Base class for all dir-analyzer errors."""


class PathError(DirAnalyzerError):
    """Raised when the analysis root is missing or is not a directory."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(message)
        self.path: str = path


class ConfigurationError(DirAnalyzerError):
    """Exception raised when configuration loading or validation fails.

    Carries a detailed, actionable message covering file not found, YAML
    parsing errors and field-level validation failures.
    """


class EnvironmentVariableError(ConfigurationError):
    """Exception raised when a ``${VAR}`` reference cannot be resolved."""
