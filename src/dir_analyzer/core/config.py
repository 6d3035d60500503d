"""Configuration system for dir-analyzer.

This module implements the configuration file schema using Pydantic for
validation, config file discovery, environment variable resolution and
merging of command-line overrides. Validation fails fast with actionable,
field-level error messages.
"""

import os
import re
from collections.abc import Mapping
from datetime import date, datetime, time
from pathlib import Path
from typing import Annotated, Final, Literal, Self

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from dir_analyzer.core.duplicates import validate_hash_algorithm
from dir_analyzer.core.options import DEFAULT_HASH_ALGORITHM, AnalysisOptions
from dir_analyzer.exceptions import ConfigurationError, EnvironmentVariableError
from dir_analyzer.types.protocols import ProgressCallback

# Matches ${VARIABLE_NAME} where VARIABLE_NAME holds letters, digits and underscores
ENV_VAR_PATTERN: Final[re.Pattern[str]] = re.compile(r"\$\{([A-Za-z0-9_]+)\}")

# Config file names checked in every directory, in order of precedence
CONFIG_FILE_NAMES: Final[tuple[str, ...]] = (
    ".dir-analyzer.yaml",
    ".dir-analyzer.yml",
    ".dir-analyzer.json",
    "dir-analyzer.config.json",
)

DEFAULT_LARGE_SIZE_THRESHOLD: Final[int] = 100 * 1024 * 1024  # 100 MiB
DEFAULT_TOP_N: Final[int] = 10


class AnalyzerConfig(BaseModel):
    """Configuration file schema.

    Every field has a default, so an empty file is a valid configuration.
    Unknown keys are rejected to catch typos early.
    """

    model_config = ConfigDict(extra="forbid")

    exclude_patterns: Annotated[
        list[str],
        Field(description="Additional directory/file names or *-globs to skip"),
    ] = []
    large_size_threshold: Annotated[
        int | None,
        Field(ge=1, description="Report files at least this many bytes large"),
    ] = DEFAULT_LARGE_SIZE_THRESHOLD
    enable_duplicate_detection: Annotated[
        bool,
        Field(description="Hash file contents to find duplicates"),
    ] = False
    enable_progress_bar: Annotated[
        bool,
        Field(description="Show a progress bar while scanning"),
    ] = True
    output_format: Annotated[
        Literal["table", "json", "tree"],
        Field(description="Report format written to stdout"),
    ] = "table"
    max_depth: Annotated[
        int,
        Field(ge=-1, description="Maximum directory depth, -1 for unlimited"),
    ] = -1
    min_size: Annotated[
        int | None,
        Field(ge=0, description="Ignore files smaller than this in filtered views"),
    ] = None
    max_size: Annotated[
        int | None,
        Field(ge=0, description="Ignore files larger than this in filtered views"),
    ] = None
    date_from: Annotated[
        date | None,
        Field(description="Ignore files modified before this day"),
    ] = None
    date_to: Annotated[
        date | None,
        Field(description="Ignore files modified after this day"),
    ] = None
    top_n: Annotated[
        int | None,
        Field(ge=1, description="Number of largest files to list"),
    ] = DEFAULT_TOP_N
    show_empty_files: Annotated[
        bool,
        Field(description="List zero-byte files"),
    ] = False
    hash_algorithm: Annotated[
        str,
        Field(description="hashlib algorithm used for duplicate detection"),
    ] = DEFAULT_HASH_ALGORITHM
    log_level: Annotated[
        str,
        Field(
            description="Logging level",
            pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        ),
    ] = "WARNING"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("hash_algorithm", mode="after")
    @classmethod
    def check_hash_algorithm(cls, v: str) -> str:
        """Validate that hashlib provides the algorithm.

        Raises:
            ValueError: If the algorithm is unavailable
        """
        return validate_hash_algorithm(v)

    @field_validator("exclude_patterns", mode="after")
    @classmethod
    def drop_blank_patterns(cls, v: list[str]) -> list[str]:
        return [pattern.strip() for pattern in v if pattern.strip()]

    @model_validator(mode="after")
    def validate_ranges(self) -> Self:
        """Validate that size and date bounds are ordered.

        Raises:
            ValueError: If a lower bound exceeds its upper bound
        """
        if self.min_size is not None and self.max_size is not None and self.min_size > self.max_size:
            msg = f"min_size ({self.min_size}) must not exceed max_size ({self.max_size})"
            raise ValueError(msg)
        if self.date_from is not None and self.date_to is not None and self.date_from > self.date_to:
            msg = f"date_from ({self.date_from}) must not be after date_to ({self.date_to})"
            raise ValueError(msg)
        return self

    def merge_cli_overrides(self, overrides: Mapping[str, object]) -> "AnalyzerConfig":
        """Return a new validated config with non-None overrides applied.

        Args:
            overrides: Field values from the command line; None means "not given"

        Returns:
            Merged configuration

        Raises:
            ConfigurationError: If the merged values fail validation
        """
        data = self.model_dump()
        data.update({key: value for key, value in overrides.items() if value is not None})
        return _validate(data, source="command line options")

    def to_options(
        self,
        root_path: str,
        *,
        recursive: bool = True,
        progress_callback: ProgressCallback | None = None,
    ) -> AnalysisOptions:
        """Convert the configuration to runtime analysis options.

        ``date_from`` becomes the start of that day and ``date_to`` the end of
        that day, both in local time.
        """
        return AnalysisOptions(
            root_path=root_path,
            recursive=recursive,
            exclude_patterns=frozenset(self.exclude_patterns),
            max_depth=self.max_depth,
            large_size_threshold=self.large_size_threshold,
            enable_duplicate_detection=self.enable_duplicate_detection,
            min_size=self.min_size,
            max_size=self.max_size,
            date_from=datetime.combine(self.date_from, time.min) if self.date_from else None,
            date_to=datetime.combine(self.date_to, time.max) if self.date_to else None,
            top_n=self.top_n,
            show_empty_files=self.show_empty_files,
            progress_callback=progress_callback,
            hash_algorithm=self.hash_algorithm,
        )


def resolve_env_var(value: str) -> str:
    """Resolve ``${VARIABLE_NAME}`` references in a string value.

    Raises:
        EnvironmentVariableError: If a referenced variable is not set

    Examples:
        >>> os.environ["SCAN_IGNORE"] = "tmp"
        >>> resolve_env_var("${SCAN_IGNORE}_*")
        'tmp_*'
        >>> resolve_env_var("no variables here")
        'no variables here'
    """

    def replace_match(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name)
        if env_value is None:
            msg = f"Required environment variable '{var_name}' is not set."
            raise EnvironmentVariableError(msg)
        return env_value

    return ENV_VAR_PATTERN.sub(replace_match, value)


def resolve_env_vars(data: object) -> object:
    """Recursively resolve environment variables in loaded YAML data.

    Strings are resolved, dictionaries and lists are traversed, every other
    value is returned unchanged.
    """
    if isinstance(data, str):
        return resolve_env_var(data)
    if isinstance(data, dict):
        return {key: resolve_env_vars(value) for key, value in data.items()}  # pyright: ignore[reportUnknownVariableType]  # YAML boundary
    if isinstance(data, list):
        return [resolve_env_vars(item) for item in data]  # pyright: ignore[reportUnknownVariableType]  # YAML boundary
    return data


def discover_config_file(start: Path | None = None) -> Path | None:
    """Find the nearest configuration file.

    Searches ``start`` (default: the current directory) and each of its
    parents up to the filesystem root, checking ``CONFIG_FILE_NAMES`` in
    order in every directory.

    Returns:
        Path to the first configuration file found, or None
    """
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        for name in CONFIG_FILE_NAMES:
            candidate = directory / name
            if candidate.is_file():
                return candidate
    return None


def _validate(data: object, *, source: str) -> AnalyzerConfig:
    try:
        return AnalyzerConfig.model_validate(data)
    except ValidationError as e:
        error_lines = ["Configuration validation failed:", ""]
        for error in e.errors():
            field_path = " → ".join(str(loc) for loc in error["loc"]) or "(root)"
            error_lines.append(f"  Field: {field_path}")
            error_lines.append(f"  Error: {error['msg']}")
            error_lines.append(f"  Type: {error['type']}")
            error_lines.append("")

        error_lines.append(f"Source: {source}")
        error_lines.append("Please fix the above errors and try again.")
        raise ConfigurationError("\n".join(error_lines)) from e


def load_config(config_path: Path) -> AnalyzerConfig:
    """Load and validate a configuration file.

    YAML and JSON files are both read with ``yaml.safe_load``. An empty file
    yields the default configuration.

    Args:
        config_path: Path to the configuration file

    Returns:
        Validated AnalyzerConfig instance

    Raises:
        ConfigurationError: If the file cannot be loaded or is invalid
        EnvironmentVariableError: If a referenced environment variable is missing
    """
    if not config_path.is_file():
        msg = f"Configuration file not found: {config_path}"
        raise ConfigurationError(msg)

    try:
        with config_path.open("r", encoding="utf-8") as f:
            raw_data: object = yaml.safe_load(f)  # pyright: ignore[reportAny]  # YAML boundary
    except yaml.YAMLError as e:
        msg = (
            f"Failed to parse configuration file: {config_path}\n"
            f"Parsing error: {e}\n"
            f"Please check the file for syntax errors."
        )
        raise ConfigurationError(msg) from e
    except OSError as e:
        msg = f"Failed to read configuration file: {config_path}\nError: {e}\nPlease check file permissions."
        raise ConfigurationError(msg) from e

    if raw_data is None:
        return AnalyzerConfig()

    if not isinstance(raw_data, dict):
        msg = (
            f"Invalid configuration file format: {config_path}\n"
            f"Expected a mapping at root level, got: {type(raw_data).__name__}"
        )
        raise ConfigurationError(msg)

    try:
        resolved = resolve_env_vars(raw_data)
    except EnvironmentVariableError as e:
        msg = (
            f"Environment variable resolution failed in: {config_path}\n"
            f"{e}\n"
            f"Set the required environment variable before running the analysis."
        )
        raise EnvironmentVariableError(msg) from e

    return _validate(resolved, source=str(config_path))
