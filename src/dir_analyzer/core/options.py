"""Runtime options for a single analysis run."""

from dataclasses import dataclass, field
from datetime import datetime

from dir_analyzer.types.protocols import ProgressCallback

DEFAULT_HASH_ALGORITHM = "md5"

# Tree views are only built for result sets up to this many files
DEFAULT_TREE_FILE_LIMIT = 1000

# Number of files folded into the compact tree view
DEFAULT_TREE_MAX_FILES = 50


@dataclass(slots=True, frozen=True)
class AnalysisOptions:
    """Immutable options consumed by ``DirectoryAnalyzer.analyze``.

    ``max_depth`` counts the root as depth 0; a negative value disables the
    bound. Optional features are only computed when their option is set.
    """

    root_path: str
    recursive: bool = True
    exclude_patterns: frozenset[str] = field(default_factory=frozenset)
    max_depth: int = -1
    large_size_threshold: int | None = None
    enable_duplicate_detection: bool = False
    min_size: int | None = None
    max_size: int | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None
    top_n: int | None = None
    show_empty_files: bool = False
    progress_callback: ProgressCallback | None = field(default=None, compare=False)
    hash_algorithm: str = DEFAULT_HASH_ALGORITHM
    tree_file_limit: int = DEFAULT_TREE_FILE_LIMIT
    tree_max_files: int = DEFAULT_TREE_MAX_FILES

    @property
    def has_size_filter(self) -> bool:
        return self.min_size is not None or self.max_size is not None

    @property
    def has_date_filter(self) -> bool:
        return self.date_from is not None or self.date_to is not None
