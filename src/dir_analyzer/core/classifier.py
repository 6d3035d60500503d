"""File-type classification by extension lookup."""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Final

from dir_analyzer.types.models import ClassificationCounts, FileCategory

# Lookup order matters: the first category listing an extension wins.
FILE_TYPE_EXTENSIONS: Final[Mapping[FileCategory, frozenset[str]]] = MappingProxyType(
    {
        FileCategory.IMAGES: frozenset(
            {".png", ".jpg", ".jpeg", ".gif", ".svg", ".webp", ".bmp", ".tiff", ".ico"}
        ),
        FileCategory.VIDEOS: frozenset(
            {".mp4", ".mkv", ".avi", ".mov", ".webm", ".flv", ".wmv", ".m4v"}
        ),
        FileCategory.DOCUMENTS: frozenset(
            {
                ".pdf", ".docx", ".xlsx", ".pptx", ".txt", ".doc",
                ".xls", ".ppt", ".rtf", ".odt", ".ods", ".odp",
            }
        ),
        FileCategory.AUDIO: frozenset(
            {".mp3", ".wav", ".flac", ".aac", ".ogg", ".wma", ".m4a"}
        ),
        FileCategory.CODE: frozenset(
            {
                ".js", ".ts", ".jsx", ".tsx", ".py", ".java", ".cpp", ".c", ".h", ".hpp",
                ".cs", ".php", ".rb", ".go", ".rs", ".swift", ".kt", ".scala", ".clj",
                ".sh", ".bat", ".ps1", ".sql", ".html", ".css", ".scss", ".sass", ".less",
                ".json", ".xml", ".yaml", ".yml", ".toml", ".ini", ".cfg", ".conf",
            }
        ),
        FileCategory.ARCHIVES: frozenset(
            {".zip", ".rar", ".7z", ".tar", ".gz", ".bz2", ".xz", ".tar.gz", ".tar.bz2"}
        ),
    }
)


def get_file_extension(filename: str) -> str:
    """Return the lower-cased extension of ``filename`` including the dot.

    The extension runs from the last ``.`` to the end of the name. Names
    without a dot or ending in a dot have no extension.

    Examples:
        >>> get_file_extension("Photo.JPG")
        '.jpg'
        >>> get_file_extension("archive.tar.gz")
        '.gz'
        >>> get_file_extension("Makefile")
        ''
        >>> get_file_extension("trailing.")
        ''
    """
    last_dot = filename.rfind(".")
    if last_dot == -1 or last_dot == len(filename) - 1:
        return ""
    return filename[last_dot:].lower()


def classify(filename: str) -> FileCategory:
    """Map a filename to its classification category.

    Args:
        filename: Base name of the file (directories are never classified)

    Returns:
        The first category whose extension table contains the file's
        extension, or ``FileCategory.OTHER``
    """
    extension = get_file_extension(filename)
    if not extension:
        return FileCategory.OTHER

    for category, extensions in FILE_TYPE_EXTENSIONS.items():
        if extension in extensions:
            return category
    return FileCategory.OTHER


def empty_counts() -> dict[FileCategory, int]:
    """Return a count map with every category set to zero."""
    return {category: 0 for category in FileCategory}


class FileClassifier:
    """Accumulates classification counts across a scan.

    One instance is created per analysis run; ``reset`` is available for
    callers that reuse an instance.
    """

    def __init__(self) -> None:
        self._counts: dict[FileCategory, int] = empty_counts()

    def classify_file(self, filename: str) -> FileCategory:
        """Classify ``filename`` and increment its category count."""
        category = classify(filename)
        self._counts[category] += 1
        return category

    def get_classification(self) -> ClassificationCounts:
        """Return a copy of the current counts."""
        return dict(self._counts)

    def reset(self) -> None:
        self._counts = empty_counts()
