"""dir-analyzer - Analyze directory size, file types, large files and duplicates.

The analysis core lives in ``dir_analyzer.core`` and never depends on the
command-line presentation in ``dir_analyzer.app``.
"""

from dir_analyzer.core.analyzer import DirectoryAnalyzer, analyze
from dir_analyzer.core.options import AnalysisOptions
from dir_analyzer.exceptions import ConfigurationError, DirAnalyzerError, PathError
from dir_analyzer.types.models import AnalysisResult

__all__ = [
    "AnalysisOptions",
    "AnalysisResult",
    "ConfigurationError",
    "DirAnalyzerError",
    "DirectoryAnalyzer",
    "PathError",
    "analyze",
]
