"""Text and JSON rendering of analysis results.

Everything here consumes a finished ``AnalysisResult``; nothing feeds back
into the analysis core.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from datetime import datetime
from typing import Final

import click

from dir_analyzer.core.tree import TreeNode, tree_to_dict
from dir_analyzer.types.models import AnalysisResult, FileCategory, LargeFile
from dir_analyzer.utils.formatting import format_size

# Deepest tree level rendered as text
MAX_RENDER_DEPTH: Final[int] = 10

CATEGORY_LABELS: Final[dict[FileCategory, str]] = {
    FileCategory.IMAGES: "Images",
    FileCategory.VIDEOS: "Videos",
    FileCategory.DOCUMENTS: "Documents",
    FileCategory.AUDIO: "Audio",
    FileCategory.CODE: "Code",
    FileCategory.ARCHIVES: "Archives",
    FileCategory.OTHER: "Other",
}


def render_tree(node: TreeNode, prefix: str = "", is_last: bool = True, level: int = 0) -> str:
    """Render a tree with box-drawing connectors, one node per line."""
    if level > MAX_RENDER_DEPTH:
        return ""

    connector = "└── " if is_last else "├── "
    if node.is_directory:
        line = f"{prefix}{connector}📁 {node.name}\n"
    else:
        line = f"{prefix}{connector}📄 {node.name} ({format_size(node.size or 0)})\n"

    child_prefix = prefix + ("    " if is_last else "│   ")
    last_index = len(node.children) - 1
    return line + "".join(
        render_tree(child, child_prefix, index == last_index, level + 1)
        for index, child in enumerate(node.children)
    )


def _relative(result: AnalysisResult, path: str) -> str:
    return os.path.relpath(path, result.path)


def _render_file_list(title: str, result: AnalysisResult, files: tuple[LargeFile, ...], limit: int | None) -> list[str]:
    shown = files if limit is None else files[:limit]
    lines = [click.style(f"\n{title}", fg="red")]
    for index, large_file in enumerate(shown, start=1):
        size = click.style(large_file.size_formatted, fg="yellow")
        lines.append(f"  {index}. {_relative(result, large_file.path)} - {size}")
    if len(files) > len(shown):
        lines.append(click.style(f"  ... and {len(files) - len(shown)} more", dim=True))
    return lines


def render_totals(result: AnalysisResult) -> list[str]:
    return [
        click.style(f"Directory: {result.path}", fg="blue"),
        click.style(f"Total Size: {format_size(result.total_size_bytes)}", fg="green"),
        click.style(f"Folders: {result.folders}", fg="yellow"),
        click.style(f"Files: {result.files}", fg="cyan"),
    ]


def render_extras(result: AnalysisResult) -> list[str]:
    """Render the top-N and empty-file sections shared by both text views."""
    lines: list[str] = []
    if result.top_largest_files:
        lines.extend(
            _render_file_list(
                f"Top {len(result.top_largest_files)} Largest Files:",
                result,
                result.top_largest_files,
                None,
            )
        )

    if result.empty_files:
        lines.append(click.style(f"\nEmpty Files ({len(result.empty_files)}):", fg="yellow"))
        for empty in result.empty_files[:10]:
            modified = click.style(f"(modified: {empty.modified:%Y-%m-%d})", dim=True)
            lines.append(f"  {_relative(result, empty.path)} {modified}")
        if len(result.empty_files) > 10:
            lines.append(click.style(f"  ... and {len(result.empty_files) - 10} more empty files", dim=True))
    return lines


def render_summary(result: AnalysisResult, show_types: bool = True) -> str:
    """Render the default table-style report."""
    lines = render_totals(result)

    if show_types:
        lines.append(click.style("\nFile Types:", fg="magenta"))
        for category, label in CATEGORY_LABELS.items():
            count = result.types.get(category, 0)
            if count > 0:
                lines.append(f"  {label}: {count}")

    if result.large_files:
        lines.extend(_render_file_list("Large Files:", result, result.large_files, 5))

    if result.duplicate_stats is not None and result.duplicate_groups:
        lines.append(click.style("\nDuplicate Files:", fg="yellow"))
        lines.append(f"  Groups: {result.duplicate_stats.total_groups}")
        wasted = click.style(result.duplicate_stats.total_wasted_space_formatted, fg="red")
        lines.append(f"  Wasted Space: {wasted}")
        lines.append(click.style("\n  Top duplicate groups:", dim=True))
        for index, group in enumerate(result.duplicate_groups[:3], start=1):
            lines.append(f"  {index}. {group.size_formatted} each x {len(group.members)} files")
            for member in group.members[:2]:
                lines.append(f"     {_relative(result, member)}")
            if len(group.members) > 2:
                lines.append(click.style(f"     ... and {len(group.members) - 2} more", dim=True))

    lines.extend(render_extras(result))

    if result.skipped_entries:
        lines.append(click.style(f"\nSkipped {result.skipped_entries} unreadable entries", dim=True))
    return "\n".join(lines)


def render_tree_report(result: AnalysisResult) -> str:
    """Render the tree-style report."""
    lines = render_totals(result)
    lines.append("")

    view = result.tree_view
    if view is None:
        lines.append(click.style("Tree view not available for large datasets (>1000 files)", fg="yellow"))
        lines.append("Use --top-n to see the largest files instead.")
    else:
        lines.append(render_tree(view.root).rstrip("\n"))
        if view.omitted_files:
            lines.append(f"\n... and {view.omitted_files} more files")

    lines.extend(render_extras(result))
    return "\n".join(lines)


def result_to_dict(result: AnalysisResult) -> dict[str, object]:
    """Convert a result into JSON-compatible primitives."""

    def large(files: tuple[LargeFile, ...] | None) -> list[dict[str, object]] | None:
        if files is None:
            return None
        return [{"path": f.path, "size": f.size, "size_formatted": f.size_formatted} for f in files]

    data: dict[str, object] = {
        "path": result.path,
        "scan_id": result.scan_id,
        "total_size_bytes": result.total_size_bytes,
        "total_size_mb": result.total_size_mb,
        "folders": result.folders,
        "files": result.files,
        "types": {category.value: result.types.get(category, 0) for category in FileCategory},
        "skipped_entries": result.skipped_entries,
        "large_files": large(result.large_files),
        "top_largest_files": large(result.top_largest_files),
    }

    if result.duplicate_groups is not None:
        data["duplicate_groups"] = [
            {
                "hash": group.content_hash,
                "size": group.file_size,
                "size_formatted": group.size_formatted,
                "files": list(group.members),
                "wasted_space": group.wasted_space,
                "wasted_space_formatted": group.wasted_space_formatted,
            }
            for group in result.duplicate_groups
        ]
    if result.duplicate_stats is not None:
        stats = result.duplicate_stats
        data["duplicate_stats"] = {
            "total_groups": stats.total_groups,
            "total_wasted_space": stats.total_wasted_space,
            "total_wasted_space_formatted": stats.total_wasted_space_formatted,
        }
    if result.empty_files is not None:
        data["empty_files"] = [
            {"path": empty.path, "modified": empty.modified.isoformat()} for empty in result.empty_files
        ]
    if result.tree_view is not None:
        data["tree"] = {
            "root": tree_to_dict(result.tree_view.root),
            "total_files": result.tree_view.total_files,
            "omitted_files": result.tree_view.omitted_files,
        }
    return data


def render_json(result: AnalysisResult) -> str:
    return json.dumps(result_to_dict(result), indent=2)


@dataclass(slots=True, frozen=True)
class ChangeSummary:
    """Difference between two consecutive watch-mode results."""

    size_delta: int
    files_delta: int
    folders_delta: int

    @property
    def unchanged(self) -> bool:
        return self.size_delta == 0 and self.files_delta == 0 and self.folders_delta == 0


def summarize_changes(current: AnalysisResult, previous: AnalysisResult) -> ChangeSummary:
    return ChangeSummary(
        size_delta=current.total_size_bytes - previous.total_size_bytes,
        files_delta=current.files - previous.files,
        folders_delta=current.folders - previous.folders,
    )


def _signed(delta: int, text: str) -> str:
    color = "green" if delta > 0 else "red"
    sign = "+" if delta > 0 else "-"
    return click.style(f"{sign}{text}", fg=color)


def render_watch_update(current: AnalysisResult, previous: AnalysisResult | None) -> str:
    """Render the status block printed after every watch-mode run."""
    lines = [
        click.style("\nCurrent Status:", fg="cyan"),
        f"  Total Size: {format_size(current.total_size_bytes)}",
        f"  Folders: {current.folders}",
        f"  Files: {current.files}",
    ]

    if previous is not None:
        changes = summarize_changes(current, previous)
        lines.append(click.style("\nChanges since last scan:", fg="yellow"))
        if changes.size_delta:
            lines.append(f"  Size: {_signed(changes.size_delta, format_size(abs(changes.size_delta)))}")
        if changes.files_delta:
            lines.append(f"  Files: {_signed(changes.files_delta, str(abs(changes.files_delta)))}")
        if changes.folders_delta:
            lines.append(f"  Folders: {_signed(changes.folders_delta, str(abs(changes.folders_delta)))}")
        if changes.unchanged:
            lines.append(click.style("  No changes detected", dim=True))

    lines.append(click.style(f"\nLast updated: {datetime.now():%H:%M:%S}", dim=True))
    lines.append(click.style("═" * 50, dim=True))
    return "\n".join(lines)
