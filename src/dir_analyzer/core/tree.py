"""Folding a flat file list into a directory tree.

The input is sorted by path before construction and every level is sorted
afterwards (directories first, then by name), so the resulting tree does not
depend on the order in which the walker discovered files.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import dataclass, field

from dir_analyzer.core.options import DEFAULT_TREE_MAX_FILES
from dir_analyzer.types.models import FileRecord, TreeView


@dataclass(slots=True)
class TreeNode:
    """Directory or file node. Each node is owned by its parent."""

    name: str
    full_path: str
    is_directory: bool
    size: int | None = None
    children: list[TreeNode] = field(default_factory=list)


def _node_sort_key(node: TreeNode) -> tuple[bool, str]:
    return (not node.is_directory, node.name)


def sort_tree(node: TreeNode) -> None:
    """Recursively order children: directories first, then alphabetical."""
    node.children.sort(key=_node_sort_key)
    for child in node.children:
        sort_tree(child)


def build_tree(files: Sequence[FileRecord], root_path: str) -> TreeNode:
    """Build a tree of ``files`` relative to ``root_path``.

    Directory nodes are created on demand for every path prefix and reused
    for later files sharing that prefix. Files outside ``root_path`` are
    ignored.

    Args:
        files: Records to fold into the tree (not modified)
        root_path: Directory the tree is rooted at

    Returns:
        The root node, named after the last component of ``root_path``
    """
    root = TreeNode(
        name=os.path.basename(os.path.normpath(root_path)) or root_path,
        full_path=root_path,
        is_directory=True,
    )
    directories: dict[str, TreeNode] = {"": root}

    for record in sorted(files, key=lambda record: record.path):
        relative = os.path.relpath(record.path, root_path)
        if relative in (os.curdir, os.pardir) or relative.startswith(os.pardir + os.sep):
            continue

        parts = relative.split(os.sep)
        current = root
        prefix = ""
        for part in parts[:-1]:
            prefix = os.path.join(prefix, part) if prefix else part
            node = directories.get(prefix)
            if node is None:
                node = TreeNode(
                    name=part,
                    full_path=os.path.join(root_path, prefix),
                    is_directory=True,
                )
                directories[prefix] = node
                current.children.append(node)
            current = node

        current.children.append(
            TreeNode(
                name=parts[-1],
                full_path=record.path,
                is_directory=False,
                size=record.size,
            )
        )

    sort_tree(root)
    return root


def build_compact_tree(
    files: Sequence[FileRecord],
    root_path: str,
    max_files: int = DEFAULT_TREE_MAX_FILES,
) -> TreeView:
    """Build a tree from at most the first ``max_files`` records.

    The returned view reports how many records were left out so that the
    presentation layer can mention them.
    """
    limited = files[:max_files]
    return TreeView(
        root=build_tree(limited, root_path),
        total_files=len(files),
        omitted_files=max(len(files) - max_files, 0),
    )


def tree_to_dict(node: TreeNode) -> dict[str, object]:
    """Convert a tree into plain nested dictionaries (for JSON output)."""
    if not node.is_directory:
        return {"name": node.name, "path": node.full_path, "size": node.size}
    return {
        "name": node.name,
        "path": node.full_path,
        "children": [tree_to_dict(child) for child in node.children],
    }
