"""Local filesystem facade with asyncio integration.

Blocking ``os`` calls are offloaded to the default thread pool with
``asyncio.to_thread`` so that many stats, directory listings and file reads
can be in flight at once while the event loop keeps scheduling other tasks.
Context variables (the scan ID used in log records) are copied across the
thread boundary automatically.
"""

import asyncio
import os

from dir_analyzer.types.models import DirectoryEntry


def _list_directory(path: str) -> list[DirectoryEntry]:
    """List ``path`` synchronously without following symlinks."""
    with os.scandir(path) as iterator:
        return [
            DirectoryEntry(
                name=entry.name,
                is_directory=entry.is_dir(follow_symlinks=False),
                is_file=entry.is_file(follow_symlinks=False),
            )
            for entry in iterator
        ]


def _read_file(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


class LocalFileSystem:
    """``FileSystem`` implementation backed by the local disk."""

    async def stat(self, path: str) -> os.stat_result:
        return await asyncio.to_thread(os.stat, path)

    async def read_directory_entries(self, path: str) -> list[DirectoryEntry]:
        return await asyncio.to_thread(_list_directory, path)

    async def read_entire_file(self, path: str) -> bytes:
        return await asyncio.to_thread(_read_file, path)
