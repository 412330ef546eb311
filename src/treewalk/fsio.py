# Filesystem access for treewalk.
# The walker never touches os directly; it asks one of these backends to
# stat a path, list a directory, or resolve a symbolic link.
#
# No mutation is allowed here.

from __future__ import annotations

import asyncio
import os
import stat as stat_mod
from typing import List, Optional, Protocol, runtime_checkable

from treewalk.models import DirEntryInfo, NodeInfo


@runtime_checkable
class FileSystem(Protocol):
    """Blocking filesystem primitives used by walk_sync."""

    def stat(self, path: str) -> NodeInfo:
        """Return type information for path, following symbolic links."""
        ...

    def list_dir(self, path: str) -> List[DirEntryInfo]:
        """Return the direct children of path in listing order."""
        ...

    def resolve(self, path: str) -> str:
        """Return the real path a symbolic link points at."""
        ...


@runtime_checkable
class AsyncFileSystem(Protocol):
    """Suspending counterpart of FileSystem used by walk."""

    async def stat(self, path: str) -> NodeInfo:
        ...

    async def list_dir(self, path: str) -> List[DirEntryInfo]:
        ...

    async def resolve(self, path: str) -> str:
        ...


class LocalFileSystem:
    # Backend over the local disk using os.stat, os.scandir and realpath.

    def stat(self, path: str) -> NodeInfo:
        mode = os.stat(path).st_mode
        return NodeInfo(
            is_file=stat_mod.S_ISREG(mode),
            is_dir=stat_mod.S_ISDIR(mode),
            is_symlink=stat_mod.S_ISLNK(mode),
        )

    def list_dir(self, path: str) -> List[DirEntryInfo]:
        # The scandir handle is closed before any child is processed, so an
        # abandoned walk never leaves a directory descriptor open.
        with os.scandir(path) as it:
            return [
                DirEntryInfo(
                    name=entry.name,
                    is_file=entry.is_file(follow_symlinks=False),
                    is_dir=entry.is_dir(follow_symlinks=False),
                    is_symlink=entry.is_symlink(),
                )
                for entry in it
            ]

    def resolve(self, path: str) -> str:
        # strict=True makes a dangling link fail instead of returning a guess.
        return os.path.realpath(path, strict=True)


class AsyncLocalFileSystem:
    # Runs a blocking backend's calls in a worker thread so the event loop
    # stays free while the I/O is pending.

    def __init__(self, blocking: Optional[FileSystem] = None):
        self.blocking = blocking if blocking is not None else LocalFileSystem()

    async def stat(self, path: str) -> NodeInfo:
        return await asyncio.to_thread(self.blocking.stat, path)

    async def list_dir(self, path: str) -> List[DirEntryInfo]:
        return await asyncio.to_thread(self.blocking.list_dir, path)

    async def resolve(self, path: str) -> str:
        return await asyncio.to_thread(self.blocking.resolve, path)
