# Shared fixtures for treewalk tests.
# FakeFileSystem is an in-memory backend with a fixed listing order, so tests
# can assert exact output sequences and count the I/O a walk performs.

from __future__ import annotations

import asyncio
import errno
import os
from pathlib import Path
from typing import Dict, List, Tuple

import pytest

from treewalk.models import DirEntryInfo, NodeInfo


class Link:
    # A symbolic link node pointing at another path in the fake tree.
    def __init__(self, target: str):
        self.target = target


# A node that is neither a file nor a directory (a fifo, a socket).
OTHER = object()


class FakeFileSystem:
    """Tree of nested dicts: dict is a directory, str a file, Link a link."""

    def __init__(self, root: str, tree: Dict):
        self.root = root
        self.tree = tree
        self.calls: List[Tuple[str, str]] = []

    def _lookup(self, path: str):
        parts = os.path.normpath(path).split(os.sep)
        if parts[0] != self.root:
            raise FileNotFoundError(errno.ENOENT, "No such file or directory", path)
        node = self.tree
        for part in parts[1:]:
            if not isinstance(node, dict) or part not in node:
                raise FileNotFoundError(errno.ENOENT, "No such file or directory", path)
            node = node[part]
        return node

    def stat(self, path: str) -> NodeInfo:
        self.calls.append(("stat", path))
        node = self._lookup(path)
        while isinstance(node, Link):
            node = self._lookup(node.target)
        return NodeInfo(
            is_file=isinstance(node, str),
            is_dir=isinstance(node, dict),
            is_symlink=False,
        )

    def list_dir(self, path: str) -> List[DirEntryInfo]:
        self.calls.append(("list_dir", path))
        node = self._lookup(path)
        if not isinstance(node, dict):
            raise NotADirectoryError(errno.ENOTDIR, "Not a directory", path)
        return [
            DirEntryInfo(
                name=name,
                is_file=isinstance(child, str),
                is_dir=isinstance(child, dict),
                is_symlink=isinstance(child, Link),
            )
            for name, child in node.items()
        ]

    def resolve(self, path: str) -> str:
        self.calls.append(("resolve", path))
        node = self._lookup(path)
        seen = 0
        while isinstance(node, Link):
            path = node.target
            node = self._lookup(path)
            seen += 1
            if seen > 40:
                raise OSError(errno.ELOOP, "Too many levels of symbolic links", path)
        return os.path.normpath(path)

    def ops(self, op: str) -> List[str]:
        return [path for name, path in self.calls if name == op]


class AsyncFakeFileSystem:
    # Suspends before every call so the walk really yields to the loop.
    def __init__(self, blocking: FakeFileSystem):
        self.blocking = blocking

    async def stat(self, path: str) -> NodeInfo:
        await asyncio.sleep(0)
        return self.blocking.stat(path)

    async def list_dir(self, path: str) -> List[DirEntryInfo]:
        await asyncio.sleep(0)
        return self.blocking.list_dir(path)

    async def resolve(self, path: str) -> str:
        await asyncio.sleep(0)
        return self.blocking.resolve(path)


def j(*parts: str) -> str:
    return os.path.join(*parts)


@pytest.fixture
def sample_tree() -> FakeFileSystem:
    # root/{a.txt, sub/{b.txt, .git/{c}}}
    return FakeFileSystem(
        "root",
        {
            "a.txt": "",
            "sub": {
                "b.txt": "",
                ".git": {"c": ""},
            },
        },
    )


@pytest.fixture
def disk_tree(tmp_path: Path) -> Path:
    # tmp/{a.txt, b.md, sub/{c.txt, deep/{d.txt}}, empty/}
    (tmp_path / "a.txt").write_text("a", encoding="utf-8")
    (tmp_path / "b.md").write_text("b", encoding="utf-8")
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "c.txt").write_text("c", encoding="utf-8")
    deep = sub / "deep"
    deep.mkdir()
    (deep / "d.txt").write_text("d", encoding="utf-8")
    (tmp_path / "empty").mkdir()
    return tmp_path
