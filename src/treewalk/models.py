# Shared data models for treewalk.
# Lives in its own module so traverse, fsio and cli can import it without cycles.

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field, replace
from typing import Optional, Pattern, Sequence, Union

PatternLike = Union[Pattern[str], str]


@dataclass(frozen=True)
class NodeInfo:
    # Result of a full metadata query on a single path.
    is_file: bool
    is_dir: bool
    is_symlink: bool


@dataclass(frozen=True)
class DirEntryInfo:
    # One child as reported by a directory listing, with its type hints.
    # name is only ever None when a backend returns corrupt data.
    name: Optional[str]
    is_file: bool
    is_dir: bool
    is_symlink: bool


@dataclass(frozen=True)
class WalkEntry:
    """A single file or directory observed during a walk.

    Entries compare and hash by path alone. Build them with from_stat or
    from_listing; the type flags are private.
    """

    name: str = field(compare=False)
    path: str
    _is_file: bool = field(default=False, compare=False, repr=False)
    _is_dir: bool = field(default=False, compare=False, repr=False)
    _is_symlink: bool = field(default=False, compare=False, repr=False)

    def is_file(self) -> bool:
        return self._is_file

    def is_dir(self) -> bool:
        return self._is_dir

    def is_symlink(self) -> bool:
        return self._is_symlink

    @classmethod
    def from_stat(cls, path: str, info: NodeInfo) -> "WalkEntry":
        # Directories entered as a walk root; their type comes from stat.
        path = os.path.normpath(path)
        return cls(
            name=os.path.basename(path),
            path=path,
            _is_file=info.is_file,
            _is_dir=info.is_dir,
            _is_symlink=info.is_symlink,
        )

    @classmethod
    def from_listing(cls, path: str, child: DirEntryInfo) -> "WalkEntry":
        # Children reuse the listing's type hints instead of a stat call.
        return cls(
            name=child.name,
            path=path,
            _is_file=child.is_file,
            _is_dir=child.is_dir,
            _is_symlink=child.is_symlink,
        )


@dataclass(frozen=True)
class WalkOptions:
    """Traversal settings, passed unchanged down the tree except for depth.

    A rule set left as None puts no constraint on that axis.
    """

    max_depth: float = math.inf
    include_files: bool = True
    include_dirs: bool = True
    follow_symlinks: bool = False
    exts: Optional[Sequence[str]] = None
    match: Optional[Sequence[PatternLike]] = None
    skip: Optional[Sequence[PatternLike]] = None

    def descend(self) -> "WalkOptions":
        # Rule sequences are shared by reference with the parent level.
        return replace(self, max_depth=self.max_depth - 1)
