# Directory tree traversal for treewalk.
# A single traversal core decides what to visit and what to emit; it never
# performs I/O itself. It yields IORequest values and is sent the results back,
# so the blocking and the async walkers share one algorithm and differ only in
# how they carry out those requests.
#
# No logging, retries or filesystem mutation are allowed here.

from __future__ import annotations

import os
from typing import (
    Any,
    AsyncIterator,
    Generator,
    Iterator,
    List,
    NamedTuple,
    Optional,
    Tuple,
    Union,
)

from treewalk.filters import include
from treewalk.fsio import AsyncFileSystem, AsyncLocalFileSystem, FileSystem, LocalFileSystem
from treewalk.models import DirEntryInfo, WalkEntry, WalkOptions


class CorruptEntryError(Exception):
    """A directory listing returned a child without a readable name."""


class IORequest(NamedTuple):
    # op names a backend method: "stat", "list_dir" or "resolve".
    op: str
    path: str


Step = Union[IORequest, WalkEntry]

# A directory being expanded: its path, the options in force at its level,
# and the children not yet visited.
_Frame = Tuple[str, WalkOptions, Iterator[DirEntryInfo]]
_Pending = Tuple[str, WalkOptions]

# End-of-listing marker; None is a possible, corrupt, listing value.
_DONE = object()


def _enter(path: str, opts: WalkOptions) -> Generator[Step, Any, Optional[_Frame]]:
    # Emit the directory itself, then decide whether to list it.
    # The one normalized string is filtered, emitted and joined onto, so a
    # skip rule sees exactly the paths that get printed.
    path = os.path.normpath(path)

    # Emission uses the full filter; pruning looks at skip rules only, so
    # exts and match can hide a directory but never stop the descent.
    if opts.include_dirs and include(path, opts.exts, opts.match, opts.skip):
        info = yield IORequest("stat", path)
        yield WalkEntry.from_stat(path, info)

    if opts.max_depth < 1 or not include(path, skip=opts.skip):
        return None

    listing = yield IORequest("list_dir", path)
    return path, opts, iter(listing)


def _visit(
    parent: str,
    opts: WalkOptions,
    child: Optional[DirEntryInfo],
) -> Generator[Step, Any, Optional[_Pending]]:
    # Handle one listed child. Returns the directory to descend into, if any.
    if child is None or child.name is None:
        raise CorruptEntryError(f"Null entry while listing {parent}")

    # Joined like the directory itself: "./sub" becomes "sub".
    path = os.path.normpath(os.path.join(parent, child.name))

    if child.is_symlink:
        if not opts.follow_symlinks:
            return None
        # Continue as the link target: its real path, its name, its type.
        path = yield IORequest("resolve", path)
        info = yield IORequest("stat", path)
        child = DirEntryInfo(
            name=os.path.basename(path),
            is_file=info.is_file,
            is_dir=info.is_dir,
            is_symlink=False,
        )

    if child.is_file:
        if opts.include_files and include(path, opts.exts, opts.match, opts.skip):
            yield WalkEntry.from_listing(path, child)
        return None

    return path, opts.descend()


def _steps(root: str, options: WalkOptions) -> Generator[Step, Any, None]:
    # Pre-order, depth-first, driven by an explicit stack rather than
    # recursion so deep trees do not grow the call stack.
    if options.max_depth < 0:
        return

    stack: List[_Frame] = []
    pending: Optional[_Pending] = (root, options)

    while True:
        if pending is not None:
            frame = yield from _enter(*pending)
            pending = None
            if frame is not None:
                stack.append(frame)

        if not stack:
            return

        parent, opts, children = stack[-1]
        child = next(children, _DONE)
        if child is _DONE:
            stack.pop()
            continue

        pending = yield from _visit(parent, opts, child)


def walk_sync(
    root: Union[str, os.PathLike],
    options: Optional[WalkOptions] = None,
    fs: Optional[FileSystem] = None,
) -> Iterator[WalkEntry]:
    """Walk the tree rooted at root, yielding entries that pass the options.

    Entries come out in pre-order: a directory before anything beneath it,
    children in the order the directory listing returned them. Each pull
    blocks until the I/O needed for the next entry completes.

    Any OSError from stat, listing or link resolution ends the walk and is
    raised from the pull that triggered it.
    """
    fs = fs if fs is not None else LocalFileSystem()
    steps = _steps(os.fspath(root), options if options is not None else WalkOptions())

    try:
        reply: Any = None
        while True:
            try:
                step = steps.send(reply)
            except StopIteration:
                return

            if isinstance(step, WalkEntry):
                reply = None
                yield step
            else:
                reply = getattr(fs, step.op)(step.path)
    finally:
        steps.close()


async def walk(
    root: Union[str, os.PathLike],
    options: Optional[WalkOptions] = None,
    fs: Optional[AsyncFileSystem] = None,
) -> AsyncIterator[WalkEntry]:
    """Async counterpart of walk_sync.

    Produces exactly the same sequence, but every stat, listing and link
    resolution is awaited so the event loop is not blocked while it runs.
    Subtrees are still visited one at a time.
    """
    fs = fs if fs is not None else AsyncLocalFileSystem()
    steps = _steps(os.fspath(root), options if options is not None else WalkOptions())

    try:
        reply: Any = None
        while True:
            try:
                step = steps.send(reply)
            except StopIteration:
                return

            if isinstance(step, WalkEntry):
                reply = None
                yield step
            else:
                reply = await getattr(fs, step.op)(step.path)
    finally:
        steps.close()
