# Core orchestration logic for treewalk.
# This file drives a walk, prints what it yields, and keeps the counts
# shown in the summary block.
#
# It intentionally contains no CLI parsing and no traversal logic.

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Callable, Optional

from rich.console import Console
from rich.markup import escape

from treewalk.models import WalkEntry, WalkOptions
from treewalk.traverse import CorruptEntryError, walk, walk_sync

console = Console(soft_wrap=True)
_err = Console(stderr=True)


# Simple counters used for the optional summary block.
@dataclass
class Counters:
    directories: int = 0
    files: int = 0
    other: int = 0
    error: Optional[str] = None

    @property
    def total(self) -> int:
        return self.directories + self.files + self.other

    @property
    def failed(self) -> bool:
        return self.error is not None

    def add(self, entry: WalkEntry) -> None:
        if entry.is_dir():
            self.directories += 1
        elif entry.is_file():
            self.files += 1
        else:
            self.other += 1


def entry_marker(entry: WalkEntry) -> str:
    # Single-character type column used by --long.
    if entry.is_symlink():
        return "l"
    if entry.is_dir():
        return "d"
    if entry.is_file():
        return "f"
    return "-"


async def _drain_async(root: str, opts: WalkOptions, emit: Callable[[WalkEntry], None]) -> None:
    async for entry in walk(root, opts):
        emit(entry)


def run_walk(
    root: str,
    opts: WalkOptions,
    use_async: bool = False,
    long: bool = False,
    summary: bool = False,
) -> Counters:
    # Entry point for the command line.
    # A failure stops the walk; entries printed before it stay printed.
    counters = Counters()

    def emit(entry: WalkEntry) -> None:
        counters.add(entry)
        line = f"{entry_marker(entry)} {entry.path}" if long else entry.path
        # Paths may contain brackets or colons that rich would read as markup or emoji codes.
        console.print(line, markup=False, emoji=False, highlight=False)

    try:
        if use_async:
            asyncio.run(_drain_async(root, opts, emit))
        else:
            for entry in walk_sync(root, opts):
                emit(entry)
    except (OSError, CorruptEntryError) as exc:
        counters.error = str(exc)
        _err.print(f"[red]FAILED:[/red] {escape(root)} ({escape(str(exc))})", highlight=False)

    if summary:
        _print_summary(counters)

    return counters


def _print_summary(counters: Counters) -> None:
    # Summary goes to stderr so stdout stays a clean list of paths.
    _err.print()
    _err.print("[bold]Summary[/bold]")
    _err.print(f"Directories: {counters.directories}")
    _err.print(f"Files:       {counters.files}")
    _err.print(f"Other:       {counters.other}")
    _err.print(f"Total:       {counters.total}")
    if counters.failed:
        _err.print("Status:      [red]failed[/red]")
