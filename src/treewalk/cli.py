# Command-line interface definition for treewalk.
# This file is responsible only for argument parsing, validation,
# and dispatch into core application logic.
#
# No traversal logic should live here.

from __future__ import annotations

import math
import re
from pathlib import Path as FSPath
from typing import List, Optional, Pattern

import typer
from rich.console import Console

from treewalk import __version__
from treewalk.core import run_walk
from treewalk.filters import compile_patterns
from treewalk.models import WalkOptions

app = typer.Typer(
    add_completion=False,
    help="List the files and directories under a root, filtered and depth-limited.",
)
console = Console()


def _compile_option(name: str, raw: List[str]) -> Optional[List[Pattern[str]]]:
    # Turn a bad regular expression into a usage error rather than a traceback.
    try:
        return compile_patterns(raw)
    except re.error as exc:
        raise typer.BadParameter(f"invalid regular expression for {name}: {exc}")


@app.command(help="Walk ROOT depth-first and print every entry that passes the filters.")
def main(
    root: FSPath = typer.Argument(
        FSPath("."),
        help="Directory to walk. Defaults to current directory.",
    ),

    # Depth and kinds.
    max_depth: Optional[int] = typer.Option(
        None, "--max-depth",
        help="Stop descending after this many levels (0 lists only ROOT).",
        rich_help_panel="Traversal",
    ),
    no_files: bool = typer.Option(
        False, "--no-files",
        help="Do not print files.",
        rich_help_panel="Traversal",
    ),
    no_dirs: bool = typer.Option(
        False, "--no-dirs",
        help="Do not print directories (they are still walked).",
        rich_help_panel="Traversal",
    ),
    follow_symlinks: bool = typer.Option(
        False, "--follow-symlinks",
        help="Resolve symbolic links and walk their targets instead of skipping them.",
        rich_help_panel="Traversal",
    ),
    use_async: bool = typer.Option(
        False, "--async",
        help="Run the walk on an asyncio event loop.",
        rich_help_panel="Traversal",
    ),

    # Filters.
    ext: List[str] = typer.Option(
        [], "--ext",
        help="Only print paths ending with one of these suffixes.",
        rich_help_panel="Filters",
    ),
    match: List[str] = typer.Option(
        [], "--match",
        help="Only print paths matching one of these regular expressions.",
        rich_help_panel="Filters",
    ),
    skip: List[str] = typer.Option(
        [], "--skip",
        help="Skip paths matching these regular expressions; matching directories are not walked.",
        rich_help_panel="Filters",
    ),

    # Output.
    long: bool = typer.Option(
        False, "--long",
        help="Prefix each path with its type (d, f, l or -).",
        rich_help_panel="Output",
    ),
    summary: bool = typer.Option(
        False, "--summary",
        help="Print entry counts to stderr when done.",
        rich_help_panel="Output",
    ),

    version: bool = typer.Option(
        False, "--version",
        help="Show version and exit.",
    ),
):
    # Handle version early and exit cleanly.
    if version:
        console.print(__version__)
        raise typer.Exit(code=0)

    if no_files and no_dirs:
        raise typer.BadParameter("--no-files and --no-dirs together would print nothing")

    opts = WalkOptions(
        max_depth=math.inf if max_depth is None else max_depth,
        include_files=not no_files,
        include_dirs=not no_dirs,
        follow_symlinks=follow_symlinks,
        exts=list(ext) or None,
        match=_compile_option("--match", match),
        skip=_compile_option("--skip", skip),
    )

    counters = run_walk(
        root=str(root),
        opts=opts,
        use_async=use_async,
        long=long,
        summary=summary,
    )

    if counters.failed:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
