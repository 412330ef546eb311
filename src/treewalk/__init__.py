# Package initialization for treewalk.
# Re-exports the walking API; everything else lives in submodules.

from treewalk.models import WalkEntry, WalkOptions
from treewalk.traverse import CorruptEntryError, walk, walk_sync

__all__ = [
    "__version__",
    "CorruptEntryError",
    "WalkEntry",
    "WalkOptions",
    "walk",
    "walk_sync",
]

# Package version.
# This is duplicated in pyproject.toml by design; keep them in sync.
__version__ = "0.1.0"
