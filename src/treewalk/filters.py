# Path filtering rules for treewalk.
# Pure predicates only: no filesystem access and no state.

from __future__ import annotations

import os
import re
from typing import List, Optional, Pattern, Sequence

from treewalk.models import PatternLike


def _found_any(path: str, patterns: Sequence[PatternLike]) -> bool:
    # re.search accepts both compiled patterns and raw expression strings.
    return any(re.search(pattern, path) for pattern in patterns)


def include(
    path: str,
    exts: Optional[Sequence[str]] = None,
    match: Optional[Sequence[PatternLike]] = None,
    skip: Optional[Sequence[PatternLike]] = None,
) -> bool:
    """Decide whether a path passes the extension, match and skip rules.

    The three checks are AND-combined. A rule set that is None never
    excludes anything.
    """
    path = os.fspath(path)

    if exts is not None and not any(path.endswith(ext) for ext in exts):
        return False

    if match is not None and not _found_any(path, match):
        return False

    if skip is not None and _found_any(path, skip):
        return False

    return True


def compile_patterns(raw: Sequence[str]) -> Optional[List[Pattern[str]]]:
    # Compile user-supplied expressions once, up front.
    # An empty list means the rule was not given at all.
    if not raw:
        return None
    return [re.compile(expr) for expr in raw]
