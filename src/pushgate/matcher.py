# src/pushgate/matcher.py: Path pattern evaluation.
# Patterns act as predicates: a pattern matches when it is found anywhere in
# the path ('re.search'). Authors anchor with '^' and '$' to require a match
# against the whole path. The exclude pattern always wins over the include
# pattern.

from __future__ import annotations

import re
from typing import Iterable, List, Optional


def matches(path: str, include: re.Pattern[str], exclude: Optional[re.Pattern[str]] = None) -> bool:
    """Check if a path violates the include pattern without being exempted."""
    if include.search(path) is None:
        return False
    return exclude is None or exclude.search(path) is None


def violating_paths(
    paths: Iterable[str],
    include: re.Pattern[str],
    exclude: Optional[re.Pattern[str]] = None,
) -> List[str]:
    """Filters paths down to the violating ones, keeping their order."""
    return [path for path in paths if matches(path, include, exclude)]
