# src/pushgate/netting.py: Reconciles per-commit file changes into a net result.
# A push can touch the same path in several commits and through several refs.
# Delete-class and surviving-class events are counted per path, and a path is
# only evaluated when the two counts differ. A file added and removed again
# within one push therefore never reaches the pattern check.
#
# Counting is exact as long as each commit yields at most one record per path,
# which is what 'git diff-tree' produces. It is not a last-state-wins model:
# a path with one surviving event and two delete events is still evaluated.

from __future__ import annotations

from collections import Counter
from typing import Iterable, List

from .models import FileChange


def count_changes(changes: Iterable[FileChange]):
    """
    Splits the changes into two per-path counters.

    Returns:
        A (surviving, deleted) pair of Counters. The surviving counter keeps
        the order in which paths first appeared with a surviving-class event.
    """
    surviving: Counter = Counter()
    deleted: Counter = Counter()
    for change in changes:
        if change.kind.is_delete:
            deleted[change.path] += 1
        else:
            surviving[change.path] += 1
    return surviving, deleted


def net_surviving_paths(changes: Iterable[FileChange]) -> List[str]:
    """Paths whose net effect over the whole push is that they still exist."""
    surviving, deleted = count_changes(changes)
    return [path for path, count in surviving.items() if count != deleted.get(path, 0)]

