# src/pushgate/scope.py: Selects the ref changes a push is evaluated on.
# Deleted refs cannot introduce new paths and tags are never checked, so both
# are dropped. When a branch pattern is configured, only refs whose full name
# matches it are kept.

from __future__ import annotations

import re
from typing import Iterable, List, Optional

from .models import RefChange, RefChangeKind, RefType


def is_in_scope(ref_change: RefChange) -> bool:
    """Check if a ref change can bring new paths into the repository."""
    return ref_change.kind != RefChangeKind.DELETE and ref_change.ref_type != RefType.TAG


def matches_branch_pattern(ref_change: RefChange, branch_pattern: re.Pattern[str]) -> bool:
    """Check if the full ref name (e.g. 'refs/heads/main') matches the pattern."""
    return branch_pattern.fullmatch(ref_change.ref_id) is not None


def select_refs(
    ref_changes: Iterable[RefChange],
    branch_pattern: Optional[re.Pattern[str]] = None,
) -> List[RefChange]:
    """Filters ref changes down to the ones subject to evaluation, keeping their order."""
    selected = [ref for ref in ref_changes if is_in_scope(ref)]
    if branch_pattern is not None:
        selected = [ref for ref in selected if matches_branch_pattern(ref, branch_pattern)]
    return selected
