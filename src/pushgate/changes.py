# src/pushgate/changes.py: File change retrieval.
# This module implements a Strategy pattern for finding the files a push
# touches. The decision engine only depends on the ChangeSource interface; the
# git implementation walks the commits each ref change introduces and reports
# every per-commit path record. Failures are never swallowed: an update whose
# changes cannot be determined must not be accepted.

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence

from .gitwrap import git_commit_name_status, git_list_refs, git_new_commits
from .models import FileChange, FileChangeKind, RefChange, is_null_id
from .util.errors import GitError
from .util.log import get_logger

logger = get_logger(__name__)

STATUS_KINDS = {
    "A": FileChangeKind.ADD,
    "C": FileChangeKind.ADD,
    "M": FileChangeKind.MODIFY,
    "T": FileChangeKind.MODIFY,
    "D": FileChangeKind.DELETE,
}


class ChangeSource(ABC):
    """Abstract base class for retrieving the file changes of a push."""
    @abstractmethod
    def get_changes(self, ref_changes: Sequence[RefChange], repository: str) -> Iterable[FileChange]:
        """
        Return every file change in the commits the given ref changes
        introduce. Raise a PushgateError if they cannot be determined.
        """
        pass


def to_file_changes(record: Sequence[str]) -> List[FileChange]:
    """Converts one diff-tree record into file changes."""
    status = record[0]
    if status == "R":
        return [
            FileChange(path=record[1], kind=FileChangeKind.RENAME_SOURCE),
            FileChange(path=record[2], kind=FileChangeKind.RENAME_TARGET),
        ]
    if status == "C":
        return [FileChange(path=record[2], kind=FileChangeKind.ADD)]
    kind = STATUS_KINDS.get(status)
    if kind is None:
        raise GitError(f"Unsupported change status '{status}' for path '{record[1]}'.")
    return [FileChange(path=record[1], kind=kind)]
class GitChangeSource(ChangeSource):
    """
    Reads changes from the receiving repository with 'git rev-list' and
    'git diff-tree'. Meant to run inside a pre-receive hook, where refs still
    point at their old values.

    Without a branch pattern, commits any existing ref already reaches are
    skipped. With one, only the history of existing refs matching the pattern
    is skipped, so commits first pushed to an unchecked branch are still
    inspected when they reach a checked one.
    """
    def __init__(self, git_dir: Path, branch_pattern: Optional[re.Pattern[str]] = None):
        self.git_dir = git_dir
        self.branch_pattern = branch_pattern

    def get_changes(self, ref_changes: Sequence[RefChange], repository: str) -> List[FileChange]:
        changes = list(self._iter_changes(ref_changes))
        logger.debug(f"Collected {len(changes)} file changes for {len(ref_changes)} refs in '{repository}'")
        return changes

    def known_refs(self) -> Optional[List[str]]:
        """The existing refs whose history counts as already checked, or None for all of them."""
        if self.branch_pattern is None:
            return None
        return [name for name in git_list_refs(self.git_dir) if self.branch_pattern.fullmatch(name)]

    def _iter_changes(self, ref_changes: Sequence[RefChange]) -> Iterator[FileChange]:
        # Every ref is walked in full: a commit shared by two refs counts once per ref.
        exclude_refs = self.known_refs()
        for ref in ref_changes:
            if not ref.to_id:
                raise GitError(f"Ref change for '{ref.ref_id}' has no target commit.")
            old_id = ref.from_id if ref.from_id and not is_null_id(ref.from_id) else None
            for commit in git_new_commits(self.git_dir, ref.to_id, old_id, exclude_refs=exclude_refs):
                for record in git_commit_name_status(self.git_dir, commit):
                    yield from to_file_changes(record)
