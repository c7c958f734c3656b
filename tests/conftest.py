# tests/conftest.py: Shared fixtures and test doubles.

import re
from typing import List, Optional, Sequence

import pytest

from pushgate.changes import ChangeSource
from pushgate.config import HookConfiguration
from pushgate.models import FileChange, FileChangeKind, RefChange, RefChangeKind, RefType, Update

OLD_ID = "1" * 40
NEW_ID = "2" * 40
NULL_ID = "0" * 40


class StaticChangeSource(ChangeSource):
    """Returns canned file changes and records every call."""
    def __init__(self, changes: Sequence[FileChange] = ()):
        self.changes = list(changes)
        self.calls = []

    def get_changes(self, ref_changes, repository):
        self.calls.append((list(ref_changes), repository))
        return list(self.changes)


class FailingChangeSource(ChangeSource):
    def __init__(self, error: Exception):
        self.error = error

    def get_changes(self, ref_changes, repository):
        raise self.error


class PerRefChangeSource(ChangeSource):
    """Returns the canned changes of each requested ref, in ref order."""
    def __init__(self, changes_by_ref):
        self.changes_by_ref = changes_by_ref

    def get_changes(self, ref_changes, repository):
        return [change for ref in ref_changes for change in self.changes_by_ref.get(ref.ref_id, [])]


def branch(name: str, kind: RefChangeKind = RefChangeKind.UPDATE) -> RefChange:
    return RefChange(
        ref_id=f"refs/heads/{name}",
        ref_type=RefType.BRANCH,
        kind=kind,
        from_id=NULL_ID if kind == RefChangeKind.ADD else OLD_ID,
        to_id=NULL_ID if kind == RefChangeKind.DELETE else NEW_ID,
    )


def tag(name: str) -> RefChange:
    return RefChange(ref_id=f"refs/tags/{name}", ref_type=RefType.TAG, kind=RefChangeKind.ADD,
                     from_id=NULL_ID, to_id=NEW_ID)


def added(*paths: str) -> List[FileChange]:
    return [FileChange(path=p, kind=FileChangeKind.ADD) for p in paths]


def deleted(*paths: str) -> List[FileChange]:
    return [FileChange(path=p, kind=FileChangeKind.DELETE) for p in paths]


def renamed(source: str, target: str) -> List[FileChange]:
    return [
        FileChange(path=source, kind=FileChangeKind.RENAME_SOURCE),
        FileChange(path=target, kind=FileChangeKind.RENAME_TARGET),
    ]


def configuration(include: str, exclude: Optional[str] = None, branches: Optional[str] = None) -> HookConfiguration:
    return HookConfiguration(
        include=re.compile(include),
        exclude=re.compile(exclude) if exclude else None,
        branches=re.compile(branches) if branches else None,
    )


def update(*ref_changes: RefChange, repository: str = "infra") -> Update:
    return Update(repository=repository, ref_changes=list(ref_changes))


@pytest.fixture
def policy_file(tmp_path):
    """A policy.yaml path inside tmp_path; the file is not created."""
    return tmp_path / "pushgate" / "policy.yaml"
