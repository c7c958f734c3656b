# src/pushgate/models.py: Value types shared by the decision engine.
# These models describe one incoming update (its ref changes), the per-commit
# file changes reachable from it, and the verdict the gate returns. They are
# immutable and live only for the duration of a single evaluation.

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

ZERO_ID_CHARS = {"0"}
REJECTED_SUMMARY = "File does not match name pattern"


def is_null_id(object_id: str) -> bool:
    """True for git's all-zeros object id, used for created and deleted refs."""
    return bool(object_id) and set(object_id) <= ZERO_ID_CHARS


class RefType(str, Enum):
    BRANCH = "branch"
    TAG = "tag"
    OTHER = "other"

    @classmethod
    def from_ref(cls, ref_id: str) -> "RefType":
        if ref_id.startswith("refs/heads/"):
            return cls.BRANCH
        if ref_id.startswith("refs/tags/"):
            return cls.TAG
        return cls.OTHER


class RefChangeKind(str, Enum):
    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"


class FileChangeKind(str, Enum):
    ADD = "add"
    MODIFY = "modify"
    DELETE = "delete"
    RENAME_SOURCE = "rename-source"
    RENAME_TARGET = "rename-target"

    @property
    def is_delete(self) -> bool:
        """Delete-class kinds remove the path; every other kind leaves it in the tree."""
        return self in (FileChangeKind.DELETE, FileChangeKind.RENAME_SOURCE)


class RefChange(BaseModel):
    """One updated reference within an incoming update."""
    model_config = ConfigDict(frozen=True)

    ref_id: str
    ref_type: RefType
    kind: RefChangeKind
    from_id: Optional[str] = None
    to_id: Optional[str] = None

    @classmethod
    def from_line(cls, old_id: str, new_id: str, ref_id: str) -> "RefChange":
        """Builds a ref change from the ids git hands a pre-receive hook."""
        if is_null_id(old_id):
            kind = RefChangeKind.ADD
        elif is_null_id(new_id):
            kind = RefChangeKind.DELETE
        else:
            kind = RefChangeKind.UPDATE
        return cls(
            ref_id=ref_id,
            ref_type=RefType.from_ref(ref_id),
            kind=kind,
            from_id=old_id,
            to_id=new_id,
        )


class FileChange(BaseModel):
    """One path touched by one commit."""
    model_config = ConfigDict(frozen=True)

    path: str
    kind: FileChangeKind


class Update(BaseModel):
    """Everything the git server hands the gate for one push."""
    model_config = ConfigDict(frozen=True)

    repository: str
    ref_changes: List[RefChange] = Field(default_factory=list)


class Violation:
    """A surviving path that matched the include pattern."""

    def __init__(self, path: str, include: str, branches: Optional[str] = None):
        self.path = path
        self.include = include
        self.branches = branches

    def message(self) -> str:
        if self.branches is not None:
            return (
                f"File [{self.path}] violates file name pattern [{self.include}] "
                f"for branch [{self.branches}]."
            )
        return f"File [{self.path}] violates file name pattern [{self.include}]."

    def __str__(self):
        return self.message()


class Verdict(BaseModel):
    """Outcome of one evaluation."""
    model_config = ConfigDict(frozen=True)

    accepted: bool
    summary: Optional[str] = None
    messages: List[str] = Field(default_factory=list)

    @classmethod
    def accept(cls) -> "Verdict":
        return cls(accepted=True)

    @classmethod
    def reject(cls, messages: List[str], summary: str = REJECTED_SUMMARY) -> "Verdict":
        return cls(accepted=False, summary=summary, messages=list(messages))

    @property
    def detail(self) -> str:
        """All messages as a single bracketed line, e.g. ``[msg1, msg2]``."""
        return "[" + ", ".join(self.messages) + "]"
