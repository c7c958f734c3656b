# src/pushgate/util/errors.py: Typed exceptions and exit codes.
# This module defines a hierarchy of custom exception types for the application.
# Every exception maps to a non-zero process exit code so that the git server
# refuses an update whenever the gate cannot reach a verdict.

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List

if TYPE_CHECKING:
    from ..models import Verdict


class PushgateError(Exception):
    """Base exception for the application."""
    exit_code = 1

class ConfigError(PushgateError):
    """Configuration-related errors."""
    exit_code = 2

class SettingsValidationError(ConfigError):
    """Hook settings were refused at save time.

    Carries the per-field messages so callers can report every offending
    field at once.
    """
    exit_code = 2

    def __init__(self, field_errors: Dict[str, List[str]]):
        self.field_errors = field_errors
        fields = ", ".join(sorted(field_errors))
        super().__init__(f"Invalid hook settings for field(s): {fields}")

class GitError(PushgateError):
    """Git command errors."""
    exit_code = 3

class HookInputError(PushgateError):
    """Malformed input handed to the hook by the git server."""
    exit_code = 4

class PolicyViolationError(PushgateError):
    """The update was rejected by the file name policy."""
    exit_code = 1

    def __init__(self, verdict: "Verdict"):
        self.verdict = verdict
        super().__init__(verdict.summary)
