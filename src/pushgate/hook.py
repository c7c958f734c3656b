# src/pushgate/hook.py: git pre-receive host adapter.
# This module connects the decision engine to the git server. It parses the
# ref updates git writes to a pre-receive hook's stdin, looks up the settings
# of the receiving repository, and runs the engine with the git change source.
# A rejected verdict is raised as PolicyViolationError so the caller can print
# it and refuse the push.

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, TextIO

from .changes import ChangeSource, GitChangeSource
from .config import HookConfiguration
from .engine import DecisionEngine
from .gitwrap import git_dir_name
from .models import RefChange, Update, Verdict
from .settings import SettingsSource
from .util.errors import HookInputError, PolicyViolationError
from .util.log import get_logger, repo_context

logger = get_logger(__name__)


def parse_ref_updates(lines: Iterable[str]) -> List[RefChange]:
    """
    Parses '<old-id> <new-id> <ref-name>' lines as written by git.

    Raises:
        HookInputError: If a non-blank line does not have exactly three fields.
    """
    ref_changes = []
    for number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        fields = line.split()
        if len(fields) != 3:
            raise HookInputError(f"Malformed ref update on line {number}: {line.strip()!r}")
        ref_changes.append(RefChange.from_line(*fields))
    return ref_changes


def read_update(stream: TextIO, repository: str) -> Update:
    """Builds the update for one pre-receive invocation from its stdin."""
    return Update(repository=repository, ref_changes=parse_ref_updates(stream))


class PreReceiveHook:
    """
    Runs the file name policy for one push.

    Without an explicit change source, each check reads the git repository at
    git_dir, which must be the receiving repository, scoped to the configured
    branch pattern.
    """

    def __init__(
        self,
        settings_source: SettingsSource,
        git_dir: Path,
        change_source: Optional[ChangeSource] = None,
    ):
        self.settings_source = settings_source
        self.git_dir = git_dir
        self.change_source = change_source

    def repository_name(self) -> str:
        return git_dir_name(self.git_dir)

    def check(self, update: Update) -> Verdict:
        """
        Evaluates the update and returns the verdict.

        Raises:
            PolicyViolationError: If the update is rejected.
            PushgateError: If settings or changes cannot be determined.
        """
        token = repo_context.set(update.repository)
        try:
            settings = self.settings_source.get_settings(update.repository)
            if settings is None:
                logger.info("No file name policy configured, accepting.")
                return Verdict.accept()

            configuration = HookConfiguration.from_settings(settings)
            change_source = self.change_source or GitChangeSource(self.git_dir, configuration.branches)
            verdict = DecisionEngine(change_source).evaluate(update, configuration)
            if not verdict.accepted:
                raise PolicyViolationError(verdict)
            return verdict
        except PolicyViolationError as e:
            logger.info(f"Push rejected: {e.verdict.detail}")
            raise
        except Exception:
            logger.error("Failed to evaluate push", exc_info=True)
            raise
        finally:
            repo_context.reset(token)
