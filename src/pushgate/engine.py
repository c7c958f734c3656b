# src/pushgate/engine.py: File name policy decision engine.
# This module turns one incoming update into a verdict. It selects the ref
# changes in scope, asks the change source for the files they touch, nets the
# per-commit changes into surviving paths and checks those paths against the
# include and exclude patterns. Every violating path is reported so the author
# can fix all of them in one go.

from __future__ import annotations

from typing import List

from .changes import ChangeSource
from .config import HookConfiguration
from .matcher import violating_paths
from .models import Update, Verdict, Violation
from .netting import net_surviving_paths
from .scope import select_refs
from .util.log import get_logger

logger = get_logger(__name__)


class DecisionEngine:
    """
    Evaluates updates against a file name policy.

    The engine keeps no state between calls; the change source is the only
    collaborator and its errors propagate to the caller unchanged.
    """

    def __init__(self, change_source: ChangeSource):
        self.change_source = change_source

    def evaluate(self, update: Update, configuration: HookConfiguration) -> Verdict:
        refs = select_refs(update.ref_changes, configuration.branches)
        if not refs:
            logger.info(f"No ref changes in scope for '{update.repository}', accepting.")
            return Verdict.accept()

        changes = self.change_source.get_changes(refs, update.repository)
        surviving = net_surviving_paths(changes)
        logger.debug(f"{len(surviving)} paths survive the update to '{update.repository}'")

        violations = self._find_violations(surviving, configuration)
        if not violations:
            logger.info(f"Update to '{update.repository}' accepted.")
            return Verdict.accept()

        logger.info(f"Update to '{update.repository}' rejected with {len(violations)} violations.")
        return Verdict.reject([violation.message() for violation in violations])

    def _find_violations(self, paths: List[str], configuration: HookConfiguration) -> List[Violation]:
        branches = configuration.branches.pattern if configuration.branches is not None else None
        return [
            Violation(path, configuration.include.pattern, branches)
            for path in violating_paths(paths, configuration.include, configuration.exclude)
        ]


def evaluate(update: Update, configuration: HookConfiguration, change_source: ChangeSource) -> Verdict:
    """One-shot evaluation of an update."""
    return DecisionEngine(change_source).evaluate(update, configuration)
