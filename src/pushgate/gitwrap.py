# src/pushgate/gitwrap.py: Safe subprocess wrappers for Git.
# This module provides functions for interacting with the system's 'git' command
# in a safe and controlled manner. It uses subprocess execution with timeouts
# and clear error handling. The hook runs inside the receiving repository, so
# the inherited environment (including git's object quarantine variables) is
# passed through; only interactive prompts are switched off.

import os
import subprocess
from pathlib import Path
from typing import List, Optional, Tuple

from .util.errors import GitError

# --- Core Git Execution ---

def run_git(
    args: List[str],
    cwd: Path,
    timeout: int = 120,
    check: bool = True,
    env: Optional[dict] = None,
) -> subprocess.CompletedProcess:
    """
    Runs a git command in a specified directory with a timeout and error handling.
    The child inherits the current environment with GIT_TERMINAL_PROMPT=0.

    Args:
        args: A list of arguments for the git command.
        cwd: The working directory for the command.
        timeout: The command timeout in seconds.
        check: If True, raises GitError on a non-zero exit code.
        env: Extra environment variables layered over the inherited ones.

    Returns:
        The CompletedProcess object.

    Raises:
        GitError: If git is not found, the command fails, or it times out.
    """
    if not cwd.is_dir():
        raise GitError(f"Git working directory not found: {cwd}")

    base_env = os.environ.copy()
    base_env["GIT_TERMINAL_PROMPT"] = "0"  # Disable interactive prompts
    if env:
        base_env.update(env)

    try:
        process = subprocess.run(
            ["git"] + args,
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=check,
            env=base_env,
        )
        return process
    except FileNotFoundError:
        raise GitError("The 'git' command was not found. Is it installed and in your PATH?")
    except subprocess.CalledProcessError as e:
        error_message = (e.stderr or "").strip() or (e.stdout or "").strip()
        raise GitError(f"Git command '{' '.join(args)}' failed: {error_message}")
    except subprocess.TimeoutExpired:
        raise GitError(f"Git command '{' '.join(args)}' timed out after {timeout} seconds.")


# --- High-Level Git Operations ---

def git_new_commits(
    cwd: Path,
    new_id: str,
    old_id: Optional[str] = None,
    exclude_refs: Optional[List[str]] = None,
) -> List[str]:
    """
    Lists the commits reachable from new_id but not from old_id or the
    excluded refs, oldest first.

    Args:
        exclude_refs: Full ref names whose history is already known. None
            excludes every existing ref ('--all').
    """
    excluded = ["--all"] if exclude_refs is None else list(exclude_refs)
    if old_id:
        excluded.append(old_id)

    args = ["rev-list", "--reverse", "--topo-order", new_id]
    if excluded:
        args += ["--not"] + excluded
    result = run_git(args, cwd=cwd)
    return [line.strip() for line in result.stdout.splitlines() if line.strip()]


def git_list_refs(cwd: Path) -> List[str]:
    """Lists the full names of every ref in the repository."""
    result = run_git(["for-each-ref", "--format=%(refname)"], cwd=cwd)
    return [line.strip() for line in result.stdout.splitlines() if line.strip()]


def git_commit_name_status(cwd: Path, commit: str) -> List[Tuple[str, ...]]:
    """
    Lists the files a commit touched relative to its first parent.

    Returns:
        One tuple per record: (status, path) or, for renames and copies,
        (status, source_path, target_path). Status is the bare letter.
    """
    result = run_git(
        ["diff-tree", "-r", "-z", "-M", "--name-status", "--no-commit-id", "--root", commit],
        cwd=cwd,
    )
    return parse_name_status(result.stdout)


def parse_name_status(output: str) -> List[Tuple[str, ...]]:
    """Parses NUL separated '--name-status -z' output."""
    tokens = output.split("\0")
    if tokens and tokens[-1] == "":
        tokens.pop()

    records: List[Tuple[str, ...]] = []
    i = 0
    while i < len(tokens):
        status = tokens[i].strip()[:1]
        if not status:
            raise GitError(f"Unexpected empty status in diff-tree output at token {i}.")
        width = 2 if status in ("R", "C") else 1
        paths = tokens[i + 1:i + 1 + width]
        if len(paths) != width:
            raise GitError(f"Truncated diff-tree record for status '{status}'.")
        records.append((status, *paths))
        i += 1 + width
    return records


def git_dir_name(cwd: Path) -> str:
    """Gets a repository name from its git directory, e.g. 'infra' for 'infra.git'."""
    result = run_git(["rev-parse", "--absolute-git-dir"], cwd=cwd)
    git_dir = Path(result.stdout.strip())
    if git_dir.name == ".git":
        git_dir = git_dir.parent
    name = git_dir.name
    return name[:-4] if name.endswith(".git") else name
