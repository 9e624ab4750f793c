"""Git helpers used by impact analysis.

Every helper degrades to an empty answer when git is missing, the
directory is not a repository, or the command times out.
"""

import subprocess
from typing import Optional

from ..logging_config import get_logger

logger = get_logger(__name__)

GIT_TIMEOUT = 10


def _git(repo_path: str, *args: str) -> Optional[str]:
    """Run a git command and return stdout, or None on any failure."""
    try:
        result = subprocess.run(
            ["git", "-C", repo_path, *args],
            capture_output=True,
            text=True,
            timeout=GIT_TIMEOUT,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired) as e:
        logger.debug("git %s failed: %s", " ".join(args), e)
        return None
    if result.returncode != 0:
        logger.debug("git %s exited %d: %s", " ".join(args), result.returncode, result.stderr.strip())
        return None
    return result.stdout


def head_commit(repo_path: str) -> Optional[str]:
    """Full SHA of HEAD, or None outside a repository."""
    out = _git(repo_path, "rev-parse", "HEAD")
    return out.strip() if out else None


def commit_exists(repo_path: str, commit: str) -> bool:
    return _git(repo_path, "cat-file", "-e", f"{commit}^{{commit}}") is not None


def get_changed_files(repo_path: str, ref: str = "HEAD~1") -> list[str]:
    """Files changed between ``ref`` and the working tree (``git diff --name-only``)."""
    out = _git(repo_path, "diff", "--name-only", ref)
    if out is None:
        return []
    return [f for f in out.strip().split("\n") if f]


def changed_files_since(repo_path: str, commit: Optional[str]) -> list[str]:
    """Files changed since ``commit``, the commit recorded by the last run.

    Falls back to the previous commit when no run was recorded or the stored
    commit no longer exists (rebased away, shallow clone).
    """
    if commit and commit_exists(repo_path, commit):
        return get_changed_files(repo_path, commit)
    if commit:
        logger.info("Last run commit %s not found, diffing against HEAD~1", commit[:8])
    changed = get_changed_files(repo_path, "HEAD~1")
    if not changed:
        # Single-commit repository: only uncommitted changes are visible
        changed = get_changed_files(repo_path, "HEAD")
    return changed
