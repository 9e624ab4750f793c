"""Version control helpers."""

from .git import changed_files_since, commit_exists, get_changed_files, head_commit

__all__ = ["changed_files_since", "commit_exists", "get_changed_files", "head_commit"]
