"""Git utilities for stackpr."""

from stackpr.git.repo import CommitInfo, GitRepoContext, commit_subject
from stackpr.git.utils import GitError, run_git_command

__all__ = [
	"CommitInfo",
	"GitError",
	"GitRepoContext",
	"commit_subject",
	"run_git_command",
]
