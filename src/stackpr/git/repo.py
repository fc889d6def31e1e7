"""Read-only repository inspection using pygit2."""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from pathlib import Path

from pygit2 import Commit, discover_repository
from pygit2 import GitError as Pygit2GitError
from pygit2.enums import SortMode
from pygit2.repository import Repository

from stackpr.git.utils import GitError

logger = logging.getLogger(__name__)


def commit_subject(message: str) -> str:
	"""
	Return the subject of a commit message.

	The subject is the first paragraph with its lines joined by single
	spaces, which is what git prints for ``%s``. Like git, trailing
	whitespace is dropped from each line but indentation is kept.

	"""
	lines = itertools.dropwhile(lambda line: not line.strip(), message.splitlines())
	subject_lines: list[str] = []
	for line in lines:
		if not line.strip():
			break
		subject_lines.append(line.rstrip())
	return " ".join(subject_lines)


@dataclass(frozen=True)
class CommitInfo:
	"""A resolved commit."""

	sha: str
	subject: str
	parents: tuple[str, ...] = ()

	@property
	def short_sha(self) -> str:
		"""Abbreviated SHA for display."""
		return self.sha[:7]

	@property
	def is_root(self) -> bool:
		"""Whether the commit has no parent."""
		return not self.parents

	@classmethod
	def from_commit(cls, commit: Commit) -> CommitInfo:
		"""Build a CommitInfo from a pygit2 commit."""
		return cls(
			sha=str(commit.id),
			subject=commit_subject(commit.message),
			parents=tuple(str(parent_id) for parent_id in commit.parent_ids),
		)


class GitRepoContext:
	"""Resolves commits and walks history of a repository using pygit2."""

	@classmethod
	def discover(cls, path: Path | None = None) -> Path:
		"""
		Find the git directory containing path.

		Raises:
		    GitError: If path is not inside a repository

		"""
		git_dir = discover_repository(str(path or Path.cwd()))
		if git_dir is None:
			msg = "Not a git repository"
			logger.error(msg)
			raise GitError(msg)
		return Path(git_dir)

	def __init__(self, path: Path | None = None) -> None:
		"""Open the repository containing path (defaults to the current directory)."""
		self.repo = Repository(str(self.discover(path)))

	@property
	def workdir(self) -> Path | None:
		"""Working directory of the repository, None for bare repositories."""
		return Path(self.repo.workdir) if self.repo.workdir else None

	def _peel_commit(self, ref: str) -> Commit:
		try:
			return self.repo.revparse_single(ref).peel(Commit)
		except (KeyError, ValueError, Pygit2GitError) as e:
			msg = f"Unknown commit reference: {ref}"
			logger.debug("revparse of %r failed: %s", ref, e)
			raise GitError(msg) from e

	def resolve_commit(self, ref: str) -> CommitInfo:
		"""
		Resolve a commit reference (branch, tag, SHA, ``HEAD~2``...).

		Raises:
		    GitError: If ref does not name a commit

		"""
		commit = self._peel_commit(ref)
		info = CommitInfo.from_commit(commit)
		logger.debug("Resolved %s to %s (%s)", ref, info.sha, info.subject)
		return info

	def recent_commits(self, ref: str, limit: int = 20) -> list[CommitInfo]:
		"""
		List the most recent commits reachable from ref, newest first.

		Raises:
		    GitError: If ref does not name a commit

		"""
		start = self._peel_commit(ref)
		walker = self.repo.walk(start.id, SortMode.TOPOLOGICAL)
		return [CommitInfo.from_commit(commit) for commit in itertools.islice(walker, limit)]
