"""Helpers for tests that run real git."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path


def git(*args: str, cwd: Path) -> str:
	"""Run git in a test repository and return stripped stdout."""
	result = subprocess.run(["git", *args], cwd=cwd, capture_output=True, text=True, check=True)
	return result.stdout.strip()


def commit_file(repo: Path, name: str, content: str, message: str) -> str:
	"""Write a file, commit it and return the new commit SHA."""
	(repo / name).write_text(content, encoding="utf-8")
	git("add", name, cwd=repo)
	git("commit", "-q", "-m", message, cwd=repo)
	return git("rev-parse", "HEAD", cwd=repo)


@dataclass
class StackedRepo:
	"""A working repository with a bare `origin` remote."""

	path: Path
	remote: Path

	def git(self, *args: str) -> str:
		"""Run git in the working repository."""
		return git(*args, cwd=self.path)

	def commit(self, name: str, content: str, message: str) -> str:
		"""Commit a file on the current branch."""
		return commit_file(self.path, name, content, message)

	def remote_git(self, *args: str) -> str:
		"""Run git in the bare remote."""
		return git(*args, cwd=self.remote)
