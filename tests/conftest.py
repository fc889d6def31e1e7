"""Global test fixtures and configuration."""

from __future__ import annotations

import os
import shutil
from pathlib import Path

import pytest

from stackpr.utils.config_loader import ConfigLoader
from tests.helpers import StackedRepo, commit_file, git


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
	"""Keep user configuration and STACKPR_* variables out of every test."""
	for env_var in list(os.environ):
		if env_var.startswith("STACKPR_"):
			monkeypatch.delenv(env_var)
	monkeypatch.setattr("stackpr.utils.config_loader.xdg_config_home", str(tmp_path / "xdg"))
	monkeypatch.setenv("HOME", str(tmp_path / "home"))
	monkeypatch.chdir(tmp_path)
	ConfigLoader._instance = None


@pytest.fixture
def stacked_repo(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> StackedRepo:
	"""
	Create a repository whose `main` is pushed to a bare `origin`.

	Global and system git configuration are ignored so results do not
	depend on the machine running the tests.

	"""
	if shutil.which("git") is None:
		pytest.skip("git is not installed")

	gitconfig = tmp_path / "gitconfig"
	gitconfig.write_text(
		"[user]\n\tname = Test User\n\temail = test@example.com\n"
		"[commit]\n\tgpgsign = false\n"
		"[init]\n\tdefaultBranch = main\n",
		encoding="utf-8",
	)
	monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(gitconfig))
	monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
	for role in ("AUTHOR", "COMMITTER"):
		monkeypatch.setenv(f"GIT_{role}_NAME", "Test User")
		monkeypatch.setenv(f"GIT_{role}_EMAIL", "test@example.com")

	remote = tmp_path / "origin.git"
	remote.mkdir()
	git("init", "-q", "--bare", cwd=remote)
	git("symbolic-ref", "HEAD", "refs/heads/main", cwd=remote)

	path = tmp_path / "work"
	path.mkdir()
	git("init", "-q", cwd=path)
	git("symbolic-ref", "HEAD", "refs/heads/main", cwd=path)
	git("remote", "add", "origin", str(remote), cwd=path)
	commit_file(path, "README.md", "# project\n", "Initial commit")
	git("push", "-q", "-u", "origin", "main", cwd=path)

	return StackedRepo(path=path, remote=remote)
