"""End-to-end tests running real git against a repository with a bare remote."""

from __future__ import annotations

import sys

import pytest

from stackpr.git.repo import GitRepoContext
from stackpr.stack.errors import BranchNameError, DirtyWorkingTreeError, StackError, TransplantError
from stackpr.stack.workflow import StackOptions, StackWorkflow
from tests.helpers import StackedRepo, commit_file, git

# Stands in for `gh pr create`: prints a pull request URL like gh does
FAKE_REVIEW_COMMAND = [sys.executable, "-c", "print('https://github.com/acme/app/pull/7')"]


def make_workflow(repo: StackedRepo, **kwargs: object) -> StackWorkflow:
	"""Build a workflow for the test repository with the fake review tool."""
	options = StackOptions(repo_path=repo.path, review_command=FAKE_REVIEW_COMMAND, **kwargs)
	return StackWorkflow(options)


def subjects(repo: StackedRepo, revision_range: str) -> list[str]:
	"""Commit subjects in a range, newest first."""
	output = repo.git("log", "--format=%s", revision_range)
	return output.splitlines() if output else []


@pytest.mark.integration
class TestRepoContext:
	"""Tests for pygit2-backed commit resolution."""

	def test_resolve_commit(self, stacked_repo: StackedRepo) -> None:
		"""Test refs resolve to full SHAs and subjects."""
		sha = stacked_repo.commit("a.txt", "one\n", "Add feature one\n\nLonger body.")
		context = GitRepoContext(stacked_repo.path)

		info = context.resolve_commit("main")

		assert info.sha == sha
		assert info.subject == "Add feature one"
		assert not info.is_root
		assert context.resolve_commit("main~1").is_root

	def test_unknown_ref(self, stacked_repo: StackedRepo) -> None:
		"""Test unknown refs raise GitError."""
		from stackpr.git.utils import GitError

		with pytest.raises(GitError, match="Unknown commit reference"):
			GitRepoContext(stacked_repo.path).resolve_commit("no-such-branch")

	def test_recent_commits(self, stacked_repo: StackedRepo) -> None:
		"""Test history is listed newest first and limited."""
		stacked_repo.commit("a.txt", "one\n", "Add feature one")
		stacked_repo.commit("b.txt", "two\n", "Add feature two")

		commits = GitRepoContext(stacked_repo.path).recent_commits("main", limit=2)

		assert [c.subject for c in commits] == ["Add feature two", "Add feature one"]


@pytest.mark.integration
class TestPublishCommit:
	"""End-to-end tests for publishing a commit."""

	def test_branch_holds_exactly_the_commit(self, stacked_repo: StackedRepo) -> None:
		"""Test the new branch is the remote main line plus the one commit."""
		stacked_repo.commit("a.txt", "one\n", "Add feature one")
		stacked_repo.commit("b.txt", "two\n", "Add feature two")
		main_before = stacked_repo.git("rev-parse", "main")

		result = make_workflow(stacked_repo).publish_commit("main~1")

		assert result.branch == "Add-feature-one"
		assert result.review is not None
		assert result.review.number == 7
		assert subjects(stacked_repo, "origin/main..Add-feature-one") == ["Add feature one"]
		assert stacked_repo.git("rev-parse", "Add-feature-one~1") == stacked_repo.git("rev-parse", "origin/main")
		assert stacked_repo.remote_git("rev-parse", "Add-feature-one") == stacked_repo.git("rev-parse", "Add-feature-one")
		assert stacked_repo.git("branch", "--show-current") == "main"
		assert stacked_repo.git("rev-parse", "main") == main_before

	def test_failed_transplant_restores_state(self, stacked_repo: StackedRepo) -> None:
		"""Test a conflicting commit leaves the repository as it was."""
		stacked_repo.commit("notes.txt", "draft\n", "Create notes")
		stacked_repo.commit("notes.txt", "final\n", "Edit notes")
		main_before = stacked_repo.git("rev-parse", "main")
		branches_before = stacked_repo.git("branch", "--list")

		with pytest.raises(TransplantError):
			make_workflow(stacked_repo).publish_commit("main")

		assert stacked_repo.git("branch", "--show-current") == "main"
		assert stacked_repo.git("rev-parse", "main") == main_before
		assert stacked_repo.git("branch", "--list") == branches_before
		assert stacked_repo.git("status", "--porcelain") == ""

	def test_existing_branch_refused(self, stacked_repo: StackedRepo) -> None:
		"""Test publishing the same commit twice is refused."""
		stacked_repo.commit("a.txt", "one\n", "Add feature one")
		workflow = make_workflow(stacked_repo)
		workflow.publish_commit()

		with pytest.raises(StackError, match="already exists"):
			workflow.publish_commit()

	def test_dirty_tree_refused(self, stacked_repo: StackedRepo) -> None:
		"""Test uncommitted changes to tracked files block publishing."""
		stacked_repo.commit("a.txt", "one\n", "Add feature one")
		(stacked_repo.path / "a.txt").write_text("changed\n", encoding="utf-8")

		with pytest.raises(DirtyWorkingTreeError):
			make_workflow(stacked_repo).publish_commit()

	def test_branch_starts_at_fetched_remote_main(self, stacked_repo: StackedRepo) -> None:
		"""Test the branch is cut from the remote main line as it is now, not as last fetched."""
		other = stacked_repo.remote.parent / "other"
		git("clone", "-q", str(stacked_repo.remote), str(other), cwd=stacked_repo.remote.parent)
		commit_file(other, "c.txt", "from elsewhere\n", "Land another change")
		git("push", "-q", "origin", "main", cwd=other)
		stacked_repo.commit("a.txt", "one\n", "Add feature one")

		make_workflow(stacked_repo).publish_commit()

		remote_main = stacked_repo.remote_git("rev-parse", "main")
		assert stacked_repo.git("rev-parse", "Add-feature-one~1") == remote_main
		assert stacked_repo.git("rev-parse", "origin/main") == remote_main
		assert subjects(stacked_repo, "origin/main..Add-feature-one") == ["Add feature one"]

	def test_unusable_branch_name_refused(self, stacked_repo: StackedRepo) -> None:
		"""Test a subject whose name git rejects fails before any branch is created."""
		stacked_repo.commit("Cargo.lock", "v2\n", "Regenerate Cargo.lock")
		branches_before = stacked_repo.git("branch", "--list")

		with pytest.raises(BranchNameError, match="Regenerate-Cargo.lock"):
			make_workflow(stacked_repo).publish_commit()

		assert stacked_repo.git("branch", "--list") == branches_before
		assert stacked_repo.git("branch", "--show-current") == "main"


@pytest.mark.integration
class TestUpdateBranch:
	"""End-to-end tests for updating a published branch."""

	def test_fix_is_pushed_and_squashed(self, stacked_repo: StackedRepo) -> None:
		"""Test the fix lands on the branch and is folded into its commit on main."""
		target = stacked_repo.commit("a.txt", "one\n", "Add feature one")
		stacked_repo.commit("b.txt", "two\n", "Add feature two")
		workflow = make_workflow(stacked_repo)
		workflow.publish_commit(target)
		stacked_repo.commit("a.txt", "one fixed\n", "Fix typo")

		result = workflow.update_branch(target)

		assert result.squashed
		assert subjects(stacked_repo, "origin/main..Add-feature-one") == ["Fix typo", "Add feature one"]
		assert stacked_repo.remote_git("rev-parse", "Add-feature-one") == stacked_repo.git("rev-parse", "Add-feature-one")
		assert subjects(stacked_repo, "origin/main..main") == ["Add feature two", "Add feature one"]
		assert stacked_repo.git("show", "main~1:a.txt") == "one fixed"
		assert stacked_repo.git("branch", "--show-current") == "main"
		assert stacked_repo.git("status", "--porcelain") == ""

	def test_indented_subject_is_squashed(self, stacked_repo: StackedRepo) -> None:
		"""Test a subject wrapped over indented lines is still folded into one commit."""
		target = stacked_repo.commit("a.txt", "one\n", "Add feature\n  one")
		workflow = make_workflow(stacked_repo)
		assert workflow.publish_commit().branch == "Add-feature-one"
		stacked_repo.commit("a.txt", "one fixed\n", "Fix typo")

		result = workflow.update_branch(target)

		assert result.squashed
		assert subjects(stacked_repo, "origin/main..main") == ["Add feature   one"]
		assert stacked_repo.git("show", "main:a.txt") == "one fixed"

	def test_each_run_adds_a_fix(self, stacked_repo: StackedRepo) -> None:
		"""Test two updates add two commits to the branch and keep one squashed commit on main."""
		stacked_repo.commit("a.txt", "one\n", "Add feature one")
		workflow = make_workflow(stacked_repo)
		workflow.publish_commit()

		stacked_repo.commit("a.txt", "one\ntwo\n", "First fix")
		workflow.update_branch("main~1")
		stacked_repo.commit("a.txt", "one\ntwo\nthree\n", "Second fix")
		workflow.update_branch("main~1")

		assert subjects(stacked_repo, "origin/main..Add-feature-one") == ["Second fix", "First fix", "Add feature one"]
		assert subjects(stacked_repo, "origin/main..main") == ["Add feature one"]
		assert stacked_repo.git("show", "main:a.txt") == "one\ntwo\nthree"

	def test_conflicting_fix_restores_state(self, stacked_repo: StackedRepo) -> None:
		"""Test a fix that does not apply to the branch leaves main untouched."""
		target = stacked_repo.commit("a.txt", "one\n", "Add feature one")
		workflow = make_workflow(stacked_repo)
		workflow.publish_commit(target)
		stacked_repo.commit("c.txt", "base\n", "Add c")
		stacked_repo.commit("c.txt", "edited\n", "Edit c")
		main_before = stacked_repo.git("rev-parse", "main")
		branch_before = stacked_repo.git("rev-parse", "Add-feature-one")

		with pytest.raises(TransplantError):
			workflow.update_branch(target)

		assert stacked_repo.git("branch", "--show-current") == "main"
		assert stacked_repo.git("rev-parse", "main") == main_before
		assert stacked_repo.git("rev-parse", "Add-feature-one") == branch_before
		assert stacked_repo.git("status", "--porcelain") == ""

	def test_unpublished_commit_refused(self, stacked_repo: StackedRepo) -> None:
		"""Test updating a commit without a branch is refused."""
		target = stacked_repo.commit("a.txt", "one\n", "Add feature one")
		stacked_repo.commit("a.txt", "one fixed\n", "Fix typo")

		with pytest.raises(StackError, match="stackpr new"):
			make_workflow(stacked_repo).update_branch(target)
