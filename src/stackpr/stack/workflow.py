"""
Publishing main-line commits as review branches and folding fixes back.

``publish_commit`` copies one commit from the local main line onto a fresh
branch cut from the remote main line, pushes it and opens a review request.
``update_branch`` moves the newest main-line commit (a fix) onto that branch,
pushes it, then squashes the fix into the original commit on the main line.

"""

from __future__ import annotations

import contextlib
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from stackpr.git.repo import CommitInfo, GitRepoContext
from stackpr.git.utils import (
	GitError,
	abort_cherry_pick,
	abort_rebase,
	amend_message,
	autosquash,
	branch_exists,
	checkout_branch,
	cherry_pick,
	count_commits,
	create_branch,
	delete_branch,
	fetch,
	is_ancestor,
	is_valid_branch_name,
	is_working_tree_clean,
	push_branch,
)
from stackpr.review.gh import ReviewRequest, create_review_request, ensure_review_tool
from stackpr.stack.errors import (
	BranchNameError,
	DirtyWorkingTreeError,
	SquashError,
	StackError,
	TransplantError,
)
from stackpr.stack.naming import derive_branch_name

if TYPE_CHECKING:
	from collections.abc import Iterator
	from pathlib import Path

	from stackpr.utils.config_loader import ConfigLoader

logger = logging.getLogger(__name__)

FIXUP_PREFIX = "fixup! "


@dataclass
class StackOptions:
	"""Options shared by the stack operations."""

	main_branch: str = "main"
	remote: str = "origin"
	branch_prefix: str = ""
	max_branch_length: int = 0
	fetch: bool = True
	require_clean: bool = True
	review: bool = True
	review_command: list[str] = field(default_factory=lambda: ["gh", "pr", "create", "--fill"])
	review_extra_args: list[str] = field(default_factory=list)
	draft: bool = False
	check_review_tool: bool = True
	repo_path: Path | None = None

	@classmethod
	def from_config(cls, config_loader: ConfigLoader, **overrides: Any) -> StackOptions:  # noqa: ANN401
		"""
		Build options from loaded configuration.

		Args:
		    config_loader: Loaded configuration
		    **overrides: Values taking precedence over the configuration; None values are ignored

		Returns:
		    StackOptions

		"""
		stack = config_loader.get_stack_config()
		review = config_loader.get_review_config()
		options = cls(
			main_branch=stack.get("main_branch", "main"),
			remote=stack.get("remote", "origin"),
			branch_prefix=stack.get("branch_prefix") or "",
			max_branch_length=int(stack.get("max_branch_length") or 0),
			fetch=bool(stack.get("fetch", True)),
			require_clean=bool(stack.get("require_clean", True)),
			review=bool(review.get("enabled", True)),
			review_command=list(review.get("command") or ["gh", "pr", "create", "--fill"]),
			review_extra_args=list(review.get("extra_args") or []),
			draft=bool(review.get("draft", False)),
			check_review_tool=bool(review.get("check_installed", True)),
		)
		for key, value in overrides.items():
			if value is not None:
				setattr(options, key, value)
		return options


@dataclass
class StackResult:
	"""Outcome of a stack operation."""

	branch: str
	commit: CommitInfo
	review: ReviewRequest | None = None
	squashed: bool = False


class StackWorkflow:
	"""Runs the publish and update operations against one repository."""

	def __init__(self, options: StackOptions, repo: GitRepoContext | None = None) -> None:
		"""
		Initialize the workflow.

		Args:
		    options: Stack options
		    repo: Repository context; opened from options.repo_path when omitted

		"""
		self.options = options
		self.repo = repo or GitRepoContext(options.repo_path)
		self.cwd = options.repo_path

	def branch_name_for(self, commit: CommitInfo) -> str:
		"""
		Derive the review branch name for a commit.

		Raises:
		    BranchNameError: If git would not accept the derived name as a branch

		"""
		branch = derive_branch_name(
			commit.subject,
			prefix=self.options.branch_prefix,
			max_length=self.options.max_branch_length,
		)
		if not is_valid_branch_name(branch, self.cwd):
			msg = f"'{branch}', derived from the subject of {commit.short_sha}, is not a valid branch name"
			raise BranchNameError(msg)
		return branch

	def _ensure_clean(self) -> None:
		if self.options.require_clean and not is_working_tree_clean(self.cwd):
			msg = "Working tree has uncommitted changes; commit or stash them first"
			raise DirtyWorkingTreeError(msg)

	def _restore_main_line(self) -> None:
		"""Abort a stopped cherry-pick and switch back to the main line."""
		main = self.options.main_branch
		try:
			abort_cherry_pick(self.cwd)
			checkout_branch(main, self.cwd)
		except GitError:
			logger.exception("Could not return to %s; the repository needs manual attention", main)
		else:
			logger.info("Restored %s", main)

	def _discard_branch(self, branch: str) -> None:
		"""Return to the main line and delete a branch that never received its commit."""
		self._restore_main_line()
		try:
			delete_branch(branch, self.cwd)
		except GitError:
			logger.exception("Could not delete branch %s after failed cherry-pick", branch)

	@contextlib.contextmanager
	def _returning_to_main_line(self) -> Iterator[None]:
		"""Run a block on another branch, ending on the main line whatever happens."""
		try:
			yield
		except (GitError, StackError, KeyboardInterrupt):
			self._restore_main_line()
			raise
		checkout_branch(self.options.main_branch, self.cwd)

	def publish_commit(self, ref: str | None = None) -> StackResult:
		"""
		Publish a single main-line commit as its own review branch.

		Args:
		    ref: Commit to publish; defaults to the tip of the main line

		Returns:
		    StackResult for the new branch

		Raises:
		    TransplantError: If the commit does not apply to the remote main line
		    StackError: If the branch exists already or the review tool fails
		    GitError: If any other git command fails

		"""
		opts = self.options
		self._ensure_clean()

		commit = self.repo.resolve_commit(ref or opts.main_branch)
		branch = self.branch_name_for(commit)
		logger.info("Publishing %s (%s) as %s", commit.short_sha, commit.subject, branch)

		if branch_exists(branch, cwd=self.cwd):
			msg = f"Branch '{branch}' already exists; use 'stackpr update {commit.short_sha}' to add to it"
			raise StackError(msg)

		if opts.review and opts.check_review_tool:
			ensure_review_tool(opts.review_command)

		if opts.fetch:
			fetch(opts.remote, opts.main_branch, self.cwd)

		create_branch(branch, f"{opts.remote}/{opts.main_branch}", self.cwd)
		try:
			cherry_pick(commit.sha, self.cwd)
		except KeyboardInterrupt:
			self._discard_branch(branch)
			raise
		except GitError as e:
			self._discard_branch(branch)
			msg = f"Commit {commit.short_sha} does not apply cleanly to {opts.remote}/{opts.main_branch}"
			raise TransplantError(msg) from e

		review = None
		with self._returning_to_main_line():
			push_branch(branch, opts.remote, set_upstream=True, cwd=self.cwd)
			if opts.review:
				review = create_review_request(
					branch,
					opts.main_branch,
					opts.review_command,
					extra_args=opts.review_extra_args,
					draft=opts.draft,
				)

		logger.info("Published %s", branch)
		return StackResult(branch=branch, commit=commit, review=review)

	def update_branch(self, ref: str) -> StackResult:
		"""
		Push the newest main-line commit to the branch of an earlier commit and squash it there.

		The main-line tip is cherry-picked onto the branch derived from ref
		and pushed. Back on the main line the tip is marked as a fixup of ref
		and folded into it with a non-interactive autosquash rebase.

		Args:
		    ref: The original commit whose branch receives the fix

		Returns:
		    StackResult for the updated branch

		Raises:
		    TransplantError: If the fix does not apply to the branch
		    SquashError: If folding the fix into ref fails
		    StackError: If ref is not a published main-line commit
		    GitError: If any other git command fails

		"""
		opts = self.options
		main = opts.main_branch
		self._ensure_clean()

		target = self.repo.resolve_commit(ref)
		tip = self.repo.resolve_commit(main)
		if target.sha == tip.sha:
			msg = f"{ref} is the tip of {main}; commit the fix on top of it first"
			raise StackError(msg)
		if not is_ancestor(target.sha, tip.sha, self.cwd):
			msg = f"{ref} is not on {main}"
			raise StackError(msg)

		branch = self.branch_name_for(target)
		if not branch_exists(branch, cwd=self.cwd):
			msg = f"No branch '{branch}' for {target.short_sha}; publish it with 'stackpr new {target.short_sha}' first"
			raise StackError(msg)
		logger.info("Updating %s with %s (%s)", branch, tip.short_sha, tip.subject)

		checkout_branch(branch, self.cwd)
		with self._returning_to_main_line():
			try:
				cherry_pick(tip.sha, self.cwd)
			except GitError as e:
				msg = f"Commit {tip.short_sha} does not apply cleanly to {branch}"
				raise TransplantError(msg) from e
			push_branch(branch, opts.remote, cwd=self.cwd)

		self.squash_into(target)
		return StackResult(branch=branch, commit=target, squashed=True)

	def squash_into(self, target: CommitInfo) -> None:
		"""
		Fold the main-line tip into target.

		The tip is marked ``fixup! <full sha>``, which autosquash matches
		against commit ids. The rewritten range must end up exactly one
		commit shorter.

		Raises:
		    SquashError: If the rebase fails (it is aborted first) or leaves the fix in place

		"""
		rewritten = "HEAD" if target.is_root else f"{target.parents[0]}..HEAD"
		commits_before = count_commits(rewritten, self.cwd)
		amend_message(f"{FIXUP_PREFIX}{target.sha}", self.cwd)
		try:
			autosquash(target.sha, is_root=target.is_root, cwd=self.cwd)
		except (GitError, KeyboardInterrupt) as e:
			try:
				abort_rebase(self.cwd)
			except GitError:
				logger.exception("Could not abort the autosquash rebase")
			if isinstance(e, KeyboardInterrupt):
				raise
			raise SquashError(self._squash_failed_message(target)) from e

		commits_after = count_commits(rewritten, self.cwd)
		if commits_after != commits_before - 1:
			logger.error("Autosquash left %d of %d commits in %s", commits_after, commits_before, rewritten)
			raise SquashError(self._squash_failed_message(target))
		logger.info("Squashed fix into %s", target.short_sha)

	def _squash_failed_message(self, target: CommitInfo) -> str:
		return (
			f"Could not squash the fix into {target.short_sha}; it is left on "
			f"{self.options.main_branch} as a fixup commit"
		)
