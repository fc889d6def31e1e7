"""Git command wrappers for stackpr."""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)

# Editor used for non-interactive `rebase --interactive` runs
NOOP_EDITOR = "true"


class GitError(Exception):
	"""Custom exception for Git-related errors."""


def run_git_command(command: list[str], cwd: Path | None = None, env: dict[str, str] | None = None) -> str:
	"""
	Run a Git command and return its output.

	Args:
	    command: Git command to run
	    cwd: Working directory (optional)
	    env: Extra environment variables for the command (optional)

	Returns:
	    Command output as string

	Raises:
	    GitError: If the command fails

	"""
	logger.debug("Running: %s", " ".join(command))
	full_env = {**os.environ, **env} if env else None
	try:
		result = subprocess.run(  # noqa: S603
			command,
			cwd=cwd,
			env=full_env,
			capture_output=True,
			text=True,
			check=True,
		)
	except subprocess.CalledProcessError as e:
		error_msg = f"Git command failed: {' '.join(command)}\nError: {(e.stderr or '').strip()}"
		logger.error(error_msg)  # noqa: TRY400
		raise GitError(error_msg) from e
	except FileNotFoundError as e:
		error_msg = f"Command not found: {command[0]}"
		logger.error(error_msg)  # noqa: TRY400
		raise GitError(error_msg) from e
	else:
		return result.stdout


def _git_succeeds(command: list[str], cwd: Path | None = None) -> bool:
	"""Run a probing git command and report whether it exited with status 0."""
	logger.debug("Probing: %s", " ".join(command))
	result = subprocess.run(command, cwd=cwd, capture_output=True, text=True, check=False)  # noqa: S603
	return result.returncode == 0


def get_repo_root(path: Path | None = None) -> Path:
	"""
	Get the root directory of the Git repository.

	Raises:
	    GitError: If not in a Git repository

	"""
	try:
		result = run_git_command(["git", "rev-parse", "--show-toplevel"], path)
		return Path(result.strip())
	except GitError as e:
		msg = "Not in a Git repository"
		raise GitError(msg) from e


def get_current_branch(cwd: Path | None = None) -> str:
	"""
	Get the name of the current branch.

	Returns:
	    Name of the current branch, or an empty string on a detached HEAD

	Raises:
	    GitError: If git command fails

	"""
	try:
		return run_git_command(["git", "branch", "--show-current"], cwd).strip()
	except GitError as e:
		msg = "Failed to get current branch"
		raise GitError(msg) from e


def branch_exists(branch_name: str, include_remote: bool = False, remote: str = "origin", cwd: Path | None = None) -> bool:
	"""
	Check if a branch exists.

	Args:
	    branch_name: Name of the branch to check
	    include_remote: Whether to check the remote-tracking branch as well
	    remote: Remote name used when include_remote is set
	    cwd: Working directory (optional)

	Returns:
	    True if the branch exists, False otherwise

	"""
	if _git_succeeds(["git", "show-ref", "--verify", "--quiet", f"refs/heads/{branch_name}"], cwd):
		return True
	if include_remote:
		return _git_succeeds(
			["git", "show-ref", "--verify", "--quiet", f"refs/remotes/{remote}/{branch_name}"],
			cwd,
		)
	return False


def is_valid_branch_name(branch_name: str, cwd: Path | None = None) -> bool:
	"""Check whether git accepts branch_name as the name of a new branch."""
	return _git_succeeds(["git", "check-ref-format", "--branch", branch_name], cwd)


def checkout_branch(branch_name: str, cwd: Path | None = None) -> None:
	"""
	Checkout an existing branch.

	Raises:
	    GitError: If git command fails

	"""
	try:
		run_git_command(["git", "checkout", branch_name], cwd)
	except GitError as e:
		msg = f"Failed to checkout branch: {branch_name}"
		raise GitError(msg) from e


def create_branch(branch_name: str, start_point: str, cwd: Path | None = None) -> None:
	"""
	Create a new branch at start_point and switch to it.

	Args:
	    branch_name: Name of the branch to create
	    start_point: Commit or branch the new branch starts from
	    cwd: Working directory (optional)

	Raises:
	    GitError: If git command fails

	"""
	try:
		run_git_command(["git", "checkout", "-b", branch_name, start_point], cwd)
	except GitError as e:
		msg = f"Failed to create branch: {branch_name}"
		raise GitError(msg) from e


def delete_branch(branch_name: str, cwd: Path | None = None) -> None:
	"""
	Force-delete a local branch.

	Raises:
	    GitError: If git command fails

	"""
	try:
		run_git_command(["git", "branch", "-D", branch_name], cwd)
	except GitError as e:
		msg = f"Failed to delete branch: {branch_name}"
		raise GitError(msg) from e


def fetch(remote: str, branch: str, cwd: Path | None = None) -> None:
	"""
	Fetch a single branch from a remote.

	Raises:
	    GitError: If git command fails

	"""
	try:
		run_git_command(["git", "fetch", remote, branch], cwd)
	except GitError as e:
		msg = f"Failed to fetch {branch} from {remote}"
		raise GitError(msg) from e


def cherry_pick(ref: str, cwd: Path | None = None) -> None:
	"""
	Apply the change introduced by a single commit onto the current branch.

	Raises:
	    GitError: If the cherry-pick fails or stops on a conflict

	"""
	try:
		run_git_command(["git", "cherry-pick", ref], cwd)
	except GitError as e:
		msg = f"Failed to cherry-pick {ref}"
		raise GitError(msg) from e


def is_cherry_pick_in_progress(cwd: Path | None = None) -> bool:
	"""Check whether a cherry-pick is stopped waiting for resolution."""
	return _git_succeeds(["git", "rev-parse", "-q", "--verify", "CHERRY_PICK_HEAD"], cwd)


def abort_cherry_pick(cwd: Path | None = None) -> None:
	"""
	Abort an in-progress cherry-pick, restoring the pre-pick state.

	Does nothing when no cherry-pick is in progress.

	Raises:
	    GitError: If the abort itself fails

	"""
	if not is_cherry_pick_in_progress(cwd):
		logger.debug("No cherry-pick in progress, nothing to abort")
		return
	try:
		run_git_command(["git", "cherry-pick", "--abort"], cwd)
	except GitError as e:
		msg = "Failed to abort cherry-pick; run 'git cherry-pick --abort' manually"
		raise GitError(msg) from e


def push_branch(
	branch_name: str,
	remote: str = "origin",
	set_upstream: bool = False,
	force: bool = False,
	cwd: Path | None = None,
) -> None:
	"""
	Push a branch to a remote.

	Args:
	    branch_name: Name of the branch to push
	    remote: Remote to push to
	    set_upstream: Record the remote branch as upstream
	    force: Whether to force push
	    cwd: Working directory (optional)

	Raises:
	    GitError: If git command fails

	"""
	cmd = ["git", "push"]
	if set_upstream:
		cmd.append("--set-upstream")
	if force:
		cmd.append("--force-with-lease")
	cmd.extend([remote, branch_name])
	try:
		run_git_command(cmd, cwd)
	except GitError as e:
		msg = f"Failed to push branch: {branch_name}"
		raise GitError(msg) from e


def is_ancestor(ancestor: str, descendant: str, cwd: Path | None = None) -> bool:
	"""Check whether ancestor is reachable from descendant."""
	return _git_succeeds(["git", "merge-base", "--is-ancestor", ancestor, descendant], cwd)


def count_commits(revision_range: str, cwd: Path | None = None) -> int:
	"""
	Count the commits in a revision range such as ``base..HEAD``.

	Raises:
	    GitError: If git command fails

	"""
	return int(run_git_command(["git", "rev-list", "--count", revision_range], cwd).strip())


def is_working_tree_clean(cwd: Path | None = None) -> bool:
	"""
	Check that tracked files have no staged or unstaged changes.

	Untracked files are ignored.

	Raises:
	    GitError: If git command fails

	"""
	status = run_git_command(["git", "status", "--porcelain", "--untracked-files=no"], cwd)
	return not status.strip()


def amend_message(message: str, cwd: Path | None = None) -> None:
	"""
	Replace the message of the current HEAD commit without touching its content.

	Raises:
	    GitError: If git command fails

	"""
	try:
		run_git_command(["git", "commit", "--amend", "--only", "--no-verify", "-m", message], cwd)
	except GitError as e:
		msg = "Failed to amend commit message"
		raise GitError(msg) from e


def autosquash(target_sha: str, is_root: bool = False, cwd: Path | None = None) -> None:
	"""
	Fold fixup commits into their targets without opening an editor.

	The rewrite starts at the parent of target_sha, so only the target and
	the commits after it are replayed.

	Args:
	    target_sha: Commit the fixups are folded into
	    is_root: Whether target_sha has no parent
	    cwd: Working directory (optional)

	Raises:
	    GitError: If the rebase fails or stops on a conflict

	"""
	cmd = ["git", "rebase", "--interactive", "--autosquash"]
	cmd.append("--root" if is_root else f"{target_sha}^")
	env = {"GIT_SEQUENCE_EDITOR": NOOP_EDITOR, "GIT_EDITOR": NOOP_EDITOR}
	try:
		run_git_command(cmd, cwd, env=env)
	except GitError as e:
		msg = f"Failed to autosquash onto {target_sha}"
		raise GitError(msg) from e


def is_rebase_in_progress(cwd: Path | None = None) -> bool:
	"""Check whether a rebase is stopped waiting for resolution."""
	try:
		git_dir = Path(run_git_command(["git", "rev-parse", "--absolute-git-dir"], cwd).strip())
	except GitError:
		return False
	return (git_dir / "rebase-merge").exists() or (git_dir / "rebase-apply").exists()


def abort_rebase(cwd: Path | None = None) -> None:
	"""
	Abort an in-progress rebase. Does nothing when no rebase is in progress.

	Raises:
	    GitError: If the abort itself fails

	"""
	if not is_rebase_in_progress(cwd):
		logger.debug("No rebase in progress, nothing to abort")
		return
	try:
		run_git_command(["git", "rebase", "--abort"], cwd)
	except GitError as e:
		msg = "Failed to abort rebase; run 'git rebase --abort' manually"
		raise GitError(msg) from e
