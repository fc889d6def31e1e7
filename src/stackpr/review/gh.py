"""Review request (pull request) creation through an external CLI, GitHub's gh by default."""

from __future__ import annotations

import json
import logging
import re
import subprocess
from dataclasses import dataclass

from stackpr.stack.errors import StackError

logger = logging.getLogger(__name__)

URL_PATTERN = re.compile(r"https?://\S+")
NUMBER_PATTERN = re.compile(r"/(?:pull|pulls|merge_requests)/(\d+)/?$")


class ReviewToolError(StackError):
	"""The review tool is missing or failed."""


@dataclass
class ReviewRequest:
	"""Represents a review request such as a GitHub pull request."""

	branch: str
	base: str
	url: str | None = None
	number: int | None = None


def parse_review_output(output: str) -> tuple[str | None, int | None]:
	"""
	Extract the review request URL and number from the tool's output.

	The last URL printed wins; ``gh pr create`` prints it as its final line.

	"""
	urls = URL_PATTERN.findall(output)
	if not urls:
		return None, None
	url = urls[-1].rstrip(".,)")
	match = NUMBER_PATTERN.search(url)
	return url, int(match.group(1)) if match else None


def ensure_review_tool(command: list[str]) -> None:
	"""
	Check the review tool is installed.

	Args:
	    command: Review command; only its executable is checked

	Raises:
	    ReviewToolError: If the tool cannot be run

	"""
	if not command:
		msg = "No review command configured"
		raise ReviewToolError(msg)
	try:
		subprocess.run([command[0], "--version"], check=True, capture_output=True, text=True)  # noqa: S603
	except (subprocess.CalledProcessError, FileNotFoundError) as e:
		msg = f"Review tool '{command[0]}' is not installed or not in PATH."
		raise ReviewToolError(msg) from e


def create_review_request(
	branch: str,
	base: str,
	command: list[str],
	extra_args: list[str] | None = None,
	draft: bool = False,
) -> ReviewRequest:
	"""
	Create a review request for a pushed branch.

	Args:
	    branch: Head branch of the review request
	    base: Branch the change is proposed against
	    command: Review creation command, e.g. ``["gh", "pr", "create", "--fill"]``
	    extra_args: Arguments appended after the generated ones
	    draft: Whether to open the request as a draft

	Returns:
	    ReviewRequest with whatever URL and number the tool printed

	Raises:
	    ReviewToolError: If the tool fails

	"""
	cmd = [*command, "--head", branch, "--base", base]
	if draft:
		cmd.append("--draft")
	if extra_args:
		cmd.extend(extra_args)

	logger.debug("Running: %s", " ".join(cmd))
	try:
		result = subprocess.run(cmd, check=True, capture_output=True, text=True)  # noqa: S603
	except subprocess.CalledProcessError as e:
		msg = f"Failed to create review request for {branch}: {(e.stderr or '').strip()}"
		logger.error(msg)  # noqa: TRY400
		raise ReviewToolError(msg) from e
	except FileNotFoundError as e:
		msg = f"Review tool '{command[0]}' is not installed or not in PATH."
		raise ReviewToolError(msg) from e

	url, number = parse_review_output(result.stdout)
	if url is None:
		logger.warning("Review tool did not print a URL for %s", branch)
	return ReviewRequest(branch=branch, base=base, url=url, number=number)


def find_review_request(branch: str, base: str, tool: str = "gh") -> ReviewRequest | None:
	"""
	Look up an open review request for a branch.

	Returns:
	    ReviewRequest if found, None otherwise (including when the tool is unavailable)

	"""
	cmd = [tool, "pr", "list", "--head", branch, "--json", "number,url", "--jq", ".[0]"]
	try:
		result = subprocess.run(cmd, capture_output=True, text=True, check=False)  # noqa: S603
	except FileNotFoundError:
		logger.debug("Review tool %s not found; skipping lookup", tool)
		return None
	if result.returncode != 0 or not result.stdout.strip():
		return None

	try:
		data = json.loads(result.stdout)
	except json.JSONDecodeError:
		logger.debug("Unparseable review lookup output: %s", result.stdout)
		return None
	if not data:
		return None
	return ReviewRequest(branch=branch, base=base, url=data.get("url"), number=data.get("number"))
