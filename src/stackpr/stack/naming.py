"""Branch name derivation from commit subjects."""

from __future__ import annotations

from stackpr.stack.errors import BranchNameError

TRIM_CHARS = ".-"


def _is_title_char(char: str) -> bool:
	return char.isascii() and (char.isalnum() or char in "._")


def sanitize_subject(text: str) -> str:
	"""
	Turn a commit subject into a string safe for branch and file names.

	Follows git's ``%f`` placeholder: ASCII letters, digits, ``.`` and ``_``
	are kept, any run of other characters becomes a single ``-``, repeated
	dots collapse to one, and trailing ``.`` or ``-`` are trimmed.

	Args:
	    text: Commit subject (may span several lines)

	Returns:
	    The sanitized subject, possibly empty

	"""
	out: list[str] = []
	pending_separator = False
	for char in text:
		if not _is_title_char(char):
			pending_separator = True
			continue
		if char == "." and out and out[-1] == "." and not pending_separator:
			continue
		if pending_separator and out:
			out.append("-")
		pending_separator = False
		out.append(char)
	return "".join(out).rstrip(TRIM_CHARS)


def derive_branch_name(subject: str, prefix: str = "", max_length: int = 0) -> str:
	"""
	Derive a review branch name from a commit subject.

	Args:
	    subject: Commit subject line
	    prefix: String prepended to the derived name, e.g. ``"user/"``
	    max_length: Maximum length of the derived part (0 for unlimited)

	Returns:
	    The branch name

	Raises:
	    BranchNameError: If the subject contains nothing usable

	"""
	name = sanitize_subject(subject)
	if max_length > 0:
		name = name[:max_length].rstrip(TRIM_CHARS)
	if not name:
		msg = f"Cannot derive a branch name from commit subject {subject!r}"
		raise BranchNameError(msg)
	return f"{prefix}{name}"
