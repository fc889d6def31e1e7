"""Exceptions raised by the stacked branch workflow."""


class StackError(Exception):
	"""Base exception for stacked branch operations."""


class BranchNameError(StackError):
	"""A branch name could not be derived from a commit subject."""


class DirtyWorkingTreeError(StackError):
	"""Tracked files have uncommitted changes."""


class TransplantError(StackError):
	"""Cherry-picking a commit onto a branch failed and was rolled back."""


class SquashError(StackError):
	"""Folding a fixup commit into its target failed and was rolled back."""
