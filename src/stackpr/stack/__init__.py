"""Stacked branch workflow: one review branch per main-line commit."""

from stackpr.stack.errors import (
	BranchNameError,
	DirtyWorkingTreeError,
	SquashError,
	StackError,
	TransplantError,
)
from stackpr.stack.naming import derive_branch_name, sanitize_subject

__all__ = [
	"BranchNameError",
	"DirtyWorkingTreeError",
	"SquashError",
	"StackError",
	"TransplantError",
	"derive_branch_name",
	"sanitize_subject",
]
