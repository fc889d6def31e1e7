"""Default configuration settings for the stackpr tool."""

DEFAULT_CONFIG = {
	# Stacked branch workflow configuration
	"stack": {
		# Branch commits are published from and folded back into
		"main_branch": "main",
		# Remote the review branches are pushed to
		"remote": "origin",
		# Prepended to every derived branch name, e.g. "user/"
		"branch_prefix": "",
		# Maximum length of the derived part of the branch name (0 for unlimited)
		"max_branch_length": 0,
		# Fetch the remote main line before creating a new branch
		"fetch": True,
		# Refuse to run with uncommitted changes to tracked files
		"require_clean": True,
	},
	# Review request (pull request) creation
	"review": {
		# Whether `new` creates a review request after pushing
		"enabled": True,
		# Command used to create the review request; --head/--base are appended
		"command": ["gh", "pr", "create", "--fill"],
		# Extra arguments appended after the generated ones
		"extra_args": [],
		# Open the review request as a draft
		"draft": False,
		# Check the review tool is installed before pushing anything
		"check_installed": True,
	},
}
