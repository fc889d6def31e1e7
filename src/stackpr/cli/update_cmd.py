"""Command for pushing a fix to an existing review branch and squashing it locally."""

from __future__ import annotations

import logging
from typing import Annotated

import typer

from stackpr.cli.cli_types import BaseOpt, ConfigOpt, RemoteOpt, SaveLogFlag, VerboseFlag

logger = logging.getLogger(__name__)

CommitArg = Annotated[
	str,
	typer.Argument(help="The published commit whose branch receives the fix at the tip of the main line"),
]


def register_command(app: typer.Typer) -> None:
	"""Register the update command with the CLI app."""
	app.command(name="update")(update_command)


def update_command(
	commit: CommitArg,
	remote: RemoteOpt = None,
	base: BaseOpt = None,
	is_verbose: VerboseFlag = False,
	is_output_log: SaveLogFlag = False,
	config: ConfigOpt = None,
) -> None:
	"""
	Move the newest main line commit onto COMMIT's review branch.

	The fix is cherry-picked onto the branch and pushed. Back on the main
	line it is squashed into COMMIT with a non-interactive autosquash rebase.

	"""
	from stackpr.cli.common import configure_logging, load_options, print_result
	from stackpr.git.utils import GitError
	from stackpr.review.gh import find_review_request
	from stackpr.stack.errors import StackError
	from stackpr.stack.workflow import StackWorkflow
	from stackpr.utils.cli_utils import exit_with_error, handle_keyboard_interrupt, loading_spinner
	from stackpr.utils.config_loader import ConfigError

	configure_logging(is_verbose, is_output_log)

	try:
		options = load_options(config, remote=remote, main_branch=base)
		workflow = StackWorkflow(options)
		with loading_spinner(f"Updating the branch of {commit}..."):
			result = workflow.update_branch(commit)
	except KeyboardInterrupt:
		handle_keyboard_interrupt()
	except (StackError, GitError, ConfigError) as e:
		logger.debug("update failed", exc_info=True)
		exit_with_error(str(e), exception=e)
	else:
		if options.review and options.review_command:
			result.review = find_review_request(result.branch, options.main_branch, tool=options.review_command[0])
		print_result(result, "Updated")
