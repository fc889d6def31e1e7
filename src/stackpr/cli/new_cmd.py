"""Command for publishing a main-line commit as a new review branch."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated

import typer

from stackpr.cli.cli_types import BaseOpt, ConfigOpt, RemoteOpt, SaveLogFlag, VerboseFlag

if TYPE_CHECKING:
	from stackpr.stack.workflow import StackWorkflow

logger = logging.getLogger(__name__)

CommitArg = Annotated[
	str | None,
	typer.Argument(help="Commit to publish (defaults to the tip of the main line)"),
]

NoReviewFlag = Annotated[bool, typer.Option("--no-review", help="Push the branch without creating a review request")]

DraftFlag = Annotated[bool, typer.Option("--draft", help="Open the review request as a draft")]

NoFetchFlag = Annotated[bool, typer.Option("--no-fetch", help="Use the remote main line without fetching it first")]

InteractiveFlag = Annotated[
	bool,
	typer.Option("--interactive", "-i", help="Choose the commit from recent main line commits"),
]

# Number of commits offered by --interactive
MAX_CHOICES = 15


def register_command(app: typer.Typer) -> None:
	"""Register the new command with the CLI app."""
	app.command(name="new")(new_command)


def new_command(
	commit: CommitArg = None,
	remote: RemoteOpt = None,
	base: BaseOpt = None,
	no_review: NoReviewFlag = False,
	draft: DraftFlag = False,
	no_fetch: NoFetchFlag = False,
	interactive: InteractiveFlag = False,
	is_verbose: VerboseFlag = False,
	is_output_log: SaveLogFlag = False,
	config: ConfigOpt = None,
) -> None:
	"""
	Publish a commit as its own review branch.

	The branch is named after the commit subject, cut from the remote main
	line, receives exactly that commit, is pushed and gets a review request.
	You end up back on the main line either way.

	"""
	# Defer the workflow imports so --help stays fast
	from stackpr.cli.common import configure_logging, load_options, print_result
	from stackpr.git.utils import GitError
	from stackpr.stack.errors import StackError
	from stackpr.stack.workflow import StackWorkflow
	from stackpr.utils.cli_utils import exit_with_error, handle_keyboard_interrupt, loading_spinner
	from stackpr.utils.config_loader import ConfigError

	configure_logging(is_verbose, is_output_log)

	try:
		options = load_options(
			config,
			remote=remote,
			main_branch=base,
			review=False if no_review else None,
			draft=True if draft else None,
			fetch=False if no_fetch else None,
		)
		workflow = StackWorkflow(options)

		if interactive:
			commit = _select_commit(workflow)

		with loading_spinner(f"Publishing {commit or options.main_branch}..."):
			result = workflow.publish_commit(commit)
	except KeyboardInterrupt:
		handle_keyboard_interrupt()
	except (StackError, GitError, ConfigError) as e:
		logger.debug("new failed", exc_info=True)
		exit_with_error(str(e), exception=e)
	else:
		print_result(result, "Published")


def _select_commit(workflow: StackWorkflow) -> str:
	"""Ask which recent main line commit to publish."""
	import questionary

	commits = workflow.repo.recent_commits(workflow.options.main_branch, limit=MAX_CHOICES)
	choices = [
		questionary.Choice(title=f"{commit.short_sha} {commit.subject}", value=commit.sha) for commit in commits
	]
	selected = questionary.select("Which commit should be published?", choices=choices).ask()
	if selected is None:
		raise KeyboardInterrupt
	return selected
