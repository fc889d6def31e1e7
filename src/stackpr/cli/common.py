"""Helpers shared by the stackpr commands."""

from __future__ import annotations

import datetime
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from rich.markup import escape

from stackpr.stack.workflow import StackOptions, StackResult
from stackpr.utils.cli_utils import console
from stackpr.utils.config_loader import ConfigLoader
from stackpr.utils.log_setup import setup_logging

if TYPE_CHECKING:
	from stackpr.git.repo import CommitInfo

logger = logging.getLogger(__name__)

LOG_DIR = Path("logs")


def configure_logging(is_verbose: bool, is_output_log: bool) -> None:
	"""Set up console logging and, when requested, a timestamped log file."""
	log_file_path: Path | None = None
	if is_output_log:
		current_time = datetime.datetime.now(tz=datetime.UTC).strftime("%Y-%m-%d_%H-%M-%S")
		log_file_path = LOG_DIR / f"stackpr_{current_time}.log"

	setup_logging(is_verbose=is_verbose, log_file_path=log_file_path)


def load_options(config_file: Path | None, **overrides: Any) -> StackOptions:  # noqa: ANN401
	"""
	Load configuration and build stack options.

	Args:
	    config_file: Explicit config file, or None to search the default locations
	    **overrides: Command line values; None means "use the configuration"

	Returns:
	    StackOptions

	Raises:
	    ConfigError: If the configuration file cannot be loaded

	"""
	config_loader = ConfigLoader.get_instance(config_file=str(config_file) if config_file else None, reload=True)
	return StackOptions.from_config(config_loader, **overrides)


def describe_commit(commit: CommitInfo) -> str:
	"""Format a commit for display."""
	return f"[bold]{commit.short_sha}[/bold] {escape(commit.subject)}"


def print_result(result: StackResult, action: str) -> None:
	"""Print the outcome of a stack operation."""
	console.print(f"[green]✓[/green] {action} [cyan]{escape(result.branch)}[/cyan] from {describe_commit(result.commit)}")
	if result.review is not None:
		if result.review.url:
			console.print(f"  Review request: {result.review.url}")
		else:
			console.print("  Review request created")
	if result.squashed:
		# The target was rewritten, so its old SHA is stale
		console.print(f"  Fix squashed into '{escape(result.commit.subject)}'")
