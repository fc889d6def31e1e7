"""
Logging setup for stackpr.

Console output goes through rich; an optional file handler captures
debug logs of every git and review tool invocation.

"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.rule import Rule
from rich.text import Text

console = Console()

FILE_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s"


def setup_logging(
	is_verbose: bool = False,
	log_to_console: bool = True,
	log_file_path: Path | str | None = None,
) -> None:
	"""
	Configure the root logger for a command run.

	Warnings and errors reach the console unless verbose mode lowers the
	level to DEBUG. A log file, when given, always records DEBUG.

	Args:
	    is_verbose: Log git commands and workflow steps to the console
	    log_to_console: Attach the rich console handler
	    log_file_path: File receiving a full debug log, or None

	"""
	level = logging.DEBUG if is_verbose else logging.WARNING

	root_logger = logging.getLogger()
	root_logger.setLevel(level)
	# Commands can run more than once per process (tests, standalone scripts)
	for handler in list(root_logger.handlers):
		root_logger.removeHandler(handler)

	if log_to_console:
		root_logger.addHandler(
			RichHandler(
				console=console,
				level=level,
				rich_tracebacks=True,
				show_time=is_verbose,
				show_path=is_verbose,
			)
		)

	if not log_file_path:
		return

	path = Path(log_file_path)
	try:
		path.parent.mkdir(parents=True, exist_ok=True)
		file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
	except OSError as e:
		display_warning_summary(f"Could not write the log file {path}: {e}")
		return

	file_handler.setLevel(logging.DEBUG)
	file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
	root_logger.setLevel(logging.DEBUG)
	root_logger.addHandler(file_handler)
	root_logger.debug("Logging to file: %s", path)


def _display_summary(title: str, style: str, message: str) -> None:
	console.print()
	console.print(Rule(Text(title, style=f"bold {style}"), style=style))
	console.print(f"\n{message}\n", markup=False)
	console.print(Rule(style=style))
	console.print()


def display_error_summary(error_message: str) -> None:
	"""Print an error between two red rules under an "Error Summary" title."""
	_display_summary("Error Summary", "red", error_message)


def display_warning_summary(warning_message: str) -> None:
	"""Print a warning between two yellow rules under a "Warning Summary" title."""
	_display_summary("Warning Summary", "yellow", warning_message)
