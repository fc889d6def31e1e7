"""Console helpers shared by the stackpr commands."""

from __future__ import annotations

import contextlib
import logging
import os
from typing import TYPE_CHECKING

import typer

from stackpr.utils.log_setup import console, display_error_summary

if TYPE_CHECKING:
	from collections.abc import Iterator

logger = logging.getLogger(__name__)

# Environment variables under which no spinner is drawn
NO_SPINNER_ENV_VARS = ("PYTEST_CURRENT_TEST", "CI")


@contextlib.contextmanager
def loading_spinner(message: str = "Working...") -> Iterator[None]:
	"""
	Show a rich status spinner for the duration of the block.

	Args:
	    message: Text shown next to the spinner

	"""
	if any(os.environ.get(name) for name in NO_SPINNER_ENV_VARS):
		yield
		return

	with console.status(message):
		yield


def show_error(message: str, exception: Exception | None = None) -> None:
	"""
	Print an error summary.

	Args:
	    message: What went wrong
	    exception: The exception behind it; its text is added when it says more than message

	"""
	error_text = message
	if exception is not None:
		logger.debug("Error details", exc_info=exception)
		if str(exception) != message:
			error_text += f"\n\nDetails: {exception!s}"

	display_error_summary(error_text)


def exit_with_error(message: str, exit_code: int = 1, exception: Exception | None = None) -> None:
	"""
	Print an error summary and end the command.

	Raises:
	    typer.Exit: Always, with exit_code

	"""
	show_error(message, exception)
	raise typer.Exit(exit_code) from exception


def handle_keyboard_interrupt() -> None:
	"""End the command after Ctrl-C (or a cancelled prompt) with the SIGINT exit code."""
	console.print("\n[yellow]Cancelled.[/yellow]")
	raise typer.Exit(130)
