"""Command-line interface package for stackpr."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

from stackpr import __version__

from .new_cmd import new_command
from .new_cmd import register_command as register_new_command
from .update_cmd import register_command as register_update_command
from .update_cmd import update_command

logger = logging.getLogger(__name__)

# Load environment variables from .env files
try:
	from dotenv import load_dotenv

	# Try to load from .env.local first, then fall back to .env
	env_local = Path(".env.local")
	if env_local.exists():
		load_dotenv(dotenv_path=env_local)
		logger.debug("Loaded environment variables from %s", env_local)
	else:
		env_file = Path(".env")
		if env_file.exists():
			load_dotenv(dotenv_path=env_file)
			logger.debug("Loaded environment variables from %s", env_file)
except ImportError as err:
	error_msg = "The 'python-dotenv' package is required but not installed. Please install it using: pip install python-dotenv"
	logger.exception(error_msg)
	raise RuntimeError(error_msg) from err

app = typer.Typer(
	help=f"stackpr - one review branch per commit on your main line\n\nVersion: {__version__}",
	no_args_is_help=True,
	context_settings={"help_option_names": ["-h", "--help"]},
)


def _version_callback(value: bool) -> None:
	"""Callback for --version option."""
	if value:
		typer.echo(f"stackpr version: {__version__}")
		raise typer.Exit


@app.callback()
def global_options(
	_version: Annotated[
		bool | None,
		typer.Option("--version", help="Show version and exit.", callback=_version_callback, is_eager=True),
	] = None,
) -> None:
	"""Publish local commits as stacked review branches."""


register_new_command(app)
register_update_command(app)

# Single-command apps behind the `newpr` and `updatepr` scripts
newpr_app = typer.Typer(context_settings={"help_option_names": ["-h", "--help"]})
newpr_app.command()(new_command)

updatepr_app = typer.Typer(context_settings={"help_option_names": ["-h", "--help"]})
updatepr_app.command()(update_command)


def main() -> int:
	"""Run the CLI application."""
	return app()


def newpr() -> int:
	"""Run the `new` command as a standalone script."""
	return newpr_app()


def updatepr() -> int:
	"""Run the `update` command as a standalone script."""
	return updatepr_app()


if __name__ == "__main__":
	sys.exit(main())
