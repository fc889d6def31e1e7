"""Type definitions for CLI parameters."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

VerboseFlag = Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose logging.")]

SaveLogFlag = Annotated[
	bool,
	typer.Option("--save-log", help="Enable logging to a file. Logs to logs/stackpr_{datetime}.log."),
]

ConfigOpt = Annotated[
	Path | None,
	typer.Option(
		"--config",
		"-c",
		help="Path to config file",
		dir_okay=False,
	),
]

RemoteOpt = Annotated[
	str | None,
	typer.Option("--remote", "-r", help="Remote to push to (overrides config)"),
]

BaseOpt = Annotated[
	str | None,
	typer.Option("--base", "-b", help="Main line branch (overrides config)"),
]
