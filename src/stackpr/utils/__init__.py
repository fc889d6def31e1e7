"""Utility module for stackpr package."""

from .cli_utils import console, exit_with_error, loading_spinner
from .config_loader import ConfigError, ConfigLoader

__all__ = [
	"ConfigError",
	"ConfigLoader",
	"console",
	"exit_with_error",
	"loading_spinner",
]
