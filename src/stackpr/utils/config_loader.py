"""
Configuration loader for stackpr.

This module provides functionality for loading and managing
configuration settings.

"""

import copy
import logging
import os
import shlex
from pathlib import Path
from typing import Any, TypeVar, cast

import yaml
from xdg.BaseDirectory import xdg_config_home

from stackpr.config import DEFAULT_CONFIG

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Minimum number of parts in an environment variable name (section + key)
MIN_ENV_VAR_PARTS = 2

ENV_PREFIX = "STACKPR_"

ConfigValue = str | int | float | bool | dict[str, Any] | list[Any] | None


class ConfigError(Exception):
	"""Exception raised for configuration errors."""


class ConfigLoader:
	"""
	Loads and manages configuration for stackpr.

	Configuration is built from the defaults, then the first config file
	found, then ``STACKPR_SECTION_KEY`` environment variables.

	"""

	_instance = None

	@classmethod
	def get_instance(cls, config_file: str | None = None, reload: bool = False) -> "ConfigLoader":
		"""
		Get the singleton instance of ConfigLoader.

		Args:
		        config_file: Path to configuration file (optional)
		        reload: Whether to reload config even if already loaded

		Returns:
		        ConfigLoader: Singleton instance

		"""
		if cls._instance is None or reload:
			cls._instance = cls(config_file)
		return cls._instance

	def __init__(self, config_file: str | None = None) -> None:
		"""
		Initialize the configuration loader.

		Args:
		        config_file: Path to configuration file (optional)

		"""
		self.config: dict[str, Any] = {}
		self.config_file = self._resolve_config_file(config_file)
		self.load_config()

	def _resolve_config_file(self, config_file: str | None = None) -> Path | None:
		"""
		Resolve the configuration file path.

		If a config file is specified, use that. Otherwise, look in standard locations:
		1. ./.stackpr.yml in the current directory
		2. $XDG_CONFIG_HOME/stackpr/config.yml
		3. ~/.stackpr/config.yml

		Args:
		        config_file: Explicitly provided config file path (optional)

		Returns:
		        Optional[Path]: Resolved config file path or None if no suitable file found

		"""
		if config_file:
			path = Path(config_file).expanduser().resolve()
			if not path.exists():
				logger.warning("Specified config file not found: %s", path)
			return path

		local_config = Path(".stackpr.yml")
		if local_config.exists():
			return local_config

		xdg_config_file = Path(xdg_config_home) / "stackpr" / "config.yml"
		if xdg_config_file.exists():
			return xdg_config_file

		legacy_config = Path.home() / ".stackpr" / "config.yml"
		if legacy_config.exists():
			return legacy_config

		return None

	def load_config(self) -> dict[str, Any]:
		"""
		Load configuration from file and apply environment variable overrides.

		Returns:
		        Dict[str, Any]: Loaded configuration

		Raises:
		        ConfigError: If configuration file exists but cannot be loaded

		"""
		self.config = copy.deepcopy(DEFAULT_CONFIG)

		if self.config_file:
			try:
				if self.config_file.exists():
					with self.config_file.open(encoding="utf-8") as f:
						file_config = yaml.safe_load(f)
					if file_config:
						if not isinstance(file_config, dict):
							msg = f"Configuration in {self.config_file} must be a mapping"
							raise ConfigError(msg)
						self._merge_configs(self.config, file_config)
					logger.info("Loaded configuration from %s", self.config_file)
				else:
					logger.warning("Configuration file not found: %s", self.config_file)
			except (OSError, yaml.YAMLError) as e:
				error_msg = f"Error loading configuration from {self.config_file}: {e}"
				logger.exception(error_msg)
				raise ConfigError(error_msg) from e

		self._apply_env_overrides()

		return self.config

	def _merge_configs(self, base: dict[str, Any], override: dict[str, Any]) -> None:
		"""
		Recursively merge two configuration dictionaries.

		Args:
		        base: Base configuration dictionary to merge into
		        override: Override configuration to apply

		"""
		for key, value in override.items():
			if isinstance(value, dict) and key in base and isinstance(base[key], dict):
				self._merge_configs(base[key], value)
			else:
				base[key] = value

	def _apply_env_overrides(self) -> None:
		"""Apply environment variable overrides to configuration."""
		for env_var, value in os.environ.items():
			if not env_var.startswith(ENV_PREFIX):
				continue
			parts = env_var.lower().split("_")[1:]
			if len(parts) < MIN_ENV_VAR_PARTS:
				continue
			section, key = parts[0], "_".join(parts[1:])

			section_config = self.config.get(section)
			current = section_config.get(key) if isinstance(section_config, dict) else None
			typed_value: ConfigValue
			if isinstance(current, list):
				typed_value = shlex.split(value)
			elif value.lower() in ("true", "yes", "1"):
				typed_value = True
			elif value.lower() in ("false", "no", "0"):
				typed_value = False
			else:
				try:
					typed_value = int(value)
				except ValueError:
					typed_value = value

			if not isinstance(section_config, dict):
				self.config[section] = {}

			self.config[section][key] = typed_value
			logger.debug("Applied environment override %s: %s", env_var, typed_value)

	def get(self, key: str, default: T = None) -> T:
		"""
		Get a configuration value using dot notation.

		Examples:
		        config.get("stack")
		        config.get("stack.main_branch")

		Args:
		        key: Configuration key, can include dots for nested access
		        default: Default value if key not found

		Returns:
		        T: Configuration value or default

		"""
		current: Any = self.config
		for part in key.split("."):
			if isinstance(current, dict) and part in current:
				current = current[part]
			else:
				return default

		return cast("T", current)

	def set(self, key: str, value: ConfigValue) -> None:
		"""
		Set a configuration value.

		Args:
		        key: Configuration key, can include dots for nested access
		        value: Value to set

		"""
		parts = key.split(".")
		current = self.config
		for part in parts[:-1]:
			if not isinstance(current.get(part), dict):
				current[part] = {}
			current = current[part]

		current[parts[-1]] = value

	def get_stack_config(self) -> dict[str, Any]:
		"""
		Get the stacked branch workflow configuration.

		Returns:
		        Dict[str, Any]: Stack configuration

		"""
		return self.get("stack", {})

	def get_review_config(self) -> dict[str, Any]:
		"""
		Get review request configuration.

		Returns:
		        Dict[str, Any]: Review configuration

		"""
		return self.get("review", {})
