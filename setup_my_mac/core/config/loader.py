"""
Configuration loader — reads config.toml into domain models.

This is the only entry point for loading configuration. It parses
TOML (or YAML for ``.yml``/``.yaml`` files), validates against the
Pydantic schema, and returns the typed config together with the
directory that relative paths inside it resolve against.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from setup_my_mac.core.errors import SetupError
from setup_my_mac.core.models.config import Config

logger = logging.getLogger(__name__)

# Default config filename
DEFAULT_CONFIG_FILE = "config.toml"

_YAML_SUFFIXES = frozenset({".yml", ".yaml"})


class ConfigError(SetupError):
    """Raised when the configuration file is missing or invalid."""


@dataclass(frozen=True)
class ConfigBundle:
    """A loaded configuration plus where it came from."""

    config: Config
    path: Path
    root: Path


def load_config(path: Path) -> ConfigBundle:
    """Load and validate a configuration file.

    Args:
        path: Path to the TOML (or YAML) file.

    Returns:
        ConfigBundle whose ``root`` is the file's parent directory.

    Raises:
        ConfigError: If the file cannot be read or is invalid.
    """
    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Failed to read {path}: {e}") from e

    data = _parse(raw, path)

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping in {path}, got {type(data).__name__}")

    try:
        config = Config.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    logger.info(
        "Loaded config for %s (%d dotfiles, homebrew %s)",
        config.system.primary_user,
        len(config.user.dotfiles),
        "on" if config.homebrew.enable else "off",
    )
    return ConfigBundle(config=config, path=path, root=config_root(path))


def config_root(path: Path) -> Path:
    """Directory that relative paths in the config resolve against."""
    return path.parent


def _parse(raw: str, path: Path) -> Any:
    if path.suffix.lower() in _YAML_SUFFIXES:
        try:
            return yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    try:
        return tomllib.loads(raw)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e
