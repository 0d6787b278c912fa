"""
Configuration loader — swarmprep.yml → ProvisionConfig.

The file is optional. Without one, the built-in defaults apply and a
run does exactly what a bare ``swarmprep`` invocation does.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from swarmprep.core.models.config import ProvisionConfig

logger = logging.getLogger(__name__)

CONFIG_FILE = "swarmprep.yml"

# How many parent directories find_config_file() climbs
_MAX_SEARCH_DEPTH = 20


class ConfigError(Exception):
    """The configuration file is missing, unreadable or invalid."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Closest swarmprep.yml at or above ``start_dir`` (default: cwd)."""
    start = (start_dir or Path.cwd()).resolve()
    for directory in [start, *start.parents][:_MAX_SEARCH_DEPTH]:
        candidate = directory / CONFIG_FILE
        if candidate.is_file():
            return candidate
    return None


def _read_mapping(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")
    return data


def load_config(path: Path | None = None, *, search: bool = True) -> ProvisionConfig:
    """Load and validate the provisioning configuration.

    Args:
        path: Explicit config file. When None and ``search`` is set, the
            nearest swarmprep.yml above cwd is used if there is one.
        search: Look for a config file when no path is given.

    Returns:
        ProvisionConfig (defaults when no file applies).

    Raises:
        ConfigError: An explicit file is missing, or a file is invalid.
    """
    if path is None and search:
        path = find_config_file()
    if path is None:
        logger.debug("No %s found, using built-in defaults", CONFIG_FILE)
        return ProvisionConfig()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    data = _read_mapping(path)
    try:
        config = ProvisionConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid provisioning configuration in {path}: {e}") from e

    logger.info("Loaded provisioning config from %s", path)
    return config
