"""Project configuration loaded from spindrift.yaml, env vars, and CLI flags.

Loading order: YAML file → env vars → CLI flags.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from spindrift.errors import ConfigError
from spindrift.models import Droplet, SpindriftConfig

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "spindrift.yaml"

ENV_MAPPING: dict[str, str] = {
    "SPINDRIFT_AUTHOR": "author",
    "SPINDRIFT_COPYRIGHT": "copyright",
    "SPINDRIFT_DESCRIPTION": "description",
    "SPINDRIFT_PROJECT_NAME": "project_name",
    "SPINDRIFT_BASE_PATH": "base_path",
}


def load_config(path: str | Path = CONFIG_FILENAME) -> SpindriftConfig:
    """Load the project configuration.

    Args:
        path: Path to the YAML config file.

    Returns:
        The validated config with environment overrides applied.

    Raises:
        ConfigError: If the file is missing, unreadable, or malformed.
    """
    config_path = Path(path)
    data = _load_yaml(config_path)
    data = _apply_env_vars(data)

    try:
        config = SpindriftConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid spindrift config ({exc})", config_path) from exc

    logger.info("Loaded config from %s", config_path)
    return config


def merge_cli_overrides(config: SpindriftConfig, **cli_kwargs: object) -> SpindriftConfig:
    """Overlay explicitly-set CLI flags onto the config.

    Only overrides values where the CLI flag was explicitly provided
    (i.e., not None). Unknown keys are ignored.
    """
    data = config.model_dump()
    for key, value in cli_kwargs.items():
        if value is None or key not in SpindriftConfig.model_fields:
            continue
        data[key] = value
    return SpindriftConfig.model_validate(data)


def config_context(config: SpindriftConfig, droplets: list[Droplet]) -> dict[str, Any]:
    """Build the index template context.

    Optional project fields are only present when set. The project author
    and copyright are exposed to the index but never applied to droplets.
    """
    context: dict[str, Any] = {"droplets": droplets}
    if config.description is not None:
        context["description"] = config.description
    if config.author is not None:
        context["author"] = config.author
    if config.copyright is not None:
        context["copyright"] = config.copyright
    context["project_name"] = config.project_name
    context["base_path"] = config.base_path
    return context


def _load_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigError("Invalid path to spindrift config", path) from exc
    except (yaml.YAMLError, ValueError) as exc:
        raise ConfigError(f"Invalid spindrift config ({exc})", path) from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("Spindrift config must be a mapping", path)
    return data


def _apply_env_vars(data: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides to raw config data."""
    data = dict(data)
    for env_var, field in ENV_MAPPING.items():
        value = os.environ.get(env_var)
        if value is not None:
            data[field] = value
    return data
