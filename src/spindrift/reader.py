"""Reads droplet source documents from disk."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from spindrift.errors import FormatError, PathError
from spindrift.models import Droplet

logger = logging.getLogger(__name__)


def read_droplet(path: Path) -> Droplet:
    """Parse one YAML source file into a Droplet.

    Args:
        path: Path to the droplet document.

    Returns:
        The validated Droplet.

    Raises:
        PathError: If the file cannot be opened for reading.
        FormatError: If the file is not valid UTF-8 or YAML (impossible
            dates and runaway nesting included), or does not match the
            droplet structure.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as exc:
        raise PathError("Invalid path to droplet", path) from exc
    except (yaml.YAMLError, ValueError) as exc:
        raise FormatError(f"Invalid droplet format ({exc})", path) from exc
    except RecursionError as exc:
        raise FormatError("Invalid droplet format (nested too deeply)", path) from exc

    try:
        droplet = Droplet.model_validate(data)
    except ValidationError as exc:
        raise FormatError(
            f"Invalid droplet format ({exc.error_count()} validation error(s))", path
        ) from exc
    except RecursionError as exc:
        raise FormatError("Invalid droplet format (nested too deeply)", path) from exc

    logger.debug("Parsed droplet %r from %s", droplet.title, path)
    return droplet
