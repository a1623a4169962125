"""Spindrift - render YAML droplets into a static HTML site."""

from spindrift.errors import (
    ConfigError,
    FormatError,
    PathError,
    RenderError,
    SpindriftError,
    TemplateInitError,
)
from spindrift.markup import MarkupConverter
from spindrift.models import Droplet, DropletImage, DropletMeta, RunSummary, SpindriftConfig
from spindrift.pipeline import build_site

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "Droplet",
    "DropletImage",
    "DropletMeta",
    "FormatError",
    "MarkupConverter",
    "PathError",
    "RenderError",
    "RunSummary",
    "SpindriftConfig",
    "SpindriftError",
    "TemplateInitError",
    "build_site",
]
