"""Error taxonomy for spindrift builds.

Per-post errors (``PathError``, ``FormatError``, ``RenderError``) are caught
by the pipeline and counted. ``ConfigError`` and ``TemplateInitError`` abort
the run before any post is processed.
"""

from __future__ import annotations

from pathlib import Path


class SpindriftError(Exception):
    """Base error for spindrift. Carries the offending path when known."""

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = Path(path) if path is not None else None

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.message}: {self.path}"


class PathError(SpindriftError):
    """Raised when a file or directory cannot be opened."""


class FormatError(SpindriftError):
    """Raised when a document does not match the expected structure."""


class RenderError(SpindriftError):
    """Raised when a template rejects its context or the output cannot be written."""


class ConfigError(SpindriftError):
    """Raised when the project configuration is missing or malformed."""


class TemplateInitError(SpindriftError):
    """Raised when the template environment cannot be set up."""
