"""Pure data models for spindrift.

All Pydantic models live here. No I/O; reading and rendering live in
``spindrift.reader``, ``spindrift.templates`` and ``spindrift.pipeline``.
"""

from __future__ import annotations

import datetime
from pathlib import Path
from typing import Any

from markupsafe import Markup
from pydantic import BaseModel, Field, PrivateAttr

from spindrift.markup import MarkupConverter

OUTPUT_SUFFIX = ".html"

# ---------------------------------------------------------------------------
# Droplets
# ---------------------------------------------------------------------------


class DropletMeta(BaseModel):
    """Metadata for a droplet."""

    tags: set[str] | None = None
    author: str
    date: datetime.date | None = None

    _path: str | None = PrivateAttr(default=None)

    @property
    def path(self) -> str | None:
        """Output filename, set once by ``Droplet.set_file_name``."""
        return self._path

    def set_path(self, path: str) -> None:
        if self._path is not None:
            raise ValueError(f"Droplet path already set to {self._path!r}")
        self._path = path


class DropletImage(BaseModel):
    """Image attached to a droplet."""

    src: str
    alt: str | None = None
    copyright: str | None = None


class Droplet(BaseModel):
    """A single post parsed from one source document."""

    meta: DropletMeta
    title: str
    image: DropletImage | None = None
    content: str | None = None

    def file_name(self) -> str:
        """Derive the output filename from the title.

        Each whitespace-separated word is lower-cased and stripped of every
        character that is not an ASCII letter or digit. Words that end up
        empty are kept, so ``"Hi !!! there"`` becomes ``"hi--there.html"``.
        """
        words = [
            "".join(c.lower() for c in word if c.isascii() and c.isalnum())
            for word in self.title.split()
        ]
        return "-".join(words) + OUTPUT_SUFFIX

    def set_file_name(self) -> None:
        self.meta.set_path(self.file_name())

    def content_to_html(self, converter: MarkupConverter | None = None) -> Markup | None:
        if self.content is None:
            return None
        return Markup((converter or MarkupConverter()).convert(self.content))

    def image_to_html(self) -> Markup | None:
        """Render the image as a single ``<img>`` tag, or None without an image.

        ``src`` and ``alt`` are attribute-escaped.
        """
        if self.image is None:
            return None
        attrs = [Markup('src="{}"').format(self.image.src)]
        if self.image.alt is not None:
            cleaned = "".join(self.image.alt.strip().split("\n"))
            attrs.append(Markup('alt="{}"').format(cleaned))
        return Markup('<img class="spindrift-img" {}/>\n').format(Markup(" ").join(attrs))

    def as_context(self, converter: MarkupConverter | None = None) -> dict[str, Any]:
        """Build the template context for this droplet.

        ``content`` and ``image`` are only present when the droplet has them.
        """
        context: dict[str, Any] = {}
        html_content = self.content_to_html(converter)
        if html_content is not None:
            context["content"] = html_content
        image_html = self.image_to_html()
        if image_html is not None:
            context["image"] = image_html
        context["meta"] = self.meta
        context["title"] = self.title
        return context


# ---------------------------------------------------------------------------
# Project configuration
# ---------------------------------------------------------------------------


class BuildOptions(BaseModel):
    """Options for extra index pages. Not used by the build yet."""

    build_posts_by_author: bool = False
    build_posts_by_tag: bool = True


class SpindriftConfig(BaseModel):
    """Project-wide configuration loaded from ``spindrift.yaml``."""

    author: str | None = None
    copyright: str | None = None
    description: str | None = None
    project_name: str
    base_path: str
    build_options: BuildOptions = Field(default_factory=BuildOptions)


# ---------------------------------------------------------------------------
# Run summary
# ---------------------------------------------------------------------------


class RunSummary(BaseModel):
    """Outcome of one build."""

    found: int = 0
    ignored: int = 0
    directories: int = 0
    parse_failures: list[tuple[Path, str]] = Field(default_factory=list)
    render_failures: list[tuple[Path, str]] = Field(default_factory=list)
    rendered: list[Droplet] = Field(default_factory=list)
    index_written: bool = False
    index_error: str | None = None

    @property
    def succeeded(self) -> int:
        return len(self.rendered)

    @property
    def failed(self) -> int:
        return self.found - self.succeeded

    @property
    def total(self) -> int:
        """Files scanned, excluding directories."""
        return self.found + self.ignored
