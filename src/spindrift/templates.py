"""Jinja2 template rendering for droplet pages and the site index."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    select_autoescape,
)

from spindrift.errors import RenderError, TemplateInitError

logger = logging.getLogger(__name__)

DROPLET_TEMPLATE = "droplet.html"
INDEX_TEMPLATE = "index.html"
INDEX_FILENAME = "index.html"


class TemplateRenderer:
    """Renders named templates to files.

    One renderer is shared by every render worker of a build. Renders are
    serialized behind a lock, so only one template is rendered at a time.
    """

    def __init__(
        self,
        template_dir: Path,
        *,
        droplet_template: str = DROPLET_TEMPLATE,
        index_template: str = INDEX_TEMPLATE,
    ) -> None:
        template_dir = Path(template_dir)
        if not template_dir.is_dir():
            raise TemplateInitError("Template directory not found", template_dir)

        # Converted content and image tags arrive as Markup and pass through.
        self._env = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(),
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        self._lock = threading.Lock()
        self.template_dir = template_dir
        self.droplet_template = droplet_template
        self.index_template = index_template

        for name in (droplet_template, index_template):
            try:
                self._env.get_template(name)
            except TemplateError as exc:
                raise TemplateInitError(
                    f"Could not load template {name!r} ({exc})", template_dir
                ) from exc

    def render(self, name: str, context: dict[str, Any], dest: Path) -> None:
        """Render ``name`` with ``context`` and write the result to ``dest``.

        Raises:
            RenderError: If the template fails for any reason, or the file
                cannot be written.
        """
        with self._lock:
            try:
                template = self._env.get_template(name)
                Path(dest).write_text(template.render(**context), encoding="utf-8")
            except TemplateError as exc:
                raise RenderError(f"Template {name!r} failed ({exc})", dest) from exc
            except OSError as exc:
                raise RenderError(f"Could not write output ({exc})", dest) from exc
            except Exception as exc:
                raise RenderError(f"Template {name!r} failed ({exc!r})", dest) from exc
        logger.debug("Rendered %s to %s", name, dest)

    def render_droplet(self, context: dict[str, Any], dest: Path) -> None:
        self.render(self.droplet_template, context, dest)

    def render_index(self, context: dict[str, Any], dest: Path) -> None:
        self.render(self.index_template, context, dest)
