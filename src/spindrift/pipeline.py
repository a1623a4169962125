"""Build pipeline: source directory → droplets → rendered pages → index.

Each accepted source file is parsed on a worker thread. Every droplet that
parses is handed to a second pool that renders it through the shared
``TemplateRenderer``. Outcomes are collected on the calling thread in
completion order, which also keeps all counting single-threaded. One bad
file never aborts the build; it is logged, counted, and skipped.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from pathlib import Path

from spindrift.config import config_context
from spindrift.errors import PathError, RenderError, SpindriftError
from spindrift.markup import MarkupConverter
from spindrift.models import Droplet, RunSummary, SpindriftConfig
from spindrift.reader import read_droplet
from spindrift.templates import INDEX_FILENAME, TemplateRenderer

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS: tuple[str, ...] = ("yaml", "yml")


def build_site(
    source_dir: Path,
    output_dir: Path,
    *,
    config: SpindriftConfig,
    renderer: TemplateRenderer,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    max_workers: int | None = None,
    converter: MarkupConverter | None = None,
) -> RunSummary:
    """Render every droplet in ``source_dir`` plus the site index.

    Args:
        source_dir: Directory holding droplet source files. Not recursive.
        output_dir: Directory receiving the HTML files. Created if missing.
        config: Project configuration, used for the index context.
        renderer: Shared template renderer.
        extensions: Accepted file extensions. A leading dot is ignored.
        max_workers: Upper bound for each worker pool. None uses the
            executor default.
        converter: Markup converter shared by every render. A new one is
            built when omitted.

    Returns:
        The run summary. ``rendered`` is in completion order.

    Raises:
        PathError: If the source directory cannot be read or the output
            directory cannot be created.
    """
    converter = converter or MarkupConverter()
    summary = RunSummary()
    sources = scan_source_dir(source_dir, {ext.lstrip(".") for ext in extensions}, summary)

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise PathError("Could not create output directory", output_dir) from exc

    with (
        ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="spindrift-parse") as parse_pool,
        ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="spindrift-render") as render_pool,
    ):
        parse_futures: dict[Future[Droplet], Path] = {
            parse_pool.submit(read_droplet, path): path for path in sources
        }
        render_futures: dict[Future[Droplet], Path] = {}

        for future in as_completed(parse_futures):
            path = parse_futures[future]
            summary.found += 1
            try:
                droplet = future.result()
            except SpindriftError as exc:
                logger.warning("Failed to parse %s: %s", path, exc)
                summary.parse_failures.append((path, str(exc)))
                continue
            except Exception as exc:
                logger.exception("Unexpected error parsing %s", path)
                summary.parse_failures.append((path, f"Unexpected error ({exc!r})"))
                continue
            render_futures[
                render_pool.submit(render_droplet, droplet, output_dir, renderer, converter)
            ] = path

        seen_names: set[str] = set()
        for future in as_completed(render_futures):
            path = render_futures[future]
            try:
                droplet = future.result()
            except RenderError as exc:
                logger.warning("Failed to render %s: %s", path, exc)
                summary.render_failures.append((path, str(exc)))
                continue
            except Exception as exc:
                logger.exception("Unexpected error rendering %s", path)
                summary.render_failures.append((path, f"Unexpected error ({exc!r})"))
                continue
            droplet.set_file_name()
            if droplet.meta.path in seen_names:
                logger.warning("%s overwrote an earlier droplet at %s", path, droplet.meta.path)
            if droplet.meta.path == INDEX_FILENAME:
                logger.warning("%s will be overwritten by the site index", path)
            seen_names.add(droplet.meta.path)
            logger.info("Rendered %s -> %s", path, droplet.meta.path)
            summary.rendered.append(droplet)

    render_index(summary, output_dir, config=config, renderer=renderer)
    return summary


def scan_source_dir(source_dir: Path, extensions: set[str], summary: RunSummary) -> list[Path]:
    """List the files in ``source_dir`` whose extension is accepted.

    Sub-directories are skipped and counted in ``summary.directories``;
    rejected files are counted in ``summary.ignored``.

    Raises:
        PathError: If the directory cannot be enumerated.
    """
    try:
        entries = sorted(source_dir.iterdir())
    except OSError as exc:
        raise PathError("Could not read source directory", source_dir) from exc

    accepted: list[Path] = []
    for entry in entries:
        if entry.is_dir():
            logger.info("Skipping directory %s", entry)
            summary.directories += 1
            continue
        if entry.suffix[1:] not in extensions:
            logger.info("Ignoring %s (unsupported extension)", entry)
            summary.ignored += 1
            continue
        logger.info("Found %s", entry)
        accepted.append(entry)
    return accepted


def render_droplet(
    droplet: Droplet,
    output_dir: Path,
    renderer: TemplateRenderer,
    converter: MarkupConverter,
) -> Droplet:
    """Render one droplet to ``output_dir`` and hand it back."""
    dest = output_dir / droplet.file_name()
    renderer.render_droplet(droplet.as_context(converter), dest)
    return droplet


def render_index(
    summary: RunSummary,
    output_dir: Path,
    *,
    config: SpindriftConfig,
    renderer: TemplateRenderer,
) -> None:
    """Render the site index from the droplets in ``summary``.

    Failure is logged and recorded on the summary, not raised.
    """
    droplets = sorted(summary.rendered, key=_index_order)
    dest = output_dir / INDEX_FILENAME
    try:
        renderer.render_index(config_context(config, droplets), dest)
    except RenderError as exc:
        logger.error("Failed to render index: %s", exc)
        summary.index_error = str(exc)
        return
    summary.index_written = True
    logger.info("Rendered index with %d droplet(s) -> %s", len(droplets), dest)


def _index_order(droplet: Droplet) -> tuple[bool, int, str]:
    """Newest first, undated last, then by title."""
    post_date = droplet.meta.date
    return (post_date is None, -post_date.toordinal() if post_date else 0, droplet.title)
