"""CLI interface for spindrift."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from spindrift.config import CONFIG_FILENAME, load_config, merge_cli_overrides
from spindrift.errors import ConfigError, PathError, TemplateInitError
from spindrift.models import RunSummary
from spindrift.pipeline import DEFAULT_EXTENSIONS, build_site
from spindrift.templates import TemplateRenderer

app = typer.Typer(
    name="spindrift",
    help="Render YAML droplets into a static HTML site.",
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from spindrift import __version__

        console.print(f"spindrift {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """Spindrift - a small static site generator."""
    pass


def _setup_logging(verbose: bool, debug: bool) -> None:
    level = logging.WARNING
    if verbose:
        level = logging.INFO
    if debug:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _print_summary(summary: RunSummary) -> None:
    for path, message in summary.parse_failures:
        console.print(f"[red]Parse failed:[/red] {escape(str(path))}: {escape(message)}")
    for path, message in summary.render_failures:
        console.print(f"[red]Render failed:[/red] {escape(str(path))}: {escape(message)}")
    if summary.index_error:
        console.print(f"[red]Index failed:[/red] {escape(summary.index_error)}")

    table = Table(title="Build summary")
    table.add_column("Files")
    table.add_column("Count", justify="right")
    table.add_row("Ignored", str(summary.ignored))
    table.add_row("Failed", str(summary.failed))
    table.add_row("Succeeded", str(summary.succeeded))
    table.add_row("Total", str(summary.total))
    console.print(table)


@app.command()
def build(
    source: Annotated[
        Path,
        typer.Option(
            "--source",
            "-s",
            help="Directory containing droplet YAML files.",
        ),
    ],
    output: Annotated[
        Path,
        typer.Option(
            "--output",
            "-o",
            help="Directory the HTML files are written to.",
        ),
    ],
    config_path: Annotated[
        Path,
        typer.Option(
            "--config",
            "-c",
            help="Path to the project config file.",
        ),
    ] = Path(CONFIG_FILENAME),
    templates: Annotated[
        Path,
        typer.Option(
            "--templates",
            "-t",
            help="Directory containing droplet.html and index.html templates.",
        ),
    ] = Path("templates"),
    extensions: Annotated[
        Optional[list[str]],
        typer.Option(
            "--ext",
            "-e",
            help="Accepted droplet extension, dot optional (repeatable). Defaults to yaml and yml.",
        ),
    ] = None,
    workers: Annotated[
        Optional[int],
        typer.Option(
            "--workers",
            "-w",
            min=1,
            help="Maximum worker threads per stage.",
        ),
    ] = None,
    base_path: Annotated[
        Optional[str],
        typer.Option("--base-path", help="Override the configured base path."),
    ] = None,
    project_name: Annotated[
        Optional[str],
        typer.Option("--project-name", help="Override the configured project name."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log every discovered and rendered file."),
    ] = False,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Enable debug logging."),
    ] = False,
) -> None:
    """Build the site from a directory of droplets.

    Individual droplets that fail to parse or render are reported but do not
    change the exit code.
    """
    _setup_logging(verbose, debug)

    try:
        config = load_config(config_path)
    except ConfigError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1)
    config = merge_cli_overrides(config, base_path=base_path, project_name=project_name)

    try:
        renderer = TemplateRenderer(templates)
    except TemplateInitError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1)

    try:
        summary = build_site(
            source,
            output,
            config=config,
            renderer=renderer,
            extensions=extensions or DEFAULT_EXTENSIONS,
            max_workers=workers,
        )
    except PathError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1)

    _print_summary(summary)
    console.print(f"Output written to: {escape(str(output))}")
