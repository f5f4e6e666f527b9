"""
Command line interface for sdkdocs.

Usage::

    # Build docs into the repository's docs/ folder
    sdkdocs build

    # Build into a scratch directory (e.g. to check undocumented symbols
    # without touching the committed docs)
    sdkdocs build --docs-root-dir /tmp/docs-check

    python -m sdkdocs build -v
"""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer
from jinja2 import TemplateError
from rich.console import Console

from sdkdocs import __version__
from sdkdocs.config import BuildContext, get_settings
from sdkdocs.errors import DocsBuildError
from sdkdocs.logging import configure_logging, get_logger
from sdkdocs.orchestrator import DocsBuildOrchestrator

PROG = "sdkdocs"

console = Console()
err_console = Console(stderr=True)
logger = get_logger(__name__)

app = typer.Typer(
    name=PROG,
    help="Build the documentation of every SDK module plus a shared index page.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def info(message: str) -> None:
    console.print(f"[{PROG}] [INFO] {message}", markup=False, highlight=False, soft_wrap=True)


def die(message: str) -> NoReturn:
    """Print a single prefixed error line and exit non-zero."""
    err_console.print(f"[{PROG}] [ERROR] {message}", markup=False, highlight=False, soft_wrap=True)
    raise typer.Exit(code=1)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"{PROG} {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    json_logs: bool | None = typer.Option(
        None,
        "--json-logs/--console-logs",
        help="Force JSON or console log output (default: JSON unless stderr is a tty).",
    ),
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """sdkdocs: documentation builds for multi-module SDKs."""
    configure_logging(level="DEBUG" if verbose else "INFO", json_format=json_logs, service=PROG)


@app.command()
def build(
    docs_root_dir: Path | None = typer.Option(
        None,
        "--docs-root-dir",
        help="Generate docs to this directory instead of the repo's root directory.",
    ),
    project_root: Path = typer.Option(
        Path("."),
        "--project-root",
        "-p",
        exists=True,
        file_okay=False,
        help="Repository root holding modules.yaml, the doc tool config and VERSION.",
    ),
) -> None:
    """Generate docs for every module, the index page, and shared assets."""
    try:
        ctx = BuildContext.load(project_root, docs_root=docs_root_dir, settings=get_settings())
        report = DocsBuildOrchestrator.from_context(ctx).run()
    except (DocsBuildError, OSError, TemplateError) as exc:
        if isinstance(exc, DocsBuildError):
            logger.debug("build.failed", **exc.to_dict())
        die(str(exc))

    info(f"Built docs for {len(report.module_outputs)} module(s): {report.index_page}")


__all__ = ["app", "main", "build"]
