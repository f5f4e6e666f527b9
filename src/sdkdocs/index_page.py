"""
Root index page builder.

Renders ``docs/index.html``: a landing page listing every documented
module (name and summary from its package manifest) and linking to its
generated docs directory.

Manifesto:
    The index page reuses the doc theme's own page template so it looks
    like the rest of the docs. Only two extra variables are introduced:
    ``is_root_index`` (lets the theme hide per-module chrome) and the
    rendered module list passed as ``overview``.

Architecture:
    ```
    enabled modules ──► PackageManifestReader.read()
                              │
                              ▼
                  [{name, summary, directory}, ...]
                              │
                              ▼
                 <theme>/templates/index.html  (module list)
                              │
                              ▼  overview
                 <theme>/templates/doc.html    (page layout)
                              │
                              ▼
                     <docs_root>/docs/index.html
    ```

Guardrails:
    - Search is disabled; the generator's search index only exists inside
      each module's directory
    - Missing templates and unreadable manifests propagate as fatal errors

Tags:
    - index
    - template
    - jinja2
"""

from __future__ import annotations

import os
from collections.abc import Callable
from datetime import datetime
from pathlib import Path, PurePath
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from sdkdocs.config import BuildContext, ModuleDescriptor
from sdkdocs.errors import InvalidConfigError
from sdkdocs.logging import get_logger
from sdkdocs.manifests import PackageManifestReader
from sdkdocs.paths import join_if_safe

logger = get_logger(__name__)


class TemplateRenderer:
    """Render templates from a theme's template directory with Jinja2."""

    def __init__(self, template_dir: Path):
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, template_name: str, variables: dict[str, Any]) -> str:
        return self.env.get_template(template_name).render(**variables)


def module_directory(output: str, docs_dir_name: str = "docs") -> str:
    """Module docs directory relative to the shared docs folder.

    >>> module_directory("docs/payments/")
    'payments'
    """
    if PurePath(output).is_absolute():
        raise InvalidConfigError(
            "docs.output", output, f"Docs config `output` must be relative to the docs root: {output}"
        )
    return PurePath(os.path.relpath(output, docs_dir_name)).as_posix()


def module_records(
    ctx: BuildContext,
    reader: PackageManifestReader,
    modules: list[ModuleDescriptor] | None = None,
) -> list[dict[str, str]]:
    """One ``{name, summary, directory}`` record per enabled module, in order."""
    records = []
    for module in ctx.enabled_modules if modules is None else modules:
        spec = reader.read(ctx.manifest_path(module))
        records.append(
            {
                "name": spec.name,
                "summary": spec.summary,
                "directory": module_directory(module.output, ctx.settings.docs_dir_name),
            }
        )
    return records


def index_page_content(
    ctx: BuildContext,
    reader: PackageManifestReader,
    renderer: TemplateRenderer,
) -> str:
    """Render the module list shown in the body of the index page."""
    return renderer.render(ctx.settings.index_template, {"modules": module_records(ctx, reader)})


def copyright_notice(author: str, author_url: str, now: datetime) -> Markup:
    date = now.strftime("%Y-%m-%d")
    return Markup(
        '&copy; {year} <a class="link" href="{url}" target="_blank" rel="external">{author}</a>. '
        "All rights reserved. (Last updated: {date})"
    ).format(year=date[:4], url=author_url, author=author, date=date)


def index_page_variables(
    ctx: BuildContext,
    generator_version: str,
    overview: str,
    now: datetime,
) -> dict[str, Any]:
    """Layout variables the theme's page template expects."""
    title = ctx.docs_title
    return {
        "copyright": copyright_notice(ctx.doc_tool.author, ctx.doc_tool.author_url, now),
        "jazzy_version": generator_version,
        "objc_first": False,
        "language_stub": "swift",
        "docs_title": title,
        "module_version": ctx.release_version,
        "github_url": ctx.doc_tool.github_url or "",
        "name": title,
        # Search indexes only exist inside module directories
        "disable_search": True,
        "is_root_index": True,
        "overview": Markup(overview),
    }


def build_index_page(
    ctx: BuildContext,
    reader: PackageManifestReader,
    generator_version: str,
    renderer: TemplateRenderer | None = None,
    now: Callable[[], datetime] = datetime.now,
) -> Path:
    """Render and write ``docs/index.html`` under the docs root.

    Returns:
        Path of the written page. An existing page is overwritten.
    """
    logger.info("index.build.start")
    renderer = renderer or TemplateRenderer(ctx.templates_dir)

    overview = index_page_content(ctx, reader, renderer)
    variables = index_page_variables(ctx, generator_version, overview, now())
    html = renderer.render(ctx.settings.page_template, variables)

    output_file = join_if_safe(ctx.docs_dir, "index.html")
    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_text(html, encoding="utf-8")

    logger.info("index.build.done", path=str(output_file), size=len(html.encode("utf-8")))
    return output_file


__all__ = [
    "TemplateRenderer",
    "module_directory",
    "module_records",
    "index_page_content",
    "copyright_notice",
    "index_page_variables",
    "build_index_page",
]
