"""
Shared pytest fixtures for sdkdocs tests.

This module provides:
- A throwaway SDK project (modules.yaml, .jazzy.yaml, VERSION, theme)
- Fakes for every external collaborator (registry, package cache,
  manifest reader, documentation generator, process runner)

The fake generator mimics jazzy closely enough for the asset and index
steps: it creates the output directory and compiles the theme's assets
into it.
"""

from __future__ import annotations

import shutil
from collections.abc import Callable
from pathlib import Path

import pytest
import structlog
import yaml

from sdkdocs.config import BuildContext, BuildSettings
from sdkdocs.errors import RegistryError
from sdkdocs.generator import GenerationRequest
from sdkdocs.manifests import PackageSpec
from sdkdocs.proc import CommandResult

DOC_TEMPLATE = """\
<!DOCTYPE html>
<html>
<head><title>{{ docs_title }}</title></head>
<body>
{% if not is_root_index %}
<nav class="module-chrome">{{ name }}</nav>
{% endif %}
{% if not disable_search %}
<form role="search"><input type="text" placeholder="Search documentation"></form>
{% endif %}
<section class="overview">{{ overview }}</section>
<footer>{{ copyright }} Generated by jazzy {{ jazzy_version }}</footer>
</body>
</html>
"""

INDEX_TEMPLATE = """\
<ul class="modules">
{% for module in modules %}
<li><a href="{{ module.directory }}/index.html">{{ module.name }}</a>: {{ module.summary }}</li>
{% endfor %}
</ul>
"""

SPECS = {
    "Foo.podspec": PackageSpec(name="Foo", version="1.2.3", summary="Does foo"),
    "Bar.podspec": PackageSpec(name="Bar", version="1.2.3", summary="Does bar"),
    "Baz.podspec": PackageSpec(name="Baz", version="1.2.3", summary="Does baz"),
}


# =============================================================================
# Fakes
# =============================================================================


class FakeRunner:
    """Records commands; answers through ``handler(argv) -> CommandResult``."""

    def __init__(self, handler: Callable[[tuple[str, ...]], CommandResult] | None = None):
        self.calls: list[tuple[str, ...]] = []
        self.handler = handler or (lambda argv: CommandResult(args=argv, returncode=0))

    def run(self, args, *, cwd=None, env=None) -> CommandResult:
        argv = tuple(str(a) for a in args)
        self.calls.append(argv)
        return self.handler(argv)


class FakeRegistry:
    def __init__(self, root: Path, fail: bool = False):
        self.path = root / "spec-repo"
        self.fail = fail
        self.destroyed: list[Path] = []

    def create(self) -> Path:
        if self.fail:
            raise RegistryError("Unable to create pod spec repo (status code: 1).", returncode=1)
        self.path.mkdir(parents=True)
        (self.path / "Foo.podspec.json").write_text("{}")
        return self.path

    def destroy(self, path: Path) -> None:
        self.destroyed.append(path)
        shutil.rmtree(path, ignore_errors=True)


class FakeCache:
    def __init__(self):
        self.cleaned: list[str] = []

    def clean(self, name: str) -> None:
        self.cleaned.append(name)


class FakeReader:
    def __init__(self, specs: dict[str, PackageSpec] | None = None):
        self.specs = SPECS if specs is None else specs
        self.read_paths: list[Path] = []

    def read(self, path: Path) -> PackageSpec:
        self.read_paths.append(path)
        if path.name not in self.specs:
            raise FileNotFoundError(path)
        return self.specs[path.name]


class FakeGenerator:
    """Writes a minimal docs tree plus compiled theme assets per request."""

    def __init__(self, assets_dir: Path | None = None, fail_on: str | None = None, returncode: int = 1):
        self.assets_dir = assets_dir
        self.fail_on = fail_on
        self.returncode = returncode
        self.requests: list[GenerationRequest] = []

    def generate(self, request: GenerationRequest) -> CommandResult:
        self.requests.append(request)
        if self.fail_on and request.manifest.name == self.fail_on:
            return CommandResult(args=("jazzy",), returncode=self.returncode, stderr="boom")

        # jazzy's `clean: true` wipes the output directory first
        if request.output.exists():
            shutil.rmtree(request.output)
        request.output.mkdir(parents=True)
        (request.output / "index.html").write_text(f"<h1>{request.title}</h1>")
        if self.assets_dir is not None:
            for asset in self.assets_dir.iterdir():
                target = request.output / asset.name
                if asset.is_dir():
                    shutil.copytree(asset, target, dirs_exist_ok=True)
                else:
                    shutil.copy2(asset, target)
        return CommandResult(args=("jazzy",), returncode=0)

    def version(self) -> str:
        return "0.14.4"


# =============================================================================
# Logging isolation
# =============================================================================


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo configure_logging() calls so no test logs to a closed stream."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


# =============================================================================
# Project fixtures
# =============================================================================


def write_modules(project_root: Path, modules: list[dict]) -> None:
    (project_root / "modules.yaml").write_text(yaml.safe_dump({"modules": modules}))


@pytest.fixture
def settings() -> BuildSettings:
    return BuildSettings(product_name="Acme SDKs")


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A minimal SDK repository with two documented modules and one without docs."""
    root = tmp_path / "repo"
    root.mkdir()

    write_modules(
        root,
        [
            {"podspec": "Foo.podspec", "docs": {"output": "docs/foo"}},
            {"podspec": "Bar.podspec", "docs": {"output": "docs/bar"}},
            {"podspec": "Baz.podspec"},
        ],
    )
    (root / ".jazzy.yaml").write_text(
        yaml.safe_dump(
            {
                "theme": "theme",
                "author": "Acme",
                "author_url": "https://acme.example",
                "github_url": "https://github.com/acme/sdk",
                "clean": True,
            }
        )
    )
    (root / "VERSION").write_text("24.1.0\n")
    for name in SPECS:
        (root / name).write_text(f"# {name}\n")

    templates = root / "theme" / "templates"
    templates.mkdir(parents=True)
    (templates / "doc.html").write_text(DOC_TEMPLATE)
    (templates / "index.html").write_text(INDEX_TEMPLATE)

    assets = root / "theme" / "assets"
    (assets / "css").mkdir(parents=True)
    (assets / "css" / "jazzy.css").write_text("body { margin: 0; }")
    (assets / "js").mkdir()
    (assets / "js" / "jazzy.js").write_text("// js")

    return root


@pytest.fixture
def ctx(project: Path, settings: BuildSettings) -> BuildContext:
    return BuildContext.load(project, settings=settings)


@pytest.fixture
def fake_reader() -> FakeReader:
    return FakeReader()


@pytest.fixture
def fake_cache() -> FakeCache:
    return FakeCache()


@pytest.fixture
def fake_generator(project: Path) -> FakeGenerator:
    return FakeGenerator(assets_dir=project / "theme" / "assets")


@pytest.fixture
def fake_registry(tmp_path: Path) -> FakeRegistry:
    return FakeRegistry(tmp_path)
