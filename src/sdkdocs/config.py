"""
Configuration loading for documentation builds.

Manifesto:
    Everything a build needs is read once, validated, and handed to each
    component as an explicit :class:`BuildContext`. Nothing is mutated
    after load and no component reads ambient globals.

Inputs (relative to the project root):

* ``modules.yaml``: list of SDK modules, each with a package manifest path
  (``podspec``) and an optional ``docs`` block.
* ``.jazzy.yaml``: the documentation tool's own configuration (theme,
  author, URLs). Passed verbatim to the generator and read for the index
  page.
* ``VERSION``: the release version that tags titles and source links.

Tool settings (file names, commands, product name) come from
:class:`BuildSettings`, overridable through ``SDKDOCS_*`` environment
variables.

Tags:
    sdkdocs, configuration, settings, pydantic, yaml
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from sdkdocs.errors import ConfigError, InvalidConfigError, MissingConfigError
from sdkdocs.paths import join_if_safe


class BuildSettings(BaseSettings):
    """Tool settings for a documentation build.

    All fields can be set via ``SDKDOCS_*`` environment variables (e.g.
    ``SDKDOCS_PRODUCT_NAME="Acme iOS SDKs"``).
    """

    model_config = SettingsConfigDict(
        env_prefix="SDKDOCS_",
        extra="ignore",
    )

    # ── Naming ───────────────────────────────────────────────────
    product_name: str = Field(default="SDK", description="Prefix of every generated docs title")

    # ── Input files ──────────────────────────────────────────────
    modules_file: str = Field(default="modules.yaml")
    doc_tool_config_file: str = Field(default=".jazzy.yaml")
    version_file: str = Field(default="VERSION")
    manifest_glob: str = Field(default="*.podspec")

    # ── External commands ────────────────────────────────────────
    registry_script: str = Field(default="ci_scripts/make_temp_spec_repo.sh")
    generator_command: str = Field(default="jazzy")
    pod_command: str = Field(default="pod")

    # ── Theme layout ─────────────────────────────────────────────
    page_template: str = Field(default="doc.html")
    index_template: str = Field(default="index.html")
    docs_dir_name: str = Field(default="docs")


@lru_cache(maxsize=1)
def get_settings() -> BuildSettings:
    """Load and cache :class:`BuildSettings` from the environment."""
    return BuildSettings()


class DocToolConfig(BaseModel):
    """The documentation tool's configuration file, read-only after load.

    Only the keys this tool reads are declared; everything else in the
    file is kept in ``model_extra`` and left for the generator itself.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    theme: str | None = None
    author: str = ""
    author_url: str = ""
    github_url: str | None = None

    def require(self, key: str) -> str:
        """Return a declared string setting, raising if it is unset or empty."""
        value = getattr(self, key, None)
        if not value:
            raise MissingConfigError(key, f"Missing required doc tool config `{key}`.")
        return str(value)


@dataclass(frozen=True)
class ModuleDocsConfig:
    """The ``docs`` block of a module. ``output`` is checked at build time."""

    output: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ModuleDocsConfig:
        data = dict(data)
        output = data.pop("output", None)
        return cls(output=None if output is None else str(output), extra=data)


@dataclass(frozen=True)
class ModuleDescriptor:
    """One SDK module from ``modules.yaml``."""

    manifest: str
    docs: ModuleDocsConfig | None = None

    @property
    def docs_enabled(self) -> bool:
        return self.docs is not None

    @property
    def output(self) -> str:
        """Docs output path as configured (``""`` when unset)."""
        if self.docs is None or self.docs.output is None:
            return ""
        return self.docs.output

    @classmethod
    def from_dict(cls, data: Any, index: int = 0) -> ModuleDescriptor:
        if not isinstance(data, dict):
            raise InvalidConfigError(f"modules[{index}]", data, "Each module must be a mapping.")

        manifest = data.get("podspec", data.get("manifest"))
        if not manifest:
            raise MissingConfigError(
                f"modules[{index}].podspec",
                f"Module #{index} is missing its package manifest path (`podspec`).",
            )

        docs = data.get("docs")
        if docs is not None and not isinstance(docs, dict):
            raise InvalidConfigError(f"modules[{index}].docs", docs, "`docs` must be a mapping.")

        return cls(
            manifest=str(manifest),
            docs=ModuleDocsConfig.from_dict(docs) if docs is not None else None,
        )


def _load_yaml(path: Path) -> Any:
    try:
        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f)
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found: {path}", cause=exc) from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Unable to parse {path}: {exc}", cause=exc) from exc
    except UnicodeDecodeError as exc:
        raise ConfigError(f"Unable to read {path}: not valid UTF-8 text.", cause=exc) from exc


def load_modules(path: Path) -> list[ModuleDescriptor]:
    """Load every module from the modules manifest, in file order.

    Raises:
        ConfigError: If the file is missing, malformed, or a module lacks
            its manifest path.
    """
    data = _load_yaml(path)
    if not isinstance(data, dict) or not isinstance(data.get("modules"), list):
        raise MissingConfigError("modules", f"{path} must contain a top-level `modules` list.")
    return [ModuleDescriptor.from_dict(m, i) for i, m in enumerate(data["modules"])]


def enabled_modules(modules: list[ModuleDescriptor]) -> list[ModuleDescriptor]:
    """Keep modules with a ``docs`` block, preserving their order."""
    return [m for m in modules if m.docs_enabled]


def load_doc_tool_config(path: Path) -> DocToolConfig:
    """Load the documentation tool's YAML configuration."""
    data = _load_yaml(path)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise InvalidConfigError(str(path), type(data).__name__, f"{path} must contain a mapping.")
    try:
        return DocToolConfig.model_validate(data)
    except ValidationError as exc:
        first = exc.errors()[0]
        key = ".".join(str(part) for part in first["loc"])
        raise InvalidConfigError(
            key,
            first.get("input"),
            f"Invalid doc tool config `{key}` in {path}: {first['msg']}.",
            cause=exc,
        ) from exc


def read_release_version(path: Path) -> str:
    """Read the release version from a plain-text version file."""
    try:
        version = path.read_text(encoding="utf-8").strip()
    except FileNotFoundError as exc:
        raise ConfigError(f"Version file not found: {path}", cause=exc) from exc
    except UnicodeDecodeError as exc:
        raise ConfigError(f"Unable to read version file {path}: not valid UTF-8 text.", cause=exc) from exc
    if not version:
        raise MissingConfigError("VERSION", f"Version file {path} is empty.")
    return version


@dataclass(frozen=True)
class BuildContext:
    """Everything a documentation build reads, loaded once.

    Attributes:
        project_root: Repository root holding the config files and manifests.
        docs_root: Directory generated docs are written under.
        settings: Tool settings.
        doc_tool: The documentation tool's configuration.
        modules: All modules from ``modules.yaml``, in file order.
        release_version: Contents of the version file.
    """

    project_root: Path
    docs_root: Path
    settings: BuildSettings
    doc_tool: DocToolConfig
    modules: list[ModuleDescriptor]
    release_version: str

    @classmethod
    def load(
        cls,
        project_root: Path,
        docs_root: Path | None = None,
        settings: BuildSettings | None = None,
    ) -> BuildContext:
        settings = settings or get_settings()
        project_root = Path(project_root).resolve()
        docs_root = Path(docs_root).resolve() if docs_root else project_root

        return cls(
            project_root=project_root,
            docs_root=docs_root,
            settings=settings,
            doc_tool=load_doc_tool_config(join_if_safe(project_root, settings.doc_tool_config_file)),
            modules=load_modules(join_if_safe(project_root, settings.modules_file)),
            release_version=read_release_version(join_if_safe(project_root, settings.version_file)),
        )

    @property
    def enabled_modules(self) -> list[ModuleDescriptor]:
        return enabled_modules(self.modules)

    @property
    def doc_tool_config_path(self) -> Path:
        return join_if_safe(self.project_root, self.settings.doc_tool_config_file)

    @property
    def docs_dir(self) -> Path:
        """Shared docs directory: holds ``index.html`` and canonical assets."""
        return join_if_safe(self.docs_root, self.settings.docs_dir_name)

    @property
    def theme_dir(self) -> Path:
        return join_if_safe(self.project_root, self.doc_tool.require("theme"))

    @property
    def templates_dir(self) -> Path:
        return join_if_safe(self.theme_dir, "templates")

    @property
    def assets_dir(self) -> Path:
        return join_if_safe(self.theme_dir, "assets")

    @property
    def docs_title(self) -> str:
        return docs_title(self.settings.product_name, self.release_version)

    def manifest_path(self, module: ModuleDescriptor) -> Path:
        return join_if_safe(self.project_root, module.manifest)

    def module_docs_dir(self, module: ModuleDescriptor) -> Path:
        """Absolute docs output directory of ``module`` under the docs root."""
        return join_if_safe(self.docs_root, module.output).resolve()


def docs_title(product_name: str, release_version: str) -> str:
    return f"{product_name} {release_version}"


__all__ = [
    "BuildSettings",
    "get_settings",
    "DocToolConfig",
    "ModuleDocsConfig",
    "ModuleDescriptor",
    "BuildContext",
    "load_modules",
    "enabled_modules",
    "load_doc_tool_config",
    "read_release_version",
    "docs_title",
]
