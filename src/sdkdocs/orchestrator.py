"""
Documentation build orchestrator.

Coordinates a full documentation build: temporary package registry, package
cache cleanup, per-module generation, the root index page and shared asset
normalization.

Example:
    >>> ctx = BuildContext.load(Path("."))
    >>> report = DocsBuildOrchestrator.from_context(ctx).run()
    >>> report.index_page
    PosixPath('.../docs/index.html')
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from sdkdocs.assets import fix_assets
from sdkdocs.config import BuildContext
from sdkdocs.generator import DocGenerator, JazzyGenerator, build_module_docs
from sdkdocs.index_page import TemplateRenderer, build_index_page
from sdkdocs.logging import LogContext, get_logger
from sdkdocs.manifests import (
    PackageCache,
    PackageManifestReader,
    PodCache,
    PodspecReader,
    clean_package_cache,
)
from sdkdocs.paths import join_if_safe
from sdkdocs.proc import ProcessRunner
from sdkdocs.registry import PackageRegistry, ScriptPackageRegistry, temp_package_registry

logger = get_logger(__name__)


class BuildStage(str, Enum):
    """Progress of a build run. ``REGISTRY_DESTROYED`` is terminal."""

    INIT = "init"
    REGISTRY_CREATED = "registry_created"
    CACHE_CLEANED = "cache_cleaned"
    MODULES_BUILT = "modules_built"
    INDEX_BUILT = "index_built"
    ASSETS_FIXED = "assets_fixed"
    REGISTRY_DESTROYED = "registry_destroyed"


@dataclass
class BuildReport:
    """What a successful build produced."""

    registry_path: Path | None = None
    cleaned_packages: list[str] = field(default_factory=list)
    module_outputs: list[Path] = field(default_factory=list)
    index_page: Path | None = None
    assets: list[str] = field(default_factory=list)


class DocsBuildOrchestrator:
    """Run the documentation build steps in order.

    Architecture:
        ```
        DocsBuildOrchestrator.run()
              │
              ├──► PackageRegistry.create()            REGISTRY_CREATED
              │      try:
              ├──►   clean_package_cache()             CACHE_CLEANED
              ├──►   build_module_docs()               MODULES_BUILT
              ├──►   build_index_page()                INDEX_BUILT
              ├──►   fix_assets()                      ASSETS_FIXED
              │      finally:
              └──►   PackageRegistry.destroy()         REGISTRY_DESTROYED
        ```

    Guardrails:
        - Do NOT continue after a failed step
          ✅ Every error propagates; the registry is still removed
    """

    def __init__(
        self,
        ctx: BuildContext,
        registry: PackageRegistry,
        cache: PackageCache,
        reader: PackageManifestReader,
        generator: DocGenerator,
        renderer: TemplateRenderer | None = None,
    ):
        self.ctx = ctx
        self.registry = registry
        self.cache = cache
        self.reader = reader
        self.generator = generator
        self.renderer = renderer
        self.stage = BuildStage.INIT

    @classmethod
    def from_context(cls, ctx: BuildContext, runner: ProcessRunner | None = None) -> DocsBuildOrchestrator:
        """Wire the default CocoaPods/jazzy collaborators from ``ctx.settings``."""
        runner = runner or ProcessRunner()
        settings = ctx.settings
        return cls(
            ctx,
            registry=ScriptPackageRegistry(
                join_if_safe(ctx.project_root, settings.registry_script),
                runner=runner,
                cwd=ctx.project_root,
            ),
            cache=PodCache(runner, settings.pod_command),
            reader=PodspecReader(runner, settings.pod_command),
            generator=JazzyGenerator(settings.generator_command, runner),
        )

    def _advance(self, stage: BuildStage) -> None:
        logger.debug("build.stage", stage=stage.value)
        self.stage = stage

    def run(self) -> BuildReport:
        """Build all docs. Raises on the first failure."""
        ctx = self.ctx
        report = BuildReport()

        with LogContext(release_version=ctx.release_version):
            logger.info(
                "build.start",
                modules=len(ctx.enabled_modules),
                docs_root=str(ctx.docs_root),
            )
            try:
                with temp_package_registry(self.registry) as registry_path:
                    report.registry_path = registry_path
                    self._advance(BuildStage.REGISTRY_CREATED)

                    report.cleaned_packages = clean_package_cache(
                        ctx.project_root, self.reader, self.cache, ctx.settings.manifest_glob
                    )
                    self._advance(BuildStage.CACHE_CLEANED)

                    report.module_outputs = build_module_docs(ctx, self.generator, registry_path)
                    self._advance(BuildStage.MODULES_BUILT)

                    report.index_page = build_index_page(
                        ctx, self.reader, self.generator.version(), renderer=self.renderer
                    )
                    self._advance(BuildStage.INDEX_BUILT)

                    report.assets = fix_assets(ctx)
                    self._advance(BuildStage.ASSETS_FIXED)
            finally:
                if self.stage is not BuildStage.INIT:
                    self._advance(BuildStage.REGISTRY_DESTROYED)

            logger.info("build.done", modules=len(report.module_outputs), assets=len(report.assets))
        return report


__all__ = ["BuildStage", "BuildReport", "DocsBuildOrchestrator"]
