"""Per-module documentation generation.

Runs the external documentation generator (jazzy) once per doc-enabled
module, in ``modules.yaml`` order. The first failure aborts the whole batch.

Architecture::

    for module in ctx.enabled_modules:
        │
        ├──► output empty? ──► MissingConfigError (generator never runs)
        │
        ├──► GenerationRequest(config, output, source prefix, title,
        │                      manifest, registry)
        │
        └──► DocGenerator.generate(request)
                  │
                  └──► status != 0 ──► GeneratorError
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from sdkdocs.config import BuildContext, ModuleDescriptor
from sdkdocs.errors import GeneratorError, InvalidConfigError, MissingConfigError
from sdkdocs.logging import get_logger
from sdkdocs.proc import CommandResult, ProcessRunner

logger = get_logger(__name__)


@dataclass(frozen=True)
class GenerationRequest:
    """Inputs of one generator invocation."""

    config_file: Path
    output: Path
    source_prefix: str
    title: str
    manifest: Path
    package_source: str


class DocGenerator(Protocol):
    def generate(self, request: GenerationRequest) -> CommandResult: ...

    def version(self) -> str: ...


class JazzyGenerator:
    """The jazzy command line tool."""

    def __init__(self, command: str = "jazzy", runner: ProcessRunner | None = None):
        self.command = command
        self.runner = runner or ProcessRunner()

    def command_args(self, request: GenerationRequest) -> list[str]:
        return [
            self.command,
            "--config", str(request.config_file),
            "--output", str(request.output),
            "--github-file-prefix", request.source_prefix,
            "--title", request.title,
            "--podspec", str(request.manifest),
            "--pod-sources", request.package_source,
        ]

    def generate(self, request: GenerationRequest) -> CommandResult:
        return self.runner.run(self.command_args(request))

    def version(self) -> str:
        """Return the bare version number (``jazzy version: 0.14.4`` -> ``0.14.4``)."""
        result = self.runner.run([self.command, "--version"])
        if not result.ok:
            raise GeneratorError(
                f"`{self.command} --version` failed with status code: {result.returncode}",
                returncode=result.returncode,
                stderr=result.stderr,
            )
        line = result.last_line()
        return line.rsplit(":", 1)[-1].strip() if line else ""


def source_prefix(github_url: str, release_version: str) -> str:
    """Source link prefix pinned to the release tag."""
    return f"{github_url.rstrip('/')}/tree/{release_version}"


def build_request(ctx: BuildContext, output: Path, manifest: Path, registry_path: Path) -> GenerationRequest:
    return GenerationRequest(
        config_file=ctx.doc_tool_config_path,
        output=output,
        source_prefix=source_prefix(ctx.doc_tool.require("github_url"), ctx.release_version),
        title=ctx.docs_title,
        manifest=manifest,
        package_source=f"file://{registry_path}",
    )


def check_output(ctx: BuildContext, module: ModuleDescriptor) -> None:
    """Reject a module output the generator must not write to.

    Raises:
        MissingConfigError: ``docs.output`` is empty.
        InvalidConfigError: ``docs.output`` is absolute or is the shared docs
            directory (which holds the index page and the canonical assets).
    """
    # An empty output resolves to the docs root itself
    if not module.output:
        raise MissingConfigError(
            "docs.output",
            "Missing required docs config `output`. Update modules.yaml.",
            context={"module": module.manifest},
        )
    if Path(module.output).is_absolute():
        raise InvalidConfigError(
            "docs.output",
            module.output,
            f"Docs config `output` of {module.manifest} must be relative to the docs root: {module.output}",
            context={"module": module.manifest},
        )
    if ctx.module_docs_dir(module) == ctx.docs_dir.resolve():
        raise InvalidConfigError(
            "docs.output",
            module.output,
            f"Docs config `output` of {module.manifest} cannot be the shared docs directory: {module.output}",
            context={"module": module.manifest},
        )


def build_module_docs(ctx: BuildContext, generator: DocGenerator, registry_path: Path) -> list[Path]:
    """Generate docs for every enabled module.

    Args:
        ctx: Loaded build context.
        generator: Documentation generator to invoke.
        registry_path: Temporary package registry the generator resolves from.

    Returns:
        Absolute output directory of each module, in module order.

    Raises:
        ConfigError: A module's ``docs.output`` is empty, absolute, or the
            shared docs directory. Checked for every module before the
            generator first runs.
        GeneratorError: The generator exited non-zero.
    """
    modules = ctx.enabled_modules
    for module in modules:
        check_output(ctx, module)

    outputs: list[Path] = []
    for module in modules:
        output = ctx.module_docs_dir(module)
        request = build_request(ctx, output, ctx.manifest_path(module), registry_path)

        logger.info("module.build.start", manifest=module.manifest, output=str(output))
        result = generator.generate(request)

        if not result.ok:
            raise GeneratorError(
                f"Executing jazzy failed with status code: {result.returncode}",
                returncode=result.returncode,
                stderr=result.stderr,
                context={"module": module.manifest},
            )

        logger.info("module.build.done", manifest=module.manifest)
        outputs.append(output)

    return outputs


__all__ = [
    "GenerationRequest",
    "DocGenerator",
    "JazzyGenerator",
    "source_prefix",
    "build_request",
    "check_output",
    "build_module_docs",
]
