"""Temporary package registry.

The documentation generator resolves a module's dependencies from a single
package source. To document several local development packages at once, a
throwaway registry holding all of the project's manifests is created by a
setup script before the build and removed after it.

Usage::

    registry = ScriptPackageRegistry(script=Path("ci_scripts/make_temp_spec_repo.sh"))
    with temp_package_registry(registry) as registry_path:
        ...  # build docs against file://<registry_path>
    # registry_path is gone here, whatever happened inside the block
"""

from __future__ import annotations

import shutil
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Protocol

from sdkdocs.errors import RegistryError
from sdkdocs.logging import get_logger
from sdkdocs.proc import ProcessRunner

logger = get_logger(__name__)


class PackageRegistry(Protocol):
    def create(self) -> Path: ...

    def destroy(self, path: Path) -> None: ...


class ScriptPackageRegistry:
    """Registry created by an external setup script.

    The script must exit 0 and print the registry's path as the last line of
    its output.
    """

    def __init__(
        self,
        script: Path,
        runner: ProcessRunner | None = None,
        cwd: Path | None = None,
    ):
        self.script = Path(script)
        self.runner = runner or ProcessRunner()
        self.cwd = cwd

    def create(self) -> Path:
        result = self.runner.run([str(self.script)], cwd=self.cwd)
        if not result.ok:
            raise RegistryError(
                f"Unable to create pod spec repo (status code: {result.returncode}).",
                returncode=result.returncode,
                stderr=result.stderr,
                context={"script": str(self.script)},
            )

        last_line = result.last_line()
        if not last_line:
            raise RegistryError(
                "Unable to create pod spec repo: setup script printed no path.",
                returncode=result.returncode,
                context={"script": str(self.script)},
            )

        path = Path(last_line)
        logger.info("registry.created", path=str(path))
        return path

    def destroy(self, path: Path) -> None:
        """Recursively remove ``path``. A missing path is not an error."""
        logger.info("registry.delete", path=str(path))
        if path.is_symlink() or path.is_file():
            path.unlink()
        elif path.exists():
            shutil.rmtree(path)


@contextmanager
def temp_package_registry(registry: PackageRegistry) -> Iterator[Path]:
    """Create a registry and guarantee its removal when the block exits.

    If creation fails there is nothing to remove and the error propagates.
    """
    path = registry.create()
    try:
        yield path
    finally:
        registry.destroy(path)


__all__ = ["PackageRegistry", "ScriptPackageRegistry", "temp_package_registry"]
