"""Package manifests and the package cache.

The package-manifest system (CocoaPods by default) is reached through two
narrow interfaces:

* :class:`PackageManifestReader` turns a manifest file into a
  :class:`PackageSpec` (name, version, summary).
* :class:`PackageCache` purges every cached version of a package.

The generator resolves development packages from the temporary registry,
but only if no stale copy of the same package sits in the local cache, so
the cache is purged for every manifest in the project root before any docs
are built.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from sdkdocs.errors import CommandError, ConfigError
from sdkdocs.logging import get_logger
from sdkdocs.proc import ProcessRunner

logger = get_logger(__name__)


@dataclass(frozen=True)
class PackageSpec:
    """Metadata of a package as declared in its manifest."""

    name: str
    version: str = ""
    summary: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any], source: Path | None = None) -> PackageSpec:
        name = data.get("name")
        if not name:
            raise ConfigError(f"Package manifest has no `name`: {source}")
        return cls(
            name=str(name),
            version=str(data.get("version") or ""),
            summary=str(data.get("summary") or ""),
        )


class PackageManifestReader(Protocol):
    def read(self, path: Path) -> PackageSpec: ...


class PackageCache(Protocol):
    def clean(self, name: str) -> None: ...


class PodspecReader:
    """Read CocoaPods manifests.

    ``*.podspec.json`` files are parsed directly. Ruby ``*.podspec`` files
    are evaluated by CocoaPods itself (``pod ipc spec``), which prints the
    specification as JSON.
    """

    def __init__(self, runner: ProcessRunner | None = None, pod_command: str = "pod"):
        self.runner = runner or ProcessRunner()
        self.pod_command = pod_command

    def read(self, path: Path) -> PackageSpec:
        path = Path(path)
        if not path.is_file():
            raise ConfigError(f"Package manifest not found: {path}")

        if path.name.endswith(".json"):
            with open(path, encoding="utf-8") as f:
                return PackageSpec.from_dict(json.load(f), path)

        result = self.runner.run([self.pod_command, "ipc", "spec", str(path)])
        if not result.ok:
            raise CommandError(
                f"Unable to read package manifest {path.name} (status code: {result.returncode})",
                returncode=result.returncode,
                stderr=result.stderr,
                context={"manifest": str(path)},
            )
        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Unable to parse package manifest {path.name}: {exc}", cause=exc) from exc
        return PackageSpec.from_dict(data, path)


class PodCache:
    """The local CocoaPods download cache."""

    def __init__(self, runner: ProcessRunner | None = None, pod_command: str = "pod"):
        self.runner = runner or ProcessRunner()
        self.pod_command = pod_command

    def clean(self, name: str) -> None:
        """Remove every cached version of ``name``. A clean cache is a no-op."""
        result = self.runner.run([self.pod_command, "cache", "clean", name, "--all"])
        if not result.ok:
            raise CommandError(
                f"Cleaning pod cache for {name} failed with status code: {result.returncode}",
                returncode=result.returncode,
                stderr=result.stderr,
                context={"package": name},
            )


def find_manifests(project_root: Path, pattern: str) -> list[Path]:
    """Manifest files directly in ``project_root`` (non-recursive), sorted."""
    return sorted(p for p in Path(project_root).glob(pattern) if p.is_file())


def clean_package_cache(
    project_root: Path,
    reader: PackageManifestReader,
    cache: PackageCache,
    pattern: str = "*.podspec",
) -> list[str]:
    """Purge the cached copies of every package manifested in the project root.

    Returns:
        Names of the packages whose cache was cleaned, in manifest order.
    """
    logger.info("cache.clean.start", pattern=pattern)
    cleaned: list[str] = []
    for manifest in find_manifests(project_root, pattern):
        spec = reader.read(manifest)
        cache.clean(spec.name)
        cleaned.append(spec.name)
        logger.debug("cache.clean.package", package=spec.name, manifest=manifest.name)
    logger.info("cache.clean.done", packages=len(cleaned))
    return cleaned


__all__ = [
    "PackageSpec",
    "PackageManifestReader",
    "PackageCache",
    "PodspecReader",
    "PodCache",
    "find_manifests",
    "clean_package_cache",
]
