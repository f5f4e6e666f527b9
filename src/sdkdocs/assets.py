"""Shared theme asset normalization.

The generator compiles the theme's assets (css, js, img, ...) into every
module's docs directory. After all modules and the index page are built,
one copy of each asset is moved to the shared ``docs/`` directory (where
``docs/index.html`` expects it), every other copy is deleted, and each
module directory gets a symlink back to the shared copy.

Afterwards exactly one real copy of each asset exists on disk::

    docs/
    ├── css/                    <- canonical copy
    ├── index.html
    ├── payments/css -> ../css
    └── terminal/css -> ../css
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from sdkdocs.config import BuildContext
from sdkdocs.errors import AssetError
from sdkdocs.logging import get_logger
from sdkdocs.paths import join_if_safe

logger = get_logger(__name__)


def remove_path(path: Path) -> None:
    """``rm -rf`` for a single path. Symlinks are removed, never followed."""
    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.exists():
        shutil.rmtree(path)


def _is_compiled_copy(path: Path) -> bool:
    return path.exists() and not path.is_symlink()


def theme_assets(assets_dir: Path) -> list[str]:
    """Names of the entries in the theme's assets directory, sorted."""
    if not assets_dir.is_dir():
        raise AssetError(f"Theme assets directory not found: {assets_dir}")
    return sorted(p.name for p in assets_dir.iterdir())


def fix_assets(ctx: BuildContext) -> list[str]:
    """Move one compiled copy of each theme asset to ``docs/`` and symlink the rest.

    The canonical copy comes from the first module (in ``modules.yaml``
    order) that has a compiled copy of the asset.

    Returns:
        Names of the normalized assets.

    Raises:
        AssetError: No module holds a compiled copy of a theme asset.
    """
    docs_dir = ctx.docs_dir
    module_dirs = [ctx.module_docs_dir(m) for m in ctx.enabled_modules]
    if not module_dirs:
        return []

    normalized: list[str] = []
    for asset_name in theme_assets(ctx.assets_dir):
        shared_path = join_if_safe(docs_dir, asset_name)
        compiled_paths = [join_if_safe(d, asset_name) for d in module_dirs]

        # Remove the copy left by a previous build
        remove_path(shared_path)

        source = next((p for p in compiled_paths if _is_compiled_copy(p)), None)
        if source is None:
            raise AssetError(
                f"No module docs contain the compiled theme asset `{asset_name}`.",
                context={"asset": asset_name},
            )

        docs_dir.mkdir(parents=True, exist_ok=True)
        shutil.move(str(source), str(shared_path))
        logger.debug("asset.moved", asset=asset_name, source=str(source))

        for module_dir, compiled_path in zip(module_dirs, compiled_paths):
            remove_path(compiled_path)
            module_dir.mkdir(parents=True, exist_ok=True)
            compiled_path.symlink_to(os.path.relpath(shared_path, module_dir))

        normalized.append(asset_name)

    logger.info("assets.fixed", assets=normalized, modules=len(module_dirs))
    return normalized


__all__ = ["remove_path", "theme_assets", "fix_assets"]
