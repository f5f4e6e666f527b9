"""Path helpers that refuse to build paths from empty segments.

An empty segment silently collapses a join onto its parent directory. Handed
to the documentation generator as an output directory, that parent is the
repository root, which the generator would then overwrite.
"""

from __future__ import annotations

import os
from pathlib import Path

from sdkdocs.errors import UnsafePathError


def join_if_safe(first: str | os.PathLike[str] | None, *others: str | os.PathLike[str] | None) -> Path:
    """Join path segments, raising if any segment is ``None`` or empty.

    Args:
        first: Leading path segment.
        *others: Remaining segments, joined in order.

    Returns:
        The joined path.

    Raises:
        UnsafePathError: If any segment is ``None`` or an empty string.

    Example:
        >>> join_if_safe("/repo", "docs", "index.html")
        PosixPath('/repo/docs/index.html')
        >>> join_if_safe("/repo", "")
        Traceback (most recent call last):
        ...
        sdkdocs.errors.UnsafePathError: Cannot join None or empty path segment.
    """
    segments = [first, *others]
    for segment in segments:
        if segment is None or os.fspath(segment) == "":
            raise UnsafePathError(
                "Cannot join None or empty path segment.",
                context={"segments": [None if s is None else os.fspath(s) for s in segments]},
            )
    return Path(*segments)  # type: ignore[arg-type]


__all__ = ["join_if_safe"]
