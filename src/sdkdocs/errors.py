"""
Structured error types for sdkdocs.

Every fatal condition in a documentation build is raised as a
``DocsBuildError`` subclass. Errors carry a category, structured context
and an optional chained cause so the CLI can report a single prefixed
line while logs keep the full picture.

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────┐
        │                     DocsBuildError                        │
        │            (category, context, cause)                     │
        ├──────────────────────────────────────────────────────────┤
        │  ConfigError          CommandError        AssetError     │
        │  (CONFIG)             (PROCESS)           (IO)           │
        │     │                    │                               │
        │  MissingConfigError   RegistryError                      │
        │  InvalidConfigError   GeneratorError                     │
        │  UnsafePathError                                          │
        └──────────────────────────────────────────────────────────┘

Guardrails:
    ❌ DON'T: Retry or downgrade any of these to a warning
    ✅ DO: Let them propagate to the CLI, which exits non-zero

    ❌ DON'T: Swallow the original exception
    ✅ DO: Pass it as cause= for error chaining

Tags:
    error-handling, exception-hierarchy, error-context, sdkdocs
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and reporting."""

    CONFIG = "CONFIG"
    PROCESS = "PROCESS"
    IO = "IO"
    INTERNAL = "INTERNAL"


class DocsBuildError(Exception):
    """
    Base exception for all documentation build errors.

    Subclasses set ``default_category`` to classify themselves. Context is
    a free-form mapping (module, path, command, ...) used for structured
    logging.

    Examples:
        >>> error = DocsBuildError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>

        >>> error = ConfigError("Bad config").with_context(file="modules.yaml")
        >>> error.context["file"]
        'modules.yaml'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context: dict[str, Any] = dict(context or {})
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> DocsBuildError:
        """
        Add context to this error (fluent API).

        Usage:
            raise ConfigError("Bad value").with_context(file="modules.yaml")
        """
        self.context.update(kwargs)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        if self.context:
            result["context"] = {k: str(v) for k, v in self.context.items()}
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(DocsBuildError):
    """
    Configuration error.

    Raised for missing or malformed input files and invalid settings.
    """

    default_category = ErrorCategory.CONFIG


class MissingConfigError(ConfigError):
    """Required configuration is missing."""

    def __init__(self, key: str, message: str | None = None, **kwargs: Any):
        self.key = key
        super().__init__(message or f"Missing required configuration: {key}", **kwargs)


class InvalidConfigError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: Any, message: str | None = None, **kwargs: Any):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid configuration for {key}: {value!r}", **kwargs)


class UnsafePathError(ConfigError):
    """A path join was attempted with an empty or absent segment."""


# =============================================================================
# PROCESS ERRORS
# =============================================================================


class CommandError(DocsBuildError):
    """An external command exited with a non-zero status."""

    default_category = ErrorCategory.PROCESS

    def __init__(
        self,
        message: str,
        *,
        returncode: int | None = None,
        stderr: str = "",
        **kwargs: Any,
    ):
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message, **kwargs)


class RegistryError(CommandError):
    """The temporary package registry could not be created."""


class GeneratorError(CommandError):
    """The documentation generator failed for a module."""


# =============================================================================
# ASSET ERRORS
# =============================================================================


class AssetError(DocsBuildError):
    """Shared theme assets could not be normalized."""

    default_category = ErrorCategory.IO


__all__ = [
    "ErrorCategory",
    "DocsBuildError",
    "ConfigError",
    "MissingConfigError",
    "InvalidConfigError",
    "UnsafePathError",
    "CommandError",
    "RegistryError",
    "GeneratorError",
    "AssetError",
]
