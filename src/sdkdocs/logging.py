"""
Structured logging for sdkdocs.

Every component gets its logger from :func:`get_logger` and emits dotted
event names with key/value fields::

    logger.info("module.build.start", manifest="Foo.podspec", output="/repo/docs/foo")

The CLI calls :func:`configure_logging` once. Output goes to stderr (stdout
carries the command's own result line), rendered as JSON lines in CI and
with colors on a terminal.

Architecture:
    ::

        configure_logging(level, json_format, service)
            │
            ▼
        build_processors():
          TimeStamper(iso) ─► merge_contextvars ─► add_log_level
            ─► service metadata ─► JSONRenderer | ConsoleRenderer

Run-wide fields (the release version being built) are bound with
:class:`LogContext` so every event in the run carries them.

Tags:
    logging, structlog, sdkdocs
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger


def service_metadata(service: str) -> Processor:
    """Processor stamping ``service`` on every event that lacks one."""

    def _add_service(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", service)
        return event_dict

    return _add_service


def build_processors(json_format: bool, service: str, add_timestamp: bool = True) -> list[Processor]:
    """Processor chain ending in the JSON or console renderer."""
    processors: list[Processor] = []
    if add_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))
    processors += [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        service_metadata(service),
    ]

    if json_format:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    return processors


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    service: str = "sdkdocs",
    add_timestamp: bool = True,
) -> None:
    """Configure structlog for this process.

    Args:
        level: Minimum level name (``DEBUG``, ``INFO``, ...).
        json_format: JSON lines when True, console output when False.
            ``None`` picks JSON unless stderr is a terminal.
        service: Value of the ``service`` field on every event.
        add_timestamp: Prefix events with an ISO timestamp.
    """
    if json_format is None:
        json_format = not sys.stderr.isatty()

    structlog.configure(
        processors=build_processors(json_format, service, add_timestamp),
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level.upper())),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> Any:
    """Return a lazy structlog logger; ``name`` is logged as the ``logger_name`` field.

    The name travels as an initial value so module-level loggers still pick
    up the configuration installed later by :func:`configure_logging`.
    """
    if name is None:
        return structlog.get_logger()
    return structlog.get_logger(logger_name=name)


def bind_context(**fields: Any) -> None:
    structlog.contextvars.bind_contextvars(**fields)


def unbind_context(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


class LogContext:
    """Bind fields for the duration of a ``with`` block.

    Values shadowed by the block are restored on exit::

        with LogContext(release_version="24.1.0"):
            logger.info("build.start")
    """

    def __init__(self, **fields: Any):
        self.fields = fields
        self._tokens: dict[str, Any] = {}

    def __enter__(self) -> LogContext:
        self._tokens = dict(structlog.contextvars.bind_contextvars(**self.fields))
        return self

    def __exit__(self, *exc_info: Any) -> None:
        structlog.contextvars.reset_contextvars(**self._tokens)


__all__ = [
    "service_metadata",
    "build_processors",
    "configure_logging",
    "get_logger",
    "bind_context",
    "unbind_context",
    "clear_context",
    "LogContext",
]
