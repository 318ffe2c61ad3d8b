"""
Structured logging for SellerFees.

Both entry points route stdlib logging through structlog's
ProcessorFormatter, so module loggers created with
``logging.getLogger(__name__)`` need no changes:

- ``sellerfees serve`` writes to stdout, JSON outside development.
- The CLI writes to stderr so that reports and batch JSON stay on stdout.

Every event carries the static fields passed at setup (the active fee
schedule, ``rule_policy``), which lets calculations logged under
different schedules be told apart in aggregated logs.
"""

import logging
import sys
from typing import TextIO

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from sellerfees.config import AppEnv

# Request lines are logged by LoggingMiddleware.
QUIET_LOGGERS = ("uvicorn.access",)


def static_fields(fields: dict) -> Processor:
    """Processor that adds ``fields`` to every event without overwriting."""

    def add_fields(_logger: WrappedLogger, _method: str, event_dict: EventDict) -> EventDict:
        for key, value in fields.items():
            event_dict.setdefault(key, value)
        return event_dict

    return add_fields


def setup_logging(
    app_env: AppEnv,
    log_level: str = "INFO",
    log_format: str = "auto",
    stream: TextIO | None = None,
    static_context: dict | None = None,
) -> None:
    """
    Route all logging through one structlog-formatted root handler.

    Args:
        app_env: Current environment; picks the format when ``log_format``
            is ``"auto"``.
        log_level: Root logger level name.
        log_format: ``"json"``, ``"console"`` or ``"auto"``.
        stream: Destination of the root handler, stdout by default.
        static_context: Fields attached to every event, e.g.
            ``{"rule_policy": "2026-03-01"}``.
    """
    stream = stream or sys.stdout

    chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if static_context:
        chain.append(static_fields(dict(static_context)))

    structlog.configure(
        processors=[*chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=_renderer(app_env, log_format, stream),
            foreign_pre_chain=chain,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _renderer(app_env: AppEnv, log_format: str, stream: TextIO) -> Processor:
    if _should_use_json(app_env, log_format):
        return structlog.processors.JSONRenderer()
    # No ANSI colors when output is piped or captured
    isatty = getattr(stream, "isatty", None)
    return structlog.dev.ConsoleRenderer(colors=bool(isatty and isatty()))


def _should_use_json(app_env: AppEnv, log_format: str) -> bool:
    if log_format in ("json", "console"):
        return log_format == "json"
    return app_env != AppEnv.DEVELOPMENT
