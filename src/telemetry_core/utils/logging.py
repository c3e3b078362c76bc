"""
Logging configuration for telemetry-core.

Structured logging via structlog rendered through the stdlib root handler.
Every event carries ``telemetry.component``, derived from the ``component``
key when a call site binds one, so logs from the four monitors can be
filtered apart.
"""

import logging
import sys

import structlog
from structlog.typing import EventDict, WrappedLogger

from telemetry_core.exceptions import ConfigurationError

SERVICE_NAME = "telemetry-core"
LOG_FORMATS = ("json", "console")


def add_component_context(
    _logger: WrappedLogger,
    _method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Structlog processor that moves ``component`` to ``telemetry.component``."""
    if "component" in event_dict:
        event_dict["telemetry.component"] = event_dict.pop("component")
    else:
        event_dict.setdefault("telemetry.component", "engine")
    return event_dict


def configure_logging(log_level: str = "INFO", log_format: str = "json") -> None:
    """Configure structured logging for the application."""
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ConfigurationError(f"Unknown log level: {log_level}")
    if log_format not in LOG_FORMATS:
        raise ConfigurationError(f"Unknown log format: {log_format}")

    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            add_component_context,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("apscheduler").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    structlog.contextvars.bind_contextvars(service=SERVICE_NAME)
