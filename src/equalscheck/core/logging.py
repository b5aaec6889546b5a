# src/equalscheck/core/logging.py
"""Structured logging for equalscheck.

Architecture:
    Core modules log through structlog loggers that wrap stdlib loggers
    in the "equalscheck" namespace. Each event is rendered into an
    ordinary stdlib LogRecord (message plus keyword fields as record
    extras), so nothing here ever touches structlog's global
    configuration or the root logger.

    Without configure_logging() the records simply propagate: stdlib's
    default WARNING threshold drops the DEBUG events core modules emit,
    and a host application that configured logging sees them through
    its own handlers.

    configure_logging() attaches one handler to the "equalscheck" logger.
    Its ProcessorFormatter runs the records through a structlog chain
    and renders JSON or console output.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.stdlib import ProcessorFormatter

from equalscheck.core.config import LoggingSettings

ROOT_LOGGER_NAME = "equalscheck"

# Turn a structlog event into logger.<level>(msg=event, extra=fields)
_RECORD_PROCESSORS: list[Any] = [
    structlog.stdlib.filter_by_level,
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.stdlib.render_to_log_kwargs,
]


def configure_logging(settings: LoggingSettings | None = None) -> logging.Handler:
    """Route equalscheck's log records to stdout.

    Replaces any handler a previous call installed on the "equalscheck"
    logger and stops propagation, so records are emitted exactly once.
    The root logger and structlog's global configuration are untouched.

    Args:
        settings: Level and output format. Defaults to LoggingSettings().

    Returns:
        The installed handler.
    """
    settings = settings or LoggingSettings()

    # Applied to every record before rendering
    pre_chain: list[Any] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.ExtraAdder(),
        structlog.processors.StackInfoRenderer(),
    ]

    if settings.json_output:
        final_processors: list[Any] = [
            ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        final_processors = [
            ProcessorFormatter.remove_processors_meta,
            structlog.dev.ConsoleRenderer(colors=False),
        ]

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        ProcessorFormatter(
            processors=final_processors,
            foreign_pre_chain=pre_chain,
        )
    )

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.handlers = [handler]
    package_logger.setLevel(getattr(logging, settings.level))
    package_logger.propagate = False
    return handler


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a bound logger for a module.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Bound structlog logger writing to the stdlib logger of that name.
    """
    logger: structlog.stdlib.BoundLogger = structlog.wrap_logger(
        logging.getLogger(name),
        processors=_RECORD_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
    )
    return logger
