"""
Structured Logging Module
=========================

Provides structured logging using structlog with JSON output for CI runs
and colored console output for interactive use.

Usage:
    from avd_launcher.utils.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Starting emulator", avd="fastlane")
"""

import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import Processor

from avd_launcher import __version__
from avd_launcher.config import get_settings


def add_app_context(
    logger: logging.Logger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """
    Add application context to log entries.

    Args:
        logger: The wrapped logger object.
        method_name: The name of the log method called.
        event_dict: The event dictionary to process.

    Returns:
        The modified event dictionary.
    """
    event_dict["app"] = "avd-launcher"
    event_dict["version"] = __version__
    return event_dict


def setup_logging(
    level: Optional[str] = None,
    json_logs: Optional[bool] = None,
) -> None:
    """
    Configure structured logging for the launcher.

    Sets up structlog with processors depending on the output mode:
    - Console: Colored output with rich tracebacks
    - JSON: One object per line for CI log aggregation

    Args:
        level: Log level name. Defaults to the LOG_LEVEL setting.
        json_logs: Render JSON instead of console output.
            Defaults to ``not settings.log.debug``.
    """
    settings = get_settings()
    if level is None:
        level = settings.log.log_level
    if json_logs is None:
        json_logs = not settings.log.debug
    log_level = getattr(logging, level.upper())

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
    ]

    if json_logs:
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.rich_traceback,
            ),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: The name for the logger, typically __name__.

    Returns:
        A bound structlog logger instance.
    """
    return structlog.get_logger(name)


class LogContext:
    """
    Context manager for adding temporary context to logs.

    Usage:
        with LogContext(avd="fastlane"):
            logger.info("Starting emulator")  # Will include avd
    """

    def __init__(self, **kwargs: Any) -> None:
        self.context = kwargs

    def __enter__(self) -> "LogContext":
        """Enter the context, binding variables."""
        structlog.contextvars.bind_contextvars(**self.context)
        return self

    def __exit__(self, *args: Any) -> None:
        """Exit the context, unbinding variables."""
        structlog.contextvars.unbind_contextvars(*self.context.keys())
