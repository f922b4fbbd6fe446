"""Structured logging setup for solidkern.

Kernel modules log through ``structlog.get_logger(__name__)`` and never
configure logging themselves; applications call
:func:`configure_logging` once, or :func:`configure_from_config` to
follow the kernel configuration.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, List

import structlog

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def configure_logging(
    level: str = "INFO",
    enable_colors: bool = True,
    enable_json: bool = False,
    extra_processors: List[Any] | None = None,
) -> None:
    """Configure structured logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        enable_colors: Enable colored output for console
        enable_json: Use JSON output format
        extra_processors: Additional structlog processors
    """
    numeric = LOG_LEVELS[level.upper()]

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=numeric,
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="ISO"),
    ]

    if extra_processors:
        processors.extend(extra_processors)

    if enable_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(colors=enable_colors and sys.stdout.isatty())
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric),
        logger_factory=structlog.WriteLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_from_config(config=None) -> None:
    """Configure logging from a :class:`~solidkern.config.KernelConfig`
    (the global one by default)."""
    from solidkern.config import get_config

    if config is None:
        config = get_config()
    configure_logging(level=config.log_level,
                      enable_colors=not config.log_json,
                      enable_json=config.log_json)


def get_logger(name: str = __name__) -> structlog.BoundLogger:
    return structlog.get_logger(name)
