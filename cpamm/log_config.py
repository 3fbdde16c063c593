"""structlog setup shared by the CLI and embedding applications."""

from __future__ import annotations

import logging

import structlog


def configure_logging(verbose: bool = False, level: str = "INFO") -> None:
    """Configure structlog with console rendering.

    Args:
        verbose: If True, log at DEBUG regardless of level
        level: Log level name used when verbose is False
    """
    log_level = logging.DEBUG if verbose else logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        raise ValueError(f"Unknown log level: {level}")
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )
