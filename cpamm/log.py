"""structlog setup for processes that embed the pool."""

import logging
import os

import structlog

DEFAULT_LOG_LEVEL = "INFO"


def configure_logging(level: str | int | None = None) -> None:
    """Configure structlog with a console renderer.

    Args:
        level: Log level name or number. Defaults to the CPAMM_LOG_LEVEL
            environment variable, then INFO.

    Raises:
        ValueError: If the level name is unknown
    """
    if level is None:
        level = os.environ.get("CPAMM_LOG_LEVEL", DEFAULT_LOG_LEVEL)
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )
