"""structlog bootstrap: level filtering from LOG_LEVEL."""

import logging
import os

import structlog


def configure_logging(level: str | None = None) -> None:
    """Install a filtering bound logger at the requested level.

    Args:
        level: Level name such as "DEBUG" or "INFO". Defaults to LOG_LEVEL env var.
    """
    name = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    numeric = logging.getLevelName(name)
    if not isinstance(numeric, int):
        numeric = logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric),
        cache_logger_on_first_use=True,
    )
