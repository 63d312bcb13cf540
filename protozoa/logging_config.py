"""Logging setup for headless runs.

Library modules only create ``logging.getLogger(__name__)`` loggers; the
command line entry point calls ``configure_logging`` once before the
simulation is built.
"""

from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
LOG_LEVEL_ENV_VAR = "PROTOZOA_LOG_LEVEL"


def configure_logging(*, level: str | None = None) -> logging.Logger:
    """Configure root handlers and the ``protozoa`` logger level.

    Args:
        level: Level name such as ``"debug"``. Falls back to the
            ``PROTOZOA_LOG_LEVEL`` env var, then INFO.

    Returns:
        The ``protozoa`` package logger.
    """
    resolved_level = (level or os.getenv(LOG_LEVEL_ENV_VAR) or "INFO").upper()
    logging.basicConfig(level=resolved_level, format=LOG_FORMAT, datefmt=LOG_DATEFMT)

    app_logger = logging.getLogger("protozoa")
    app_logger.setLevel(resolved_level)
    app_logger.debug("Logging configured at %s", resolved_level)
    return app_logger
