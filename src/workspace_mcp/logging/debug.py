"""Diagnostic logging sink on stderr."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

ROOT_LOGGER_NAME = "workspace_mcp"
LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def configure_debug_logging(debug: bool, stream: TextIO | None = None) -> logging.Logger:
    """Route workspace_mcp.* loggers to stderr; stdout stays reserved for responses."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    logger.propagate = False
    return logger
