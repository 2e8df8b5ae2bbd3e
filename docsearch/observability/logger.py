"""Logging setup.

Every module logs through a child of the ``docsearch`` logger so a single
call to ``get_logger("docsearch", level)`` at startup configures them all.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

ROOT_LOGGER_NAME = "docsearch"


def get_logger(name: str = ROOT_LOGGER_NAME, level: Optional[str] = None) -> logging.Logger:
    """Create (or return) a configured logger.

    Args:
        name: Logger name. Names under ``docsearch.`` propagate to the root
            project logger and get no handler of their own.
        level: Optional log level string (e.g. "INFO"). If omitted, keeps existing.

    Returns:
        Configured logger writing to stderr.
    """

    logger = logging.getLogger(name)

    if level is not None:
        logger.setLevel(level.upper())

    if name.startswith(ROOT_LOGGER_NAME + "."):
        return logger

    logger.propagate = False
    if logger.level == logging.NOTSET:
        logger.setLevel(logging.INFO)

    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler(stream=sys.stderr)
        handler.setFormatter(
            logging.Formatter(fmt="%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(handler)

    return logger
