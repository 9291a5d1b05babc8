"""Package logger. Modules log through ``from filedrop.logging import logger``."""
from __future__ import annotations
import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

logger = logging.getLogger("filedrop")


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Attach a single stderr handler to the package logger (idempotent)."""
    if not any(getattr(h, "_filedrop", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._filedrop = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    return logger
