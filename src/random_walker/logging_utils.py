"""Logging helpers."""

from __future__ import annotations

import logging

LOGGER_NAME = "random_walker"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())


def configure_logging(verbose: bool = False) -> None:
    """Configure console logging once for CLI usage; library callers keep their own setup."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # urllib3 logs every connection at DEBUG, which drowns out the walk itself.
    logging.getLogger("urllib3").setLevel(logging.INFO if verbose else logging.WARNING)


def get_logger(component: str | None = None) -> logging.Logger:
    """Return the package logger, or a child logger for one component."""
    if component:
        return logging.getLogger(f"{LOGGER_NAME}.{component}")
    return logging.getLogger(LOGGER_NAME)
