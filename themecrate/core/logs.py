"""Logging setup. The terminal belongs to the interface, so records go to a file."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from textual.logging import TextualHandler


def configure_logging(log_dir: Path, verbose: bool = False) -> logging.Logger:
    """
    Route the ``themecrate`` logger to a rotating file and the Textual console.

    Args:
        log_dir: Directory for ``themecrate.log``.
        verbose: Log at DEBUG instead of INFO.

    Returns:
        The package logger.
    """
    logger = logging.getLogger("themecrate")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    if logger.handlers:
        return logger

    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = RotatingFileHandler(
            log_dir / "themecrate.log",
            maxBytes=512_000,
            backupCount=3,
            encoding="utf-8",
        )
    except OSError:
        handler = logging.NullHandler()

    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logger.addHandler(handler)
    logger.addHandler(TextualHandler(stderr=False))
    logger.propagate = False
    return logger
