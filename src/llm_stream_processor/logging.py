"""Logging for the stream processor.

Everything logs under the ``llm_stream_processor`` logger. ``setup_logging``
attaches one stderr handler to it; the level comes from the caller or from
``Settings.log_level``, which reads ``LLM_STREAM_LOG_LEVEL`` from the
environment or a ``.env`` file.
"""

import logging
import sys

from .config import Settings, get_settings

PACKAGE_LOGGER = "llm_stream_processor"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(name: str) -> int:
    numeric = logging.getLevelName(name.upper())
    if isinstance(numeric, int):
        return numeric
    print(f"Warning: Invalid log level '{name}', using WARNING", file=sys.stderr)
    return logging.WARNING


def setup_logging(level: str | None = None, settings: Settings | None = None) -> logging.Logger:
    """Configure the package logger.

    Args:
        level: Level name such as "DEBUG"; overrides the configured level
        settings: Settings to read the level from (default: get_settings())

    Returns:
        The package logger
    """
    if level is None:
        level = (settings or get_settings()).log_level
    numeric_level = _resolve_level(level)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(numeric_level)

    # one handler per process; later calls only retune it
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
    for handler in logger.handlers:
        handler.setLevel(numeric_level)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module, e.g. ``get_logger(__name__)``."""
    return logging.getLogger(name)
