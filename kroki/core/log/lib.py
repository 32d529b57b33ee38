"""Core logging implementation for kroki-render.

Library modules log through ``logging.getLogger(__name__)`` and never
configure handlers themselves. Only the command line interface calls
``setup_logging``, with the level taken from ``KROKI_LOG_LEVEL``.
"""

import logging
import sys
from typing import Optional

__all__ = ["get_logger", "parse_level", "setup_logging"]

DEFAULT_LOGGER_NAME = "kroki"


def parse_level(value: str | int | None, default: int = logging.INFO) -> int:
    """Resolve a log level name or number.

    Args:
        value: Level name ("debug", "WARNING") or numeric level, typically
            the raw KROKI_LOG_LEVEL value.
        default: Level used when value is empty or unknown.

    Returns:
        Numeric logging level.
    """
    if value is None or value == "":
        return default
    if isinstance(value, int):
        return value
    level = logging.getLevelName(value.strip().upper())
    return level if isinstance(level, int) else default


def setup_logging(level: int = logging.INFO, stream=sys.stderr) -> None:
    """Route CLI log records to a stream.

    Diagnostics go to stderr by default so that ``python . render`` can
    write image bytes to stdout. At DEBUG the composed Kroki request URI
    is logged for each render.

    Args:
        level: Root logging level, usually ``parse_level(KROKI_LOG_LEVEL)``.
        stream: Output stream for log records.
    """
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=stream,
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger under the ``kroki`` namespace.

    Args:
        name: Logger name, e.g. "cli". Defaults to "kroki".

    Returns:
        Logger instance.
    """
    return logging.getLogger(name or DEFAULT_LOGGER_NAME)
