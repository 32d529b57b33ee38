"""Logging micro API for kroki-render."""

from .lib import get_logger, parse_level, setup_logging

__all__ = ["get_logger", "parse_level", "setup_logging"]
