"""Centralized configuration management for kroki-render.

Example:
    >>> from kroki.config import get_kroki_endpoint
    >>> get_kroki_endpoint()  # KROKI_ENDPOINT or https://kroki.io
    'https://kroki.io'

Environment Variable Categories:
    service: Kroki endpoint and request timeout
    logging: CLI log level
"""

from .lib import (
    DEFAULT_KROKI_ENDPOINT,
    EnvConfig,
    EnvVar,
    get_environment,
    get_environment_info,
    get_kroki_endpoint,
    get_timeout,
    list_environment_variables,
)

__all__ = [
    "DEFAULT_KROKI_ENDPOINT",
    "EnvConfig",
    "EnvVar",
    "get_environment",
    "get_environment_info",
    "get_kroki_endpoint",
    "get_timeout",
    "list_environment_variables",
]
