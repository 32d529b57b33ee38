"""Centralized environment configuration management for kroki-render.

Provides a unified interface for all environment variables with:
- Single `get_environment()` function for all configuration
- Type-safe enum with metadata (default, type, description)
- Consistent resolution: override > environment > default

Example:
    >>> from kroki.config import EnvVar, get_environment
    >>>
    >>> endpoint = get_environment(EnvVar.KROKI_ENDPOINT)  # Returns str
    >>> timeout = get_environment(EnvVar.KROKI_TIMEOUT)  # Returns float
    >>>
    >>> # Override at runtime
    >>> timeout = get_environment(EnvVar.KROKI_TIMEOUT, override=5.0)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, overload

DEFAULT_KROKI_ENDPOINT = "https://kroki.io"

# =============================================================================
# Environment Variable Configuration
# =============================================================================


@dataclass(frozen=True)
class EnvConfig:
    """Metadata for an environment variable.

    Attributes:
        name: Environment variable name (e.g., "KROKI_ENDPOINT").
        default: Default value if not set in environment.
        var_type: Python type for value conversion (str or float).
        description: Human-readable description.
        category: Grouping category for documentation.
    """

    name: str
    default: Any
    var_type: type
    description: str = ""
    category: str = "general"


class EnvVar(Enum):
    """All environment variables used by kroki-render.

    Each member contains an EnvConfig with name, default, type, and description.
    Use with `get_environment()` for type-safe access.

    Categories:
        - service: Kroki service location and HTTP behavior
        - logging: Log output configuration
    """

    # -------------------------------------------------------------------------
    # Service Configuration
    # -------------------------------------------------------------------------
    KROKI_ENDPOINT = EnvConfig(
        name="KROKI_ENDPOINT",
        default=DEFAULT_KROKI_ENDPOINT,
        var_type=str,
        description="Base URI of the Kroki service (public instance by default)",
        category="service",
    )
    KROKI_TIMEOUT = EnvConfig(
        name="KROKI_TIMEOUT",
        default=30.0,
        var_type=float,
        description="Request timeout in seconds for clients created by kroki-render",
        category="service",
    )

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    KROKI_LOG_LEVEL = EnvConfig(
        name="KROKI_LOG_LEVEL",
        default="INFO",
        var_type=str,
        description="Log level for the command line interface",
        category="logging",
    )


# =============================================================================
# Type Conversion Helpers
# =============================================================================


def _convert_value(value: str | None, var_type: type, default: Any) -> Any:
    """Convert string value to target type.

    Empty strings are treated as unset. Values that are not valid numbers
    for a float variable fall back to the default.

    Args:
        value: Raw string value from environment (or None).
        var_type: Target Python type (str or float).
        default: Default value if conversion fails or value is unset.

    Returns:
        Converted value or default.
    """
    if value is None or value.strip() == "":
        return default

    if var_type is float:
        try:
            return float(value)
        except ValueError:
            return default

    return value


# =============================================================================
# Main Interface
# =============================================================================


@overload
def get_environment(env_var: EnvVar, override: float) -> float: ...
@overload
def get_environment(env_var: EnvVar, override: str) -> str: ...
@overload
def get_environment(env_var: EnvVar, override: None = None) -> Any: ...


def get_environment(env_var: EnvVar, override: Any = None) -> Any:
    """Get environment variable value with type conversion.

    Resolution priority:
        1. Explicit override parameter (highest)
        2. Environment variable value (unless empty)
        3. Default from EnvConfig (lowest)

    Args:
        env_var: Environment variable enum member.
        override: Optional override value (bypasses env lookup).

    Returns:
        Value converted to the appropriate type.

    Example:
        >>> get_environment(EnvVar.KROKI_ENDPOINT)
        'https://kroki.io'
        >>> get_environment(EnvVar.KROKI_TIMEOUT, override=5.0)
        5.0
    """
    config: EnvConfig = env_var.value

    if override is not None:
        return override

    raw_value = os.environ.get(config.name)
    return _convert_value(raw_value, config.var_type, config.default)


def get_environment_info(env_var: EnvVar) -> EnvConfig:
    """Get metadata for an environment variable.

    Args:
        env_var: Environment variable enum member.

    Returns:
        EnvConfig with name, default, type, and description.
    """
    return env_var.value


def list_environment_variables(category: str | None = None) -> list[EnvVar]:
    """List all environment variables, optionally filtered by category.

    Args:
        category: Filter by category (service, logging).
                 None returns all variables.

    Returns:
        List of EnvVar enum members.
    """
    if category is None:
        return list(EnvVar)

    return [var for var in EnvVar if var.value.category == category]


# =============================================================================
# Convenience Functions
# =============================================================================


def get_kroki_endpoint(override: str | None = None) -> str:
    """Get the Kroki service base URI.

    Resolution: override > KROKI_ENDPOINT > https://kroki.io

    Trailing slashes are removed so the endpoint can be joined with
    path segments directly.
    """
    endpoint = override or get_environment(EnvVar.KROKI_ENDPOINT)
    return endpoint.rstrip("/") or DEFAULT_KROKI_ENDPOINT


def get_timeout(override: float | None = None) -> float:
    """Get the request timeout in seconds for clients created internally."""
    return get_environment(EnvVar.KROKI_TIMEOUT, override=override)


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
