"""Render module for Kroki diagram rendering.

Turns a Diagram into image bytes through a Kroki instance and maps
Kroki's error responses to specific exceptions.
"""

from .errors import (
    InvalidDiagramSpecificationError,
    InvalidOutputFormatError,
    RenderError,
    classify_error,
)
from .lib import (
    AsyncRenderClient,
    OutputFormat,
    RenderClient,
    build_uri,
    render,
    render_async,
)

__all__ = [
    "AsyncRenderClient",
    "InvalidDiagramSpecificationError",
    "InvalidOutputFormatError",
    "OutputFormat",
    "RenderClient",
    "RenderError",
    "build_uri",
    "classify_error",
    "render",
    "render_async",
]
