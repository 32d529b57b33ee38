"""kroki-render: render text diagrams through a Kroki service."""

from kroki.diagram import Diagram, DiagramType
from kroki.encoding import decode_payload, encode_payload
from kroki.render import (
    AsyncRenderClient,
    InvalidDiagramSpecificationError,
    InvalidOutputFormatError,
    OutputFormat,
    RenderClient,
    RenderError,
    render,
    render_async,
)

__all__ = [
    # Diagrams
    "Diagram",
    "DiagramType",
    # Encoding
    "encode_payload",
    "decode_payload",
    # Rendering
    "OutputFormat",
    "RenderClient",
    "AsyncRenderClient",
    "render",
    "render_async",
    # Errors
    "RenderError",
    "InvalidDiagramSpecificationError",
    "InvalidOutputFormatError",
]
