"""Render errors and classification of Kroki failure responses.

Kroki answers both an invalid diagram source and an unsupported output
format with a 400 response, so the response body has to be inspected to
tell them apart. Matching is done on Kroki's error phrasing, which is not
a documented contract and may change between service versions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from kroki.diagram import Diagram


UNSUPPORTED_OUTPUT_FORMAT_MARKER = "Unsupported output format"
SYNTAX_ERROR_MARKER = "Syntax Error"


class RenderError(Exception):
    """Kroki rejected a diagram.

    Attributes:
        message: Error text returned by the Kroki service.
        diagram: Diagram whose rendering failed.
    """

    likely_cause = "This is (likely) caused by a problem with the diagram."

    def __init__(self, message: str, diagram: Diagram):
        super().__init__(message, diagram)
        self.message = message
        self.diagram = diagram

    @property
    def cause(self) -> Diagram:
        """Diagram that triggered the error."""
        return self.diagram

    def __str__(self) -> str:
        return (
            "The Kroki service responded with:\n"
            f"{self.message}\n"
            "\n"
            f"In response to a '{self.diagram.display_kind}' diagram "
            "with the specification:\n"
            f"{self.diagram.specification}\n"
            "\n"
            f"{self.likely_cause}"
        )


class InvalidDiagramSpecificationError(RenderError):
    """The diagram source was rejected by Kroki."""

    likely_cause = "This is (likely) caused by an invalid diagram specification."


class InvalidOutputFormatError(RenderError):
    """The requested output format is not available for the diagram kind."""

    likely_cause = "This is (likely) caused by an invalid or unknown output format."


def _response_text(error: httpx.HTTPStatusError) -> str | None:
    try:
        return error.response.text
    except httpx.ResponseNotRead:
        return None


def classify_error(diagram: Diagram, failure: BaseException) -> BaseException:
    """Rewrite a generic HTTP failure into a specific render error.

    Only status failures carrying a response body are considered. Anything
    else, and status failures whose body is not recognized, are returned
    unchanged.

    Args:
        diagram: Diagram that was being rendered.
        failure: Exception raised while fetching the rendering.

    Returns:
        InvalidOutputFormatError, InvalidDiagramSpecificationError, or
        ``failure`` itself.
    """
    if not isinstance(failure, httpx.HTTPStatusError):
        return failure

    body = _response_text(failure)
    if body is None:
        return failure

    if UNSUPPORTED_OUTPUT_FORMAT_MARKER in body:
        return InvalidOutputFormatError(body, diagram)
    if SYNTAX_ERROR_MARKER in body:
        return InvalidDiagramSpecificationError(body, diagram)
    return failure


__all__ = [
    "InvalidDiagramSpecificationError",
    "InvalidOutputFormatError",
    "RenderError",
    "SYNTAX_ERROR_MARKER",
    "UNSUPPORTED_OUTPUT_FORMAT_MARKER",
    "classify_error",
]
