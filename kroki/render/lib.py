"""Kroki rendering client implementation.

Renders diagrams by issuing a single GET request of the form
``{endpoint}/{kind}/{format}/{payload}`` against a Kroki instance and
returning the raw response body.
"""

from __future__ import annotations

import logging
from enum import Enum
from types import TracebackType
from typing import NoReturn

import httpx

from kroki.config import get_kroki_endpoint, get_timeout
from kroki.diagram import Diagram
from kroki.encoding import encode_payload

from .errors import classify_error

logger = logging.getLogger(__name__)


class OutputFormat(Enum):
    """Common output formats for rendering.

    Availability depends on the diagram kind; Kroki rejects unsupported
    combinations with an InvalidOutputFormatError.
    """

    SVG = "svg"
    PNG = "png"
    PDF = "pdf"
    JPEG = "jpeg"
    TXT = "txt"
    BASE64 = "base64"


def _format_segment(output_format: str | OutputFormat) -> str:
    if isinstance(output_format, OutputFormat):
        return output_format.value
    return output_format


def build_uri(
    diagram: Diagram,
    output_format: str | OutputFormat,
    endpoint: str | None = None,
) -> str:
    """Compose the Kroki request URI for a diagram.

    Args:
        diagram: Diagram to render.
        output_format: Requested output format (e.g. "svg").
        endpoint: Kroki base URI. Defaults to KROKI_ENDPOINT or
                 https://kroki.io.

    Returns:
        URI of the form ``{endpoint}/{kind}/{format}/{payload}``.
    """
    return "/".join(
        [
            get_kroki_endpoint(endpoint),
            diagram.kind_id,
            _format_segment(output_format),
            encode_payload(diagram.specification),
        ]
    )


def _raise_classified(diagram: Diagram, error: httpx.HTTPError) -> NoReturn:
    classified = classify_error(diagram, error)
    if classified is error:
        raise error
    logger.warning(
        f"Kroki rejected '{diagram.display_kind}' diagram: "
        f"{type(classified).__name__}"
    )
    raise classified from error


class RenderClient:
    """HTTP client for Kroki diagram rendering.

    Example:
        >>> with RenderClient() as client:
        ...     svg = client.render(Diagram("graphviz", "digraph { a -> b }"), "svg")

    Attributes:
        endpoint: Kroki service base URI.
        timeout: Request timeout in seconds (for clients created here).
    """

    def __init__(
        self,
        endpoint: str | None = None,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ):
        """Initialize render client.

        Args:
            endpoint: Kroki service URI. Defaults to KROKI_ENDPOINT env var
                     or https://kroki.io.
            timeout: Request timeout in seconds. Defaults to KROKI_TIMEOUT.
            client: Existing httpx client to send requests with. It is not
                   closed by this object.
        """
        self.endpoint = get_kroki_endpoint(endpoint)
        self.timeout = get_timeout(timeout)
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=self.timeout, follow_redirects=True
        )

    def close(self) -> None:
        """Close the underlying HTTP client if this object created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> RenderClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def is_available(self) -> bool:
        """Check if Kroki service is reachable.

        Returns:
            True if service responds, False otherwise.
        """
        try:
            response = self._client.get(f"{self.endpoint}/health", timeout=5.0)
            return response.status_code == 200
        except httpx.HTTPError:
            return False

    def render(self, diagram: Diagram, output_format: str | OutputFormat) -> bytes:
        """Render a diagram to the given output format.

        Args:
            diagram: Diagram to render.
            output_format: Output format such as "svg" or OutputFormat.PNG.

        Returns:
            Response body exactly as returned by Kroki.

        Raises:
            InvalidOutputFormatError: If Kroki does not support the format.
            InvalidDiagramSpecificationError: If Kroki rejects the source.
            httpx.HTTPStatusError: For other error responses.
            httpx.RequestError: For transport failures.
        """
        uri = build_uri(diagram, output_format, self.endpoint)
        logger.debug(f"GET {uri}")
        try:
            response = self._client.get(uri)
            response.raise_for_status()
        except httpx.HTTPError as e:
            _raise_classified(diagram, e)
        return response.content


class AsyncRenderClient:
    """Asynchronous counterpart of :class:`RenderClient`."""

    def __init__(
        self,
        endpoint: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.endpoint = get_kroki_endpoint(endpoint)
        self.timeout = get_timeout(timeout)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=self.timeout, follow_redirects=True
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this object created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> AsyncRenderClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def is_available(self) -> bool:
        """Check if Kroki service is reachable."""
        try:
            response = await self._client.get(f"{self.endpoint}/health", timeout=5.0)
            return response.status_code == 200
        except httpx.HTTPError:
            return False

    async def render(
        self, diagram: Diagram, output_format: str | OutputFormat
    ) -> bytes:
        """Render a diagram to the given output format.

        See :meth:`RenderClient.render`.
        """
        uri = build_uri(diagram, output_format, self.endpoint)
        logger.debug(f"GET {uri}")
        try:
            response = await self._client.get(uri)
            response.raise_for_status()
        except httpx.HTTPError as e:
            _raise_classified(diagram, e)
        return response.content


def render(
    diagram: Diagram,
    output_format: str | OutputFormat,
    *,
    endpoint: str | None = None,
    client: httpx.Client | None = None,
) -> bytes:
    """Render a diagram through a Kroki service.

    A ``KROKI_ENDPOINT`` environment variable selects a specific Kroki
    instance (e.g. a self-hosted one); the public service at
    https://kroki.io is used otherwise.

    Args:
        diagram: Diagram to render.
        output_format: Output format such as "svg" or "png".
        endpoint: Kroki base URI, taking precedence over KROKI_ENDPOINT.
        client: httpx client to send the request with.

    Returns:
        Raw response body in the requested format.
    """
    with RenderClient(endpoint=endpoint, client=client) as kroki:
        return kroki.render(diagram, output_format)


async def render_async(
    diagram: Diagram,
    output_format: str | OutputFormat,
    *,
    endpoint: str | None = None,
    client: httpx.AsyncClient | None = None,
) -> bytes:
    """Asynchronous variant of :func:`render`."""
    async with AsyncRenderClient(endpoint=endpoint, client=client) as kroki:
        return await kroki.render(diagram, output_format)


__all__ = [
    "AsyncRenderClient",
    "OutputFormat",
    "RenderClient",
    "build_uri",
    "render",
    "render_async",
]
