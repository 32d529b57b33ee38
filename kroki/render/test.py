"""Tests for render module.

Unit tests are mocked (no network).
Integration tests require a running Kroki service.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import httpx
import pytest

from kroki.diagram import Diagram, DiagramType
from kroki.encoding import encode_payload
from kroki.render import (
    AsyncRenderClient,
    InvalidDiagramSpecificationError,
    InvalidOutputFormatError,
    OutputFormat,
    RenderClient,
    RenderError,
    build_uri,
    classify_error,
    render,
    render_async,
)

UNSUPPORTED_FORMAT_BODY = (
    b"Unsupported output format: pdf for plantuml. Must be one of png, svg, txt or base64."
)
SYNTAX_ERROR_BODY = b"Error 400: Syntax Error? (Assumed diagram type: sequence) (line: 2)"


def _status_error(status_code: int, body: bytes) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "http://example.test/plantuml/svg/x")
    response = httpx.Response(status_code, content=body, request=request)
    return httpx.HTTPStatusError("error", request=request, response=response)


# =============================================================================
# Unit Tests (Mocked)
# =============================================================================


class TestBuildUri:
    """Tests for request URI composition."""

    @pytest.mark.unit
    @pytest.mark.parametrize("kind", ["plantuml", "PlantUML", "PLANTUML", "pLaNtUmL"])
    def test_kind_lower_cased(self, kind):
        """Every spelling of a kind produces the same path."""
        uri = build_uri(Diagram(kind, "A -> B"), "svg", "http://kroki.test")
        assert uri == f"http://kroki.test/plantuml/svg/{encode_payload('A -> B')}"

    @pytest.mark.unit
    def test_default_endpoint(self, monkeypatch):
        """Public Kroki is used without configuration."""
        monkeypatch.delenv("KROKI_ENDPOINT", raising=False)
        uri = build_uri(Diagram("graphviz", "digraph {}"), "png")
        assert uri.startswith("https://kroki.io/graphviz/png/")

    @pytest.mark.unit
    def test_empty_env_endpoint_uses_default(self, monkeypatch):
        """An empty KROKI_ENDPOINT counts as unset."""
        monkeypatch.setenv("KROKI_ENDPOINT", "")
        uri = build_uri(Diagram("graphviz", "digraph {}"), "png")
        assert uri.startswith("https://kroki.io/graphviz/png/")

    @pytest.mark.unit
    def test_env_endpoint_exact(self, monkeypatch):
        """The endpoint segment equals KROKI_ENDPOINT exactly."""
        monkeypatch.setenv("KROKI_ENDPOINT", "http://localhost:8000")
        uri = build_uri(Diagram("plantuml", "A -> B"), "svg")
        assert uri.split("/plantuml/")[0] == "http://localhost:8000"

    @pytest.mark.unit
    def test_no_double_slash(self, monkeypatch):
        """A trailing slash on the endpoint is not duplicated."""
        monkeypatch.setenv("KROKI_ENDPOINT", "http://localhost:8000/")
        uri = build_uri(Diagram("plantuml", "A -> B"), "svg")
        assert uri.startswith("http://localhost:8000/plantuml/svg/")

    @pytest.mark.unit
    def test_output_format_enum(self):
        """OutputFormat members map to their value."""
        uri = build_uri(Diagram(DiagramType.D2, "a -> b"), OutputFormat.SVG, "http://k")
        assert uri.startswith("http://k/d2/svg/")

    @pytest.mark.unit
    def test_output_format_text_passed_through(self):
        """Free-text formats are sent as given."""
        uri = build_uri(Diagram("vega", "{}"), "webp", "http://k")
        assert uri.startswith("http://k/vega/webp/")


class TestClassifyError:
    """Tests for classify_error."""

    @pytest.mark.unit
    def test_unsupported_output_format(self):
        """Format complaints become InvalidOutputFormatError."""
        diagram = Diagram("plantuml", "A -> B")
        error = classify_error(diagram, _status_error(400, UNSUPPORTED_FORMAT_BODY))
        assert isinstance(error, InvalidOutputFormatError)
        assert error.message == UNSUPPORTED_FORMAT_BODY.decode()
        assert error.cause is diagram

    @pytest.mark.unit
    def test_syntax_error(self):
        """Syntax complaints become InvalidDiagramSpecificationError."""
        diagram = Diagram("plantuml", "A -> ")
        error = classify_error(diagram, _status_error(400, SYNTAX_ERROR_BODY))
        assert isinstance(error, InvalidDiagramSpecificationError)
        assert error.message == SYNTAX_ERROR_BODY.decode()
        assert error.diagram is diagram

    @pytest.mark.unit
    def test_format_checked_before_syntax(self):
        """A body mentioning both is an output format error."""
        body = b"Unsupported output format; also Syntax Error"
        error = classify_error(Diagram("plantuml", ""), _status_error(400, body))
        assert isinstance(error, InvalidOutputFormatError)

    @pytest.mark.unit
    def test_unrecognized_body_unchanged(self):
        """Unknown bodies leave the failure as is."""
        failure = _status_error(500, b"Internal Server Error")
        assert classify_error(Diagram("plantuml", ""), failure) is failure

    @pytest.mark.unit
    def test_non_status_failure_unchanged(self):
        """Transport and other failures are never reclassified."""
        failure = httpx.ConnectError("Syntax Error")
        assert classify_error(Diagram("plantuml", ""), failure) is failure
        other = RuntimeError("Unsupported output format")
        assert classify_error(Diagram("plantuml", ""), other) is other


class TestRenderErrorMessage:
    """Tests for the human-readable error text."""

    @pytest.mark.unit
    def test_specification_error_message(self):
        """Message lists service text, kind, source and cause."""
        diagram = Diagram("PlantUML", "Kroki -> Python: Hello!")
        error = InvalidDiagramSpecificationError("Syntax Error? (line: 1)", diagram)
        assert str(error) == (
            "The Kroki service responded with:\n"
            "Syntax Error? (line: 1)\n"
            "\n"
            "In response to a 'PlantUML' diagram with the specification:\n"
            "Kroki -> Python: Hello!\n"
            "\n"
            "This is (likely) caused by an invalid diagram specification."
        )

    @pytest.mark.unit
    def test_output_format_error_message(self):
        """Output format errors name the format as the likely cause."""
        diagram = Diagram(DiagramType.GRAPHVIZ, "digraph { a -> b }")
        error = InvalidOutputFormatError("Unsupported output format: xyz", diagram)
        text = str(error)
        assert text.startswith(
            "The Kroki service responded with:\nUnsupported output format: xyz\n"
        )
        assert "In response to a 'graphviz' diagram" in text
        assert "digraph { a -> b }" in text
        assert text.endswith(
            "This is (likely) caused by an invalid or unknown output format."
        )

    @pytest.mark.unit
    def test_common_base_class(self):
        """Both variants share RenderError."""
        diagram = Diagram("plantuml", "")
        assert isinstance(InvalidOutputFormatError("x", diagram), RenderError)
        assert isinstance(InvalidDiagramSpecificationError("x", diagram), RenderError)


class TestRenderMocked:
    """Tests for render with a mocked transport."""

    @pytest.mark.unit
    def test_returns_body_unchanged(self, mock_client, plantuml_diagram):
        """Successful responses are returned byte for byte."""
        payload = b"\x89PNG\r\n\x1a\n\x00\xffbinary"
        result = render(plantuml_diagram, "png", client=mock_client(200, payload))
        assert result == payload

    @pytest.mark.unit
    def test_requests_exact_uri(self, kroki_endpoint, mock_client, recorded_requests):
        """The composed URI is requested with a single GET."""
        render(Diagram("plantuml", "A->B: hi"), "svg", client=mock_client(200, b"<svg/>"))

        assert len(recorded_requests) == 1
        request = recorded_requests[0]
        assert request.method == "GET"
        assert str(request.url) == (
            f"http://example.test/plantuml/svg/{encode_payload('A->B: hi')}"
        )

    @pytest.mark.unit
    def test_explicit_endpoint(self, kroki_endpoint, mock_client, recorded_requests):
        """The endpoint argument wins over KROKI_ENDPOINT."""
        render(
            Diagram("graphviz", "digraph {}"),
            "svg",
            endpoint="http://other.test",
            client=mock_client(),
        )
        assert recorded_requests[0].url.host == "other.test"

    @pytest.mark.unit
    def test_invalid_output_format(self, mock_client, plantuml_diagram):
        """400 with a format complaint raises InvalidOutputFormatError."""
        client = mock_client(400, UNSUPPORTED_FORMAT_BODY)

        with pytest.raises(InvalidOutputFormatError) as exc_info:
            render(plantuml_diagram, "pdf", client=client)

        assert exc_info.value.message == UNSUPPORTED_FORMAT_BODY.decode()
        assert exc_info.value.cause == plantuml_diagram
        assert isinstance(exc_info.value.__cause__, httpx.HTTPStatusError)

    @pytest.mark.unit
    def test_invalid_specification(self, mock_client):
        """400 with a syntax complaint raises InvalidDiagramSpecificationError."""
        diagram = Diagram("plantuml", "@startuml\nA -> \n@enduml")
        client = mock_client(400, SYNTAX_ERROR_BODY)

        with pytest.raises(InvalidDiagramSpecificationError) as exc_info:
            render(diagram, "svg", client=client)

        assert exc_info.value.diagram is diagram

    @pytest.mark.unit
    def test_unrecognized_status_error(self, mock_client, plantuml_diagram):
        """Other error responses surface as the original HTTPStatusError."""
        client = mock_client(400, b"Bad Request")

        with pytest.raises(httpx.HTTPStatusError) as exc_info:
            render(plantuml_diagram, "svg", client=client)

        assert exc_info.value.response.status_code == 400
        assert exc_info.value.response.content == b"Bad Request"

    @pytest.mark.unit
    def test_transport_error_passes_through(self, plantuml_diagram):
        """Connection failures are not reclassified."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        with httpx.Client(transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(httpx.ConnectError, match="Connection refused"):
                render(plantuml_diagram, "svg", client=client)

    @pytest.mark.unit
    def test_injected_client_left_open(self, mock_client, plantuml_diagram):
        """render does not close a caller-supplied client."""
        client = mock_client(200, b"ok")
        render(plantuml_diagram, "svg", client=client)
        assert not client.is_closed
        assert render(plantuml_diagram, "svg", client=client) == b"ok"

    @pytest.mark.unit
    def test_diagram_render_shorthand(self, mock_client, recorded_requests):
        """Diagram.render delegates to render."""
        diagram = Diagram("Mermaid", "graph TD; A-->B")
        result = diagram.render(
            OutputFormat.SVG, endpoint="http://k.test", client=mock_client(200, b"<svg/>")
        )
        assert result == b"<svg/>"
        assert recorded_requests[0].url.path.startswith("/mermaid/svg/")

    @pytest.mark.unit
    def test_parallel_renders(self, mock_client, recorded_requests):
        """Independent diagrams render concurrently from threads."""
        client = mock_client(200, b"<svg/>")
        diagrams = [Diagram("graphviz", f"digraph {{ n{i} }}") for i in range(16)]

        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(lambda d: render(d, "svg", client=client), diagrams))

        assert results == [b"<svg/>"] * 16
        expected = {build_uri(d, "svg", "http://x").split("/")[-1] for d in diagrams}
        assert {r.url.path.split("/")[-1] for r in recorded_requests} == expected


@dataclass
class MockResponse:
    """Mock HTTP response for testing."""

    status_code: int


class TestRenderClientMocked:
    """Tests for RenderClient with mocked HTTP."""

    @pytest.mark.unit
    def test_is_available_success(self, monkeypatch):
        """is_available returns True on 200 response."""
        client = RenderClient(endpoint="http://kroki.test")

        def mock_get(*args, **kwargs):
            return MockResponse(status_code=200)

        monkeypatch.setattr(client._client, "get", mock_get)
        assert client.is_available() is True

    @pytest.mark.unit
    def test_is_available_failure(self, monkeypatch):
        """is_available returns False on connection error."""
        client = RenderClient(endpoint="http://kroki.test")

        def mock_get(*args, **kwargs):
            raise httpx.ConnectError("Connection refused")

        monkeypatch.setattr(client._client, "get", mock_get)
        assert client.is_available() is False

    @pytest.mark.unit
    def test_endpoint_and_timeout_from_environment(self, monkeypatch):
        """Unspecified settings come from the environment."""
        monkeypatch.setenv("KROKI_ENDPOINT", "http://localhost:8000/")
        monkeypatch.setenv("KROKI_TIMEOUT", "7.5")
        with RenderClient() as client:
            assert client.endpoint == "http://localhost:8000"
            assert client.timeout == 7.5
            assert client._client.timeout.read == 7.5

    @pytest.mark.unit
    def test_owned_client_closed(self):
        """Clients created by RenderClient are closed with it."""
        with RenderClient(endpoint="http://kroki.test") as client:
            http = client._client
        assert http.is_closed

    @pytest.mark.unit
    def test_reuses_client(self, mock_client, recorded_requests):
        """One RenderClient can render many diagrams."""
        with RenderClient("http://kroki.test", client=mock_client(200, b"x")) as kroki:
            kroki.render(Diagram("plantuml", "A -> B"), "svg")
            kroki.render(Diagram("graphviz", "digraph {}"), "png")

        paths = [r.url.path for r in recorded_requests]
        assert paths[0].startswith("/plantuml/svg/")
        assert paths[1].startswith("/graphviz/png/")


class TestRenderAsyncMocked:
    """Tests for the asynchronous API."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_returns_body(self, mock_async_client, plantuml_diagram):
        """Async render returns the body unchanged."""
        client = mock_async_client(200, b"<svg/>")
        assert await render_async(plantuml_diagram, "svg", client=client) == b"<svg/>"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_requests_exact_uri(
        self, kroki_endpoint, mock_async_client, recorded_requests
    ):
        """Async render composes the same URI as render."""
        diagram = Diagram("plantuml", "A->B: hi")
        await render_async(diagram, "svg", client=mock_async_client())
        assert str(recorded_requests[0].url) == build_uri(diagram, "svg")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_invalid_output_format(self, mock_async_client, plantuml_diagram):
        """Async render classifies errors like render."""
        client = mock_async_client(400, UNSUPPORTED_FORMAT_BODY)
        with pytest.raises(InvalidOutputFormatError):
            await render_async(plantuml_diagram, "pdf", client=client)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_invalid_specification(self, mock_async_client, plantuml_diagram):
        """Syntax errors are classified asynchronously too."""
        client = mock_async_client(400, SYNTAX_ERROR_BODY)
        with pytest.raises(InvalidDiagramSpecificationError):
            await render_async(plantuml_diagram, "svg", client=client)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unrecognized_status_error(self, mock_async_client, plantuml_diagram):
        """Unknown error bodies surface unchanged."""
        client = mock_async_client(503, b"Service Unavailable")
        with pytest.raises(httpx.HTTPStatusError) as exc_info:
            await render_async(plantuml_diagram, "svg", client=client)
        assert exc_info.value.response.status_code == 503

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_owned_client_closed(self):
        """AsyncRenderClient closes the client it created."""
        async with AsyncRenderClient(endpoint="http://kroki.test") as kroki:
            http = kroki._client
        assert http.is_closed


# =============================================================================
# Integration Tests (require running Kroki)
# =============================================================================


class TestRenderIntegration:
    """Integration tests against a live Kroki service."""

    @pytest.mark.kroki
    @pytest.mark.integration
    def test_render_graphviz_svg(self, kroki_client):
        """Graphviz renders to SVG."""
        result = kroki_client.render(Diagram("graphviz", "digraph { a -> b }"), "svg")
        assert b"<svg" in result

    @pytest.mark.kroki
    @pytest.mark.integration
    def test_render_plantuml_png(self, kroki_client, sample_plantuml_dsl):
        """PlantUML renders to PNG."""
        result = kroki_client.render(Diagram("PlantUML", sample_plantuml_dsl), "png")
        assert result[:8] == b"\x89PNG\r\n\x1a\n"

    @pytest.mark.kroki
    @pytest.mark.integration
    def test_invalid_output_format(self, kroki_client, sample_plantuml_dsl):
        """Kroki's format complaint is classified."""
        with pytest.raises(InvalidOutputFormatError):
            kroki_client.render(Diagram("plantuml", sample_plantuml_dsl), "mp4")

    @pytest.mark.kroki
    @pytest.mark.integration
    def test_invalid_specification(self, kroki_client):
        """Kroki's syntax complaint is classified."""
        with pytest.raises(InvalidDiagramSpecificationError):
            kroki_client.render(
                Diagram("plantuml", "@startuml\nthis is -> -> not valid\n@enduml"),
                "svg",
            )
