"""Render module test fixtures."""

from __future__ import annotations

from typing import Callable, Generator

import httpx
import pytest

from kroki.diagram import Diagram


@pytest.fixture
def sample_plantuml_dsl() -> str:
    """Sample PlantUML sequence diagram for testing.

    Returns:
        A valid PlantUML diagram source string.
    """
    return """@startuml
Alice -> Bob: Authentication Request
Bob --> Alice: Authentication Response
@enduml"""


@pytest.fixture
def plantuml_diagram(sample_plantuml_dsl: str) -> Diagram:
    """PlantUML diagram built from the sample source."""
    return Diagram("PlantUML", sample_plantuml_dsl)


@pytest.fixture
def kroki_endpoint(monkeypatch: pytest.MonkeyPatch) -> str:
    """Point KROKI_ENDPOINT at a test host.

    Returns:
        The endpoint that was set.
    """
    endpoint = "http://example.test"
    monkeypatch.setenv("KROKI_ENDPOINT", endpoint)
    return endpoint


@pytest.fixture
def recorded_requests() -> list[httpx.Request]:
    """Requests seen by clients created with ``mock_client``."""
    return []


@pytest.fixture
def mock_client(
    recorded_requests: list[httpx.Request],
) -> Generator[Callable[..., httpx.Client], None, None]:
    """Factory for httpx clients answering every request with one response.

    Returns:
        Callable taking (status_code, content) and returning an httpx.Client.
    """
    clients: list[httpx.Client] = []

    def factory(status_code: int = 200, content: bytes = b"") -> httpx.Client:
        def handler(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            return httpx.Response(status_code, content=content)

        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.close()


@pytest.fixture
def mock_async_client(
    recorded_requests: list[httpx.Request],
) -> Callable[..., httpx.AsyncClient]:
    """Async variant of ``mock_client``.

    The clients are not closed explicitly; MockTransport holds no
    connections.
    """

    def factory(status_code: int = 200, content: bytes = b"") -> httpx.AsyncClient:
        def handler(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            return httpx.Response(status_code, content=content)

        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return factory
