"""Root pytest configuration and fixtures.

This module provides:
- Environment setup (loads .env)
- Kroki availability checks for live-service tests
- Global test configuration
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Generator

import httpx
import pytest
from dotenv import load_dotenv

from kroki.config import get_kroki_endpoint

if TYPE_CHECKING:
    from kroki.render import RenderClient

# Load environment variables from .env file
load_dotenv()


# =============================================================================
# Kroki Service Checks (Private Functions)
# =============================================================================


def _is_kroki_healthy(url: str, timeout: float = 2.0) -> bool:
    """Check if Kroki service is responding."""
    try:
        response = httpx.get(f"{url}/health", timeout=timeout)
        return response.status_code == 200
    except httpx.HTTPError:
        return False


# =============================================================================
# Pytest Hooks
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]):
    """Modify test collection based on available services.

    Auto-skips tests marked with kroki when the service is unavailable.
    The service is only probed if such tests were collected.
    """
    kroki_items = [item for item in items if item.get_closest_marker("kroki")]
    if not kroki_items:
        return

    endpoint = get_kroki_endpoint()
    if _is_kroki_healthy(endpoint):
        return

    skip_kroki = pytest.mark.skip(reason=f"Kroki service not available at {endpoint}")
    for item in kroki_items:
        item.add_marker(skip_kroki)


# =============================================================================
# Kroki Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def kroki_service() -> str:
    """URL of the Kroki service used by integration tests.

    Returns:
        Kroki endpoint (KROKI_ENDPOINT or the public service).
    """
    endpoint = get_kroki_endpoint()
    if not _is_kroki_healthy(endpoint):
        pytest.skip(f"Kroki service not available at {endpoint}")
    return endpoint


@pytest.fixture(scope="function")
def kroki_client(kroki_service: str) -> Generator[RenderClient, None, None]:
    """Create a RenderClient connected to Kroki.

    Args:
        kroki_service: Kroki URL from session fixture.

    Yields:
        Configured RenderClient instance.
    """
    from kroki.render import RenderClient

    with RenderClient(endpoint=kroki_service) as client:
        yield client
