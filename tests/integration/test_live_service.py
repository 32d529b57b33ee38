"""End-to-end tests against a live Kroki service.

Skipped automatically unless KROKI_ENDPOINT (or the public service)
answers its health check.
"""

import pytest

from kroki import (
    AsyncRenderClient,
    Diagram,
    DiagramType,
    InvalidOutputFormatError,
    OutputFormat,
    render,
)

SAMPLES = {
    DiagramType.GRAPHVIZ: "digraph G { Hello -> World }",
    DiagramType.PLANTUML: "@startuml\nKroki -> Python: Hello Python!\n@enduml",
    DiagramType.MERMAID: "graph TD\n  A[Start] --> B[End]",
}


@pytest.mark.kroki
@pytest.mark.integration
@pytest.mark.parametrize("kind", list(SAMPLES))
def test_render_svg(kind, kroki_service):
    """Each sample kind renders to SVG."""
    diagram = Diagram(kind, SAMPLES[kind])
    image = render(diagram, OutputFormat.SVG, endpoint=kroki_service)
    assert b"<svg" in image


@pytest.mark.kroki
@pytest.mark.integration
def test_mixed_case_kind(kroki_service):
    """Kinds are sent lower-cased, so any spelling works."""
    diagram = Diagram("GraphViz", SAMPLES[DiagramType.GRAPHVIZ])
    image = render(diagram, "svg", endpoint=kroki_service)
    assert b"<svg" in image


@pytest.mark.kroki
@pytest.mark.integration
@pytest.mark.asyncio
async def test_async_unsupported_format(kroki_service):
    """Async rendering classifies format errors."""
    diagram = Diagram(DiagramType.GRAPHVIZ, SAMPLES[DiagramType.GRAPHVIZ])
    async with AsyncRenderClient(endpoint=kroki_service) as kroki:
        with pytest.raises(InvalidOutputFormatError) as exc_info:
            await kroki.render(diagram, "mp4")
    assert exc_info.value.diagram == diagram
