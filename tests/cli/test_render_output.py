"""Tests for where the render command writes its output.

The CLI module is loaded in-process so ``render`` can be replaced and no
Kroki service is needed.
"""

import importlib.util
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[2]
SOURCE = "@startuml\nA -> B\n@enduml"


@pytest.fixture
def cli(monkeypatch):
    """The CLI module with ``render`` returning fixed bytes.

    Returns:
        Loaded module; ``cli.calls`` records the rendered diagrams.
    """
    spec = importlib.util.spec_from_file_location(
        "kroki_cli", REPO_ROOT / "__main__.py"
    )
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    calls = []

    def fake_render(diagram, output_format, endpoint=None):
        calls.append((diagram, output_format))
        return b"ASCII ART OUTPUT"

    monkeypatch.setattr(module, "render", fake_render)
    module.calls = calls
    return module


def run_main(cli, monkeypatch, *args: str) -> int:
    monkeypatch.setattr(sys, "argv", ["python .", *args])
    return cli.main()


@pytest.mark.unit
def test_default_output_would_overwrite_source(cli, monkeypatch, tmp_path):
    """A source whose suffix matches the format is left untouched."""
    source = tmp_path / "seq.txt"
    source.write_text(SOURCE, encoding="utf-8")

    code = run_main(cli, monkeypatch, "render", "plantuml", str(source), "--format", "txt")

    assert code == 1
    assert source.read_text(encoding="utf-8") == SOURCE
    assert cli.calls == []


@pytest.mark.unit
def test_explicit_output_equal_to_source(cli, monkeypatch, tmp_path):
    """--output pointing at the source is refused as well."""
    source = tmp_path / "graph.dot"
    source.write_text("digraph { a -> b }", encoding="utf-8")

    code = run_main(
        cli, monkeypatch, "render", "graphviz", str(source), "-o", str(source)
    )

    assert code == 1
    assert source.read_text(encoding="utf-8") == "digraph { a -> b }"


@pytest.mark.unit
def test_explicit_output_avoids_collision(cli, monkeypatch, tmp_path):
    """A separate --output renders normally."""
    source = tmp_path / "seq.txt"
    source.write_text(SOURCE, encoding="utf-8")
    output = tmp_path / "seq.ascii.txt"

    code = run_main(
        cli, monkeypatch,
        "render", "plantuml", str(source), "--format", "txt", "-o", str(output),
    )

    assert code == 0
    assert output.read_bytes() == b"ASCII ART OUTPUT"
    assert source.read_text(encoding="utf-8") == SOURCE


@pytest.mark.unit
def test_default_output_next_to_source(cli, monkeypatch, tmp_path):
    """Without --output the image lands beside the source."""
    source = tmp_path / "seq.puml"
    source.write_text(SOURCE, encoding="utf-8")

    code = run_main(cli, monkeypatch, "render", "PlantUML", str(source), "-f", "svg")

    assert code == 0
    assert (tmp_path / "seq.svg").read_bytes() == b"ASCII ART OUTPUT"
    diagram, output_format = cli.calls[0]
    assert diagram.kind_id == "plantuml"
    assert diagram.specification == SOURCE
    assert output_format == "svg"


@pytest.mark.unit
def test_invalid_kind_fails_cleanly(cli, monkeypatch, tmp_path):
    """A kind that is not a path token exits non-zero without rendering."""
    source = tmp_path / "seq.puml"
    source.write_text(SOURCE, encoding="utf-8")

    code = run_main(cli, monkeypatch, "render", "plant/uml", str(source))

    assert code == 1
    assert cli.calls == []
    assert not (tmp_path / "seq.svg").exists()
