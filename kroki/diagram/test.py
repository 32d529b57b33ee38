"""Tests for the diagram value type."""

import dataclasses

import pytest

from .lib import Diagram, DiagramType


class TestDiagramType:
    """Tests for DiagramType lookup."""

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["graphviz", "GraphViz", "GRAPHVIZ"])
    def test_from_name_is_case_insensitive(self, name):
        """Lookup ignores case."""
        assert DiagramType.from_name(name) is DiagramType.GRAPHVIZ

    @pytest.mark.unit
    def test_from_name_unknown(self):
        """Unknown kinds resolve to None."""
        assert DiagramType.from_name("flowchart-9000") is None

    @pytest.mark.unit
    def test_values_are_lower_case(self):
        """Enum values are usable as URI path segments."""
        for member in DiagramType:
            assert member.value == member.value.lower()


class TestDiagram:
    """Tests for Diagram construction and equality."""

    @pytest.mark.unit
    def test_kind_normalized(self):
        """kind_id is lower-cased, kind is preserved."""
        diagram = Diagram("PlantUML", "A -> B")
        assert diagram.kind == "PlantUML"
        assert diagram.display_kind == "PlantUML"
        assert diagram.kind_id == "plantuml"

    @pytest.mark.unit
    def test_enum_kind(self):
        """DiagramType members are accepted as kinds."""
        diagram = Diagram(DiagramType.MERMAID, "graph TD; A-->B")
        assert diagram.kind_id == "mermaid"
        assert diagram.display_kind == "mermaid"
        assert diagram.diagram_type is DiagramType.MERMAID

    @pytest.mark.unit
    def test_equality_ignores_kind_case(self):
        """Diagrams differing only in kind case are equal."""
        a = Diagram("PlantUML", "A -> B")
        b = Diagram("plantuml", "A -> B")
        c = Diagram(DiagramType.PLANTUML, "A -> B")
        assert a == b == c
        assert len({a, b, c}) == 1

    @pytest.mark.unit
    def test_different_specifications_not_equal(self):
        """Specification participates in equality."""
        assert Diagram("graphviz", "digraph {}") != Diagram("graphviz", "graph {}")

    @pytest.mark.unit
    def test_empty_specification_allowed(self):
        """Construction never validates diagram content."""
        diagram = Diagram("plantuml", "")
        assert diagram.specification == ""

    @pytest.mark.unit
    def test_unknown_kind_allowed(self):
        """Unknown kinds are accepted and left for the service to reject."""
        diagram = Diagram("NotAKind", "whatever")
        assert diagram.kind_id == "notakind"
        assert diagram.diagram_type is None

    @pytest.mark.unit
    @pytest.mark.parametrize("kind", ["", "a/b", "plant uml", "../svg", "kind?x", "-dash"])
    def test_rejects_kind_outside_token(self, kind):
        """Kinds that would break the URI path are rejected."""
        with pytest.raises(ValueError, match="identifier-like token"):
            Diagram(kind, "A -> B")

    @pytest.mark.unit
    def test_kind_token_punctuation_allowed(self):
        """Dots, dashes and underscores inside a kind are fine."""
        assert Diagram("my-kind_v2.1", "x").kind_id == "my-kind_v2.1"

    @pytest.mark.unit
    def test_immutable(self):
        """Diagrams cannot be mutated."""
        diagram = Diagram("plantuml", "A -> B")
        with pytest.raises(dataclasses.FrozenInstanceError):
            diagram.specification = "B -> A"  # type: ignore[misc]

    @pytest.mark.unit
    def test_rejects_non_text_specification(self):
        """Specification must be text."""
        with pytest.raises(TypeError, match="specification must be str"):
            Diagram("plantuml", b"A -> B")  # type: ignore[arg-type]

    @pytest.mark.unit
    def test_rejects_non_text_kind(self):
        """Kind must be a string or DiagramType."""
        with pytest.raises(TypeError, match="kind must be str"):
            Diagram(42, "A -> B")  # type: ignore[arg-type]

    @pytest.mark.unit
    def test_from_file(self, tmp_path):
        """Source is read as UTF-8."""
        path = tmp_path / "hello.puml"
        path.write_text("Alice -> Bob: héllo\n", encoding="utf-8")
        diagram = Diagram.from_file("plantuml", path)
        assert diagram.specification == "Alice -> Bob: héllo\n"
        assert diagram.kind_id == "plantuml"
