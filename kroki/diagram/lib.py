"""Diagram value type.

A Diagram pairs a diagram kind (the grammar Kroki should interpret the
source with) and the textual source itself. Kinds are compared
case-insensitively; validation of the source is left to the service.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from kroki.render import OutputFormat

_KIND_TOKEN = re.compile(r"[a-z0-9][a-z0-9_.-]*")


class DiagramType(Enum):
    """Diagram kinds served by Kroki.

    See: https://kroki.io/#support
    """

    ACTDIAG = "actdiag"
    BLOCKDIAG = "blockdiag"
    BPMN = "bpmn"
    BYTEFIELD = "bytefield"
    C4PLANTUML = "c4plantuml"
    D2 = "d2"
    DBML = "dbml"
    DITAA = "ditaa"
    ERD = "erd"
    EXCALIDRAW = "excalidraw"
    GRAPHVIZ = "graphviz"
    MERMAID = "mermaid"
    NOMNOML = "nomnoml"
    NWDIAG = "nwdiag"
    PACKETDIAG = "packetdiag"
    PIKCHR = "pikchr"
    PLANTUML = "plantuml"
    RACKDIAG = "rackdiag"
    SEQDIAG = "seqdiag"
    STRUCTURIZR = "structurizr"
    SVGBOB = "svgbob"
    SYMBOLATOR = "symbolator"
    TIKZ = "tikz"
    UMLET = "umlet"
    VEGA = "vega"
    VEGALITE = "vegalite"
    WAVEDROM = "wavedrom"
    WIREVIZ = "wireviz"

    @classmethod
    def from_name(cls, name: str) -> DiagramType | None:
        """Look up a diagram type by name, ignoring case.

        Args:
            name: Diagram kind such as "PlantUML" or "graphviz".

        Returns:
            Matching DiagramType, or None if Kroki's kind list lacks it.
        """
        try:
            return cls(name.lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class Diagram:
    """A diagram specification to be rendered by a Kroki service.

    The kind is case-insensitive: ``Diagram("PlantUML", src)`` and
    ``Diagram("plantuml", src)`` are equal and render identically. The
    kind is kept as given for display.
    Kinds must be identifier-like tokens; an empty kind or one holding
    ``/`` or whitespace raises ValueError.

    Example:
        >>> diagram = Diagram("PlantUML", "Kroki -> Python: Hello Python!")
        >>> diagram.kind_id
        'plantuml'

    Attributes:
        kind: Diagram kind as given (a name or a DiagramType member).
        specification: Textual source of the diagram.
        kind_id: Lower-cased kind used for comparison and URIs.
    """

    kind: str | DiagramType = field(compare=False)
    specification: str
    kind_id: str = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if isinstance(self.kind, DiagramType):
            kind_id = self.kind.value
        elif isinstance(self.kind, str):
            kind_id = self.kind.lower()
        else:
            raise TypeError(
                f"Diagram kind must be str or DiagramType, got {type(self.kind).__name__}"
            )
        if not _KIND_TOKEN.fullmatch(kind_id):
            raise ValueError(
                f"Diagram kind must be an identifier-like token, got {self.kind!r}"
            )
        if not isinstance(self.specification, str):
            raise TypeError(
                "Diagram specification must be str, "
                f"got {type(self.specification).__name__}"
            )
        object.__setattr__(self, "kind_id", kind_id)

    @property
    def display_kind(self) -> str:
        """Kind as the caller spelled it."""
        if isinstance(self.kind, DiagramType):
            return self.kind.value
        return self.kind

    @property
    def diagram_type(self) -> DiagramType | None:
        """Known DiagramType for this kind, if any."""
        return DiagramType.from_name(self.kind_id)

    @classmethod
    def from_file(cls, kind: str | DiagramType, path: Path | str) -> Diagram:
        """Create a diagram from a UTF-8 source file.

        Args:
            kind: Diagram kind.
            path: File containing the diagram source.

        Returns:
            Diagram with the file contents as its specification.
        """
        return cls(kind, Path(path).read_text(encoding="utf-8"))

    def render(
        self,
        output_format: str | OutputFormat,
        *,
        endpoint: str | None = None,
        client: httpx.Client | None = None,
    ) -> bytes:
        """Render this diagram through a Kroki service.

        Shorthand for :func:`kroki.render.render`.
        """
        from kroki.render import render

        return render(self, output_format, endpoint=endpoint, client=client)


__all__ = ["Diagram", "DiagramType"]
