"""Diagram value type and known Kroki diagram kinds."""

from .lib import Diagram, DiagramType

__all__ = ["Diagram", "DiagramType"]
