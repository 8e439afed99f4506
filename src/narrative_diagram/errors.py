from __future__ import annotations


class DiagramError(Exception):
    """Base error for diagram generation / rendering."""


class InvalidNodeCountError(DiagramError, ValueError):
    """Node count too small to satisfy the degree floors."""


class SamplingExhaustedError(DiagramError):
    """A rejection-sampling loop exceeded its draw cap."""


class GraphInvariantError(DiagramError):
    """An edge list violates the degree floors or minimum size."""


class RenderError(DiagramError):
    """Writing a rendered frame or animation failed."""
