from narrative_diagram.config import DiagramConfig
from narrative_diagram.diagram import Diagram, new_diagram
from narrative_diagram.errors import (
    DiagramError,
    GraphInvariantError,
    InvalidNodeCountError,
    RenderError,
    SamplingExhaustedError,
)
from narrative_diagram.geometry import anchor_point, arrow_segment
from narrative_diagram.graph_builder import build_graph, check_graph, degree_counts
from narrative_diagram.schema import Arrow, ArrowStyle, Edge, OrientedRect, Rect

__all__ = [
    "DiagramConfig",
    "Diagram",
    "new_diagram",
    "build_graph",
    "check_graph",
    "degree_counts",
    "anchor_point",
    "arrow_segment",
    "Arrow",
    "ArrowStyle",
    "Edge",
    "OrientedRect",
    "Rect",
    "DiagramError",
    "GraphInvariantError",
    "InvalidNodeCountError",
    "RenderError",
    "SamplingExhaustedError",
]
