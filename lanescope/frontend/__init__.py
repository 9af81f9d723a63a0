"""
Frontend Presentation Layer

Responsibility:
Turn scaled lane geometry into renderable, display-ready views.

PRINCIPLES:
1. Immutable (Frozen)
2. No geometry - scaling happens in lanescope.core
3. No I/O
"""

from .presentation.viewmodels import (
    VertexShape, VertexMarkerViewModel, vertex_shape, vertex_color, triangle_points,
    DEFAULT_SHAPE, DEFAULT_COLOR,
)
from .visualization.graph import GraphNode, LaneGraphView, build_graph_view
from .interaction.navigation import LaneRoute, resolve_route, resolve_lane_id, DEFAULT_LANE_ID

__all__ = [
    'VertexShape', 'VertexMarkerViewModel', 'vertex_shape', 'vertex_color', 'triangle_points',
    'DEFAULT_SHAPE', 'DEFAULT_COLOR',
    'GraphNode', 'LaneGraphView', 'build_graph_view',
    'LaneRoute', 'resolve_route', 'resolve_lane_id', 'DEFAULT_LANE_ID',
]
