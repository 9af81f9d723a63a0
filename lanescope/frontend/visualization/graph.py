"""
Lane Graph Visualization Contracts

Responsibility:
Deterministic transformation of a ScaledLane into a Renderable Graph View.
Input: ScaledLane (geometry) -> Output: LaneGraphView (visualization)
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from lanescope.core import ScaledLane, ScaleTransform
from lanescope.frontend.presentation.viewmodels import VertexMarkerViewModel


@dataclass(frozen=True)
class GraphNode:
    """Renderable lane vertex."""
    node_id: int
    x: float
    y: float
    marker: VertexMarkerViewModel

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.node_id,
            "x": self.x,
            "y": self.y,
            "label": self.marker.label,
            "shape": self.marker.shape.value,
            "color": self.marker.color,
            "is_entry": self.marker.is_entry,
        }


@dataclass(frozen=True)
class LaneGraphView:
    """
    Pre-layouted lane view.

    DETERMINISTIC:
    Same lane + same viewport = identical view.
    """
    lane_id: str
    lane_name: str
    viewport_width: float
    viewport_height: float
    nodes: Tuple[GraphNode, ...]
    path_data: str
    lane_width_px: float
    transform: ScaleTransform

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lane_id": self.lane_id,
            "lane_name": self.lane_name,
            "viewport": {"width": self.viewport_width, "height": self.viewport_height},
            "nodes": [n.to_dict() for n in self.nodes],
            "path_data": self.path_data,
            "lane_width_px": self.lane_width_px,
            "transform": self.transform.to_dict(),
        }


def build_graph_view(
    lane_id: str,
    lane_name: str,
    scaled: ScaledLane,
    viewport_width: float,
    viewport_height: float,
) -> LaneGraphView:
    """Attach display markers to scaled vertices, preserving lane order."""
    nodes = tuple(
        GraphNode(
            node_id=sv.vertex.id,
            x=sv.x,
            y=sv.y,
            marker=VertexMarkerViewModel.for_vertex(
                sv.vertex.id, sv.vertex.name, sv.vertex.vertex_type, sv.vertex.is_entry
            ),
        )
        for sv in scaled.scaled_vertices
    )
    return LaneGraphView(
        lane_id=lane_id,
        lane_name=lane_name,
        viewport_width=viewport_width,
        viewport_height=viewport_height,
        nodes=nodes,
        path_data=scaled.path_data,
        lane_width_px=scaled.lane_width_px,
        transform=scaled.transform,
    )
