"""
Presentation Contracts

Responsibility:
Map vertex categories to display markers.
Pure data lookup over the closed VertexType set, with an explicit default.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional
import math

from lanescope.contracts import VertexType


class VertexShape(Enum):
    """Marker shapes a renderer must support."""
    CIRCLE = "circle"
    RECT = "rect"
    TRIANGLE = "triangle"


DEFAULT_SHAPE = VertexShape.CIRCLE
DEFAULT_COLOR = "grey"

_SHAPES: Dict[VertexType, VertexShape] = {
    VertexType.SERVICE_POINT: VertexShape.CIRCLE,
    VertexType.PRE_MERGE_POINT: VertexShape.RECT,
    VertexType.LANE_MERGE: VertexShape.TRIANGLE,
}

_COLORS: Dict[VertexType, str] = {
    VertexType.SERVICE_POINT: "blue",
    VertexType.PRE_MERGE_POINT: "orange",
    VertexType.LANE_MERGE: "red",
}


def vertex_shape(vertex_type: Optional[VertexType]) -> VertexShape:
    return _SHAPES.get(vertex_type, DEFAULT_SHAPE)


def vertex_color(vertex_type: Optional[VertexType]) -> str:
    return _COLORS.get(vertex_type, DEFAULT_COLOR)


def triangle_points(center_x: float, center_y: float, size: float) -> str:
    """
    SVG `points` for an equilateral triangle centred on its centroid.

    The apex sits 2/3 of the height above the centre, the base 1/3 below.
    """
    half_size = size / 2
    height = size * (math.sqrt(3) / 2)
    top_y = center_y - (2 * height / 3)
    bottom_y = center_y + (height / 3)

    return (
        f"{center_x},{top_y} "
        f"{center_x - half_size},{bottom_y} "
        f"{center_x + half_size},{bottom_y}"
    )


@dataclass(frozen=True)
class VertexMarkerViewModel:
    """ViewModel for a single vertex marker."""
    vertex_id: int
    label: str
    shape: VertexShape
    color: str
    is_entry: bool

    @staticmethod
    def for_vertex(vertex_id: int, label: str, vertex_type: Optional[VertexType],
                   is_entry: Optional[bool]) -> 'VertexMarkerViewModel':
        return VertexMarkerViewModel(
            vertex_id=vertex_id,
            label=label,
            shape=vertex_shape(vertex_type),
            color=vertex_color(vertex_type),
            is_entry=bool(is_entry),
        )
