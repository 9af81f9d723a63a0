"""
Scaling Engine
==============

Maps a lane from world space (meters) into a fixed-size viewport (pixels).

TRANSFORM:
==========
One uniform scale for both axes, chosen so the whole bounding box fits the
margin-adjusted viewport, then centered:

    screen_x = x * scale + translate_x
    screen_y = (max_y - y) * scale + translate_y

translate_x carries a `- min_x * scale` term and translate_y does not; the
vertical flip anchors on max_y instead. Both outputs depend on this exact form.

DEGENERATE INPUTS:
==================
- Empty lane        -> neutral transform, empty output
- Single point      -> scale 1, that point centered, no path, zero lane width
- Zero-extent axis  -> divisor of 1 for the scale only
- Dangling edge     -> skipped, no path segment
- Overflowing box   -> neutral transform (extent beyond float range)

Nothing here raises for a well-typed Lane and nothing returns NaN/Infinity.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
import logging
import math

from ..contracts.lane import Coordinates, Lane, Vertex

logger = logging.getLogger(__name__)

# Physical width of a lane in meters.
LANE_WORLD_WIDTH_METERS = 2.5


# =============================================================================
# RESULT TYPES
# =============================================================================

@dataclass(frozen=True)
class ScaleTransform:
    """World-to-screen mapping plus the bounds it was derived from."""
    scale: float
    translate_x: float
    translate_y: float
    min_x: float
    max_y: float
    world_width: float
    world_height: float
    scaled_world_width: float
    scaled_world_height: float

    @staticmethod
    def neutral() -> ScaleTransform:
        """Transform reported for a lane with no vertices."""
        return ScaleTransform(
            scale=1.0,
            translate_x=0.0,
            translate_y=0.0,
            min_x=0.0,
            max_y=0.0,
            world_width=0.0,
            world_height=0.0,
            scaled_world_width=0.0,
            scaled_world_height=0.0,
        )

    def to_dict(self) -> Dict[str, float]:
        return {
            "scale": self.scale,
            "translate_x": self.translate_x,
            "translate_y": self.translate_y,
            "min_x": self.min_x,
            "max_y": self.max_y,
            "world_width": self.world_width,
            "world_height": self.world_height,
            "scaled_world_width": self.scaled_world_width,
            "scaled_world_height": self.scaled_world_height,
        }


@dataclass(frozen=True)
class ScaledVertex:
    """A vertex and its screen position."""
    vertex: Vertex
    x: float
    y: float


@dataclass(frozen=True)
class ScaledLane:
    """Everything a renderer needs to draw one lane."""
    scaled_vertices: Tuple[ScaledVertex, ...]
    path_data: str
    lane_width_px: float
    transform: ScaleTransform = field(default_factory=ScaleTransform.neutral)


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned bounds over vertices and interior path points."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


# =============================================================================
# OPERATIONS
# =============================================================================

def compute_bounding_box(lane: Lane) -> Optional[BoundingBox]:
    """
    Bounds over every vertex location AND every interior path point.

    Returns None for a lane without vertices.
    """
    points = list(lane.iter_points())
    if not points:
        return None
    xs = [p.x for p in points]
    ys = [p.y for p in points]
    return BoundingBox(min_x=min(xs), min_y=min(ys), max_x=max(xs), max_y=max(ys))


def transform_point(coord: Coordinates, transform: ScaleTransform) -> Tuple[float, float]:
    """Map one world coordinate to screen space."""
    return (
        coord.x * transform.scale + transform.translate_x,
        (transform.max_y - coord.y) * transform.scale + transform.translate_y,
    )


def format_path_number(value: float) -> str:
    """Shortest round-trip form; integral values carry no fractional part."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


class ScalingEngine:
    """
    Pure, stateless lane scaling.

    Instances hold only the physical lane width; every call is independent
    and safe to run concurrently.
    """

    def __init__(self, lane_world_width: float = LANE_WORLD_WIDTH_METERS):
        self._lane_world_width = lane_world_width

    def compute_transform(
        self,
        lane: Lane,
        viewport_width: float,
        viewport_height: float,
        margin_fraction: float
    ) -> ScaleTransform:
        """Derive the aspect-preserving transform that fits the lane."""
        bounds = compute_bounding_box(lane)
        if bounds is None:
            return ScaleTransform.neutral()

        world_width = bounds.width
        world_height = bounds.height

        if not (math.isfinite(world_width) and math.isfinite(world_height)):
            logger.warning(
                "lane %s: bounding box extent overflows float range; using neutral transform",
                lane.id
            )
            return ScaleTransform.neutral()

        # Zero extents divide by 1; the reported dimensions stay 0.
        effective_world_width = world_width if world_width > 0 else 1.0
        effective_world_height = world_height if world_height > 0 else 1.0

        effective_viewport_width = viewport_width * (1 - 2 * margin_fraction)
        effective_viewport_height = viewport_height * (1 - 2 * margin_fraction)

        if world_width == 0 and world_height == 0:
            # A lone point has nothing to fit.
            scale = 1.0
        else:
            scale = min(
                effective_viewport_width / effective_world_width,
                effective_viewport_height / effective_world_height,
            )

        scaled_world_width = world_width * scale
        scaled_world_height = world_height * scale

        translate_x = (viewport_width - scaled_world_width) / 2 - bounds.min_x * scale
        translate_y = (viewport_height - scaled_world_height) / 2

        return ScaleTransform(
            scale=scale,
            translate_x=translate_x,
            translate_y=translate_y,
            min_x=bounds.min_x,
            max_y=bounds.max_y,
            world_width=world_width,
            world_height=world_height,
            scaled_world_width=scaled_world_width,
            scaled_world_height=scaled_world_height,
        )

    def transform_point(self, coord: Coordinates, transform: ScaleTransform) -> Tuple[float, float]:
        return transform_point(coord, transform)

    def scale_lane(
        self,
        lane: Lane,
        viewport_width: float,
        viewport_height: float,
        margin_fraction: float
    ) -> ScaledLane:
        """
        Scale a lane into the viewport and build its path data.

        Each resolved edge becomes its own `M ... L ...` run, starting at the
        source vertex, passing through the interior points in order and
        ending at the target vertex.
        """
        if not lane.vertices:
            return ScaledLane(
                scaled_vertices=(),
                path_data="",
                lane_width_px=0.0,
                transform=ScaleTransform.neutral(),
            )

        transform = self.compute_transform(lane, viewport_width, viewport_height, margin_fraction)

        if len(lane.vertices) == 1 and transform.world_width == 0 and transform.world_height == 0:
            vertex = lane.vertices[0]
            x, y = transform_point(vertex.location, transform)
            return ScaledLane(
                scaled_vertices=(ScaledVertex(vertex=vertex, x=x, y=y),),
                path_data="",
                lane_width_px=0.0,
                transform=transform,
            )

        by_id = lane.vertex_index()
        scaled: List[ScaledVertex] = []
        tokens: List[str] = []

        for vertex in lane.vertices:
            start_x, start_y = transform_point(vertex.location, transform)
            scaled.append(ScaledVertex(vertex=vertex, x=start_x, y=start_y))

            for edge in vertex.adjacent:
                target = by_id.get(edge.adjacent_vertex)
                if target is None:
                    logger.debug(
                        "lane %s: skipping edge %s -> %s (unknown target)",
                        lane.id, vertex.id, edge.adjacent_vertex
                    )
                    continue

                tokens.append(_command("M", start_x, start_y))
                for point in edge.interior_path:
                    tokens.append(_command("L", *transform_point(point, transform)))
                tokens.append(_command("L", *transform_point(target.location, transform)))

        lane_width_px = (
            self._lane_world_width * transform.scale if transform.world_width > 0 else 0.0
        )

        return ScaledLane(
            scaled_vertices=tuple(scaled),
            path_data=" ".join(tokens),
            lane_width_px=lane_width_px,
            transform=transform,
        )


def _command(op: str, x: float, y: float) -> str:
    return f"{op} {format_path_number(x)} {format_path_number(y)}"
