"""
Core Lane Geometry

RESPONSIBILITY: World-to-screen scaling, path generation, structural checks
ALLOWED INPUTS: Lane contracts, viewport scalars
OUTPUTS: ScaledLane, ScaleTransform, TopologyMetrics (immutable)

WHAT THIS LAYER MUST NOT DO:
============================
- Perform I/O of any kind
- Cache or share state between calls
- Depend on a rendering toolkit
"""

from .scaling import (
    LANE_WORLD_WIDTH_METERS,
    BoundingBox,
    ScaleTransform,
    ScaledVertex,
    ScaledLane,
    ScalingEngine,
    compute_bounding_box,
    format_path_number,
    transform_point,
)
from .topology import LaneTopology, TopologyMetrics

__all__ = [
    'LANE_WORLD_WIDTH_METERS',
    'BoundingBox',
    'ScaleTransform',
    'ScaledVertex',
    'ScaledLane',
    'ScalingEngine',
    'compute_bounding_box',
    'format_path_number',
    'transform_point',
    'LaneTopology',
    'TopologyMetrics',
]
