"""
API Mapper
==========

Transforms LaneGraphView into response models.
This is the ONLY place where views become wire DTOs.
"""
from typing import List, Optional

from pydantic import BaseModel

from ..core.topology import TopologyMetrics
from ..frontend.visualization.graph import LaneGraphView
from ..ingestion.contracts import FetchResult


class ViewportDTO(BaseModel):
    width: float
    height: float
    margin: float


class NodeDTO(BaseModel):
    id: int
    x: float
    y: float
    label: str
    shape: str
    color: str
    is_entry: bool


class TransformDTO(BaseModel):
    scale: float
    translate_x: float
    translate_y: float
    min_x: float
    max_y: float
    world_width: float
    world_height: float
    scaled_world_width: float
    scaled_world_height: float


class TopologyDTO(BaseModel):
    node_count: int
    edge_count: int
    dangling_edge_count: int
    component_count: int
    entry_vertex_ids: List[int]
    unreachable_vertex_ids: List[int]


class LaneViewDTO(BaseModel):
    lane_id: str
    lane_name: str
    viewport: ViewportDTO
    nodes: List[NodeDTO]
    path_data: str
    lane_width_px: float
    transform: TransformDTO
    topology: Optional[TopologyDTO] = None


class FetchErrorDTO(BaseModel):
    lane_id: str
    status: str
    code: str
    message: str
    http_status: Optional[int] = None


def map_view_to_dto(
    view: LaneGraphView,
    margin: float,
    topology: Optional[TopologyMetrics] = None
) -> LaneViewDTO:
    """Map a LaneGraphView (and optional diagnostics) to its response model."""
    return LaneViewDTO(
        lane_id=view.lane_id,
        lane_name=view.lane_name,
        viewport=ViewportDTO(width=view.viewport_width, height=view.viewport_height, margin=margin),
        nodes=[NodeDTO(**node.to_dict()) for node in view.nodes],
        path_data=view.path_data,
        lane_width_px=view.lane_width_px,
        transform=TransformDTO(**view.transform.to_dict()),
        topology=_map_topology(topology) if topology is not None else None,
    )


def map_fetch_error(fetch: FetchResult) -> FetchErrorDTO:
    return FetchErrorDTO(
        lane_id=fetch.lane_id,
        status=fetch.status.value,
        code=fetch.error.code.name if fetch.error else "UNKNOWN",
        message=fetch.error.message if fetch.error else "",
        http_status=fetch.http_status,
    )


def _map_topology(metrics: TopologyMetrics) -> TopologyDTO:
    return TopologyDTO(
        node_count=metrics.node_count,
        edge_count=metrics.edge_count,
        dangling_edge_count=metrics.dangling_edge_count,
        component_count=metrics.component_count,
        entry_vertex_ids=list(metrics.entry_vertex_ids),
        unreachable_vertex_ids=list(metrics.unreachable_vertex_ids),
    )
