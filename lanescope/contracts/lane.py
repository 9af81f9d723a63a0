"""
Lane Contracts

Immutable data structures describing a lane graph in world space.

WIRE FORMAT:
============
The lane server returns camelCase JSON:

    {"id": "680bc0", "name": "Lane 1",
     "vertices": [{"id": 0, "name": "Pre-Warn", "vertexType": "SERVICE_POINT",
                   "isEntry": true, "location": {"coordinates": [18.0, 2.0]},
                   "adjacent": [{"adjacentVertex": 1, "interiorPath": []}]}]}

Lane.from_dict() is the ONLY place where wire payloads become contracts.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional, Tuple
from enum import Enum
import math

from .base import ErrorCode, LanePayloadError


# =============================================================================
# ENUMS
# =============================================================================

class VertexType(Enum):
    """Closed set of vertex roles along a lane."""
    SERVICE_POINT = "SERVICE_POINT"
    PRE_MERGE_POINT = "PRE_MERGE_POINT"
    LANE_MERGE = "LANE_MERGE"

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional['VertexType']:
        """Unknown or absent tags map to None, never to a guessed role."""
        if raw is None:
            return None
        try:
            return cls(raw)
        except ValueError:
            return None


# =============================================================================
# GEOMETRY
# =============================================================================

@dataclass(frozen=True)
class Coordinates:
    """World position in meters."""
    x: float
    y: float

    @staticmethod
    def from_dict(payload: Any, path: str = "coordinates") -> Coordinates:
        if not isinstance(payload, dict) or "coordinates" not in payload:
            raise LanePayloadError(
                ErrorCode.MALFORMED_PAYLOAD, "expected an object with 'coordinates'", path
            )
        pair = payload["coordinates"]
        if not isinstance(pair, (list, tuple)) or len(pair) != 2:
            raise LanePayloadError(
                ErrorCode.INVALID_COORDINATES, "coordinates must be an [x, y] pair", path
            )
        x, y = (_finite_number(v, path) for v in pair)
        return Coordinates(x=x, y=y)

    def to_dict(self) -> Dict[str, Any]:
        return {"coordinates": [self.x, self.y]}

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True)
class Adjacent:
    """
    Directed edge to another vertex.

    The target is a back-reference by id, resolved at transform time.
    interior_path holds intermediate bend points in traversal order.
    """
    adjacent_vertex: int
    interior_path: Tuple[Coordinates, ...] = field(default_factory=tuple)

    @staticmethod
    def from_dict(payload: Any, path: str = "adjacent") -> Adjacent:
        if not isinstance(payload, dict):
            raise LanePayloadError(ErrorCode.MALFORMED_PAYLOAD, "edge must be an object", path)
        target = _integer(payload.get("adjacentVertex"), f"{path}.adjacentVertex")
        raw_path = payload.get("interiorPath") or []
        if not isinstance(raw_path, list):
            raise LanePayloadError(
                ErrorCode.MALFORMED_PAYLOAD, "interiorPath must be a list", f"{path}.interiorPath"
            )
        interior = tuple(
            Coordinates.from_dict(p, f"{path}.interiorPath[{i}]")
            for i, p in enumerate(raw_path)
        )
        return Adjacent(adjacent_vertex=target, interior_path=interior)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "adjacentVertex": self.adjacent_vertex,
            "interiorPath": [c.to_dict() for c in self.interior_path],
        }


# =============================================================================
# GRAPH
# =============================================================================

@dataclass(frozen=True)
class Vertex:
    """Named point of a lane. Owned by the caller, never mutated."""
    id: int
    name: str
    location: Coordinates
    adjacent: Tuple[Adjacent, ...] = field(default_factory=tuple)
    vertex_type: Optional[VertexType] = None
    is_entry: Optional[bool] = None

    @staticmethod
    def from_dict(payload: Any, path: str = "vertex") -> Vertex:
        if not isinstance(payload, dict):
            raise LanePayloadError(ErrorCode.MALFORMED_PAYLOAD, "vertex must be an object", path)
        if "location" not in payload:
            raise LanePayloadError(ErrorCode.MALFORMED_PAYLOAD, "vertex has no location", path)

        raw_adjacent = payload.get("adjacent") or []
        if not isinstance(raw_adjacent, list):
            raise LanePayloadError(
                ErrorCode.MALFORMED_PAYLOAD, "adjacent must be a list", f"{path}.adjacent"
            )

        is_entry = payload.get("isEntry")
        return Vertex(
            id=_integer(payload.get("id"), f"{path}.id"),
            name=str(payload.get("name", "")),
            location=Coordinates.from_dict(payload["location"], f"{path}.location"),
            adjacent=tuple(
                Adjacent.from_dict(a, f"{path}.adjacent[{i}]")
                for i, a in enumerate(raw_adjacent)
            ),
            vertex_type=VertexType.parse(payload.get("vertexType")),
            is_entry=bool(is_entry) if is_entry is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "location": self.location.to_dict(),
            "adjacent": [a.to_dict() for a in self.adjacent],
        }
        if self.vertex_type is not None:
            data["vertexType"] = self.vertex_type.value
        if self.is_entry is not None:
            data["isEntry"] = self.is_entry
        return data


@dataclass(frozen=True)
class Lane:
    """
    A lane graph: identifier, display name and ordered vertices.

    INVARIANT: vertex ids are unique within a lane.
    Edge targets SHOULD reference vertices of the same lane; the scaling
    engine skips those that do not.
    """
    id: str
    name: str
    vertices: Tuple[Vertex, ...] = field(default_factory=tuple)

    def __post_init__(self):
        seen = set()
        for vertex in self.vertices:
            if vertex.id in seen:
                raise LanePayloadError(
                    ErrorCode.DUPLICATE_VERTEX_ID,
                    f"duplicate vertex id {vertex.id} in lane {self.id!r}"
                )
            seen.add(vertex.id)

    @staticmethod
    def from_dict(payload: Any) -> Lane:
        """Parse a wire payload into a Lane."""
        if payload is None or payload == {}:
            raise LanePayloadError(ErrorCode.EMPTY_PAYLOAD, "lane payload is empty")
        if not isinstance(payload, dict):
            raise LanePayloadError(ErrorCode.MALFORMED_PAYLOAD, "lane payload must be an object")

        raw_vertices = payload.get("vertices")
        if not isinstance(raw_vertices, list):
            raise LanePayloadError(
                ErrorCode.MALFORMED_PAYLOAD, "lane payload has no vertex list", "vertices"
            )

        return Lane(
            id=str(payload.get("id", "")),
            name=str(payload.get("name", "")),
            vertices=tuple(
                Vertex.from_dict(v, f"vertices[{i}]") for i, v in enumerate(raw_vertices)
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "vertices": [v.to_dict() for v in self.vertices],
        }

    def vertex_index(self) -> Dict[int, Vertex]:
        return {v.id: v for v in self.vertices}

    def iter_points(self) -> Iterator[Coordinates]:
        """Every vertex location and interior path point, in lane order."""
        for vertex in self.vertices:
            yield vertex.location
            for edge in vertex.adjacent:
                yield from edge.interior_path


# =============================================================================
# HELPERS
# =============================================================================

def _finite_number(value: Any, path: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise LanePayloadError(ErrorCode.INVALID_COORDINATES, f"{value!r} is not a number", path)
    try:
        number = float(value)
    except OverflowError:
        raise LanePayloadError(
            ErrorCode.INVALID_COORDINATES, "integer coordinate is out of float range", path
        ) from None
    if not math.isfinite(number):
        raise LanePayloadError(ErrorCode.INVALID_COORDINATES, f"{value!r} is not finite", path)
    return number


def _integer(value: Any, path: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise LanePayloadError(ErrorCode.MALFORMED_PAYLOAD, f"{value!r} is not an integer id", path)
    return value
