"""
Navigation Contracts

Responsibility:
Resolve a path-style route to the lane identifier it shows.
No fetching - just intent.

ROUTES:
    ''  or '/'     -> default lane
    'lane/<id>'    -> <id>
    anything else  -> default lane
"""

from dataclasses import dataclass
from typing import Optional

DEFAULT_LANE_ID = "680bc0"


@dataclass(frozen=True)
class LaneRoute:
    """A resolved route."""
    path: str
    lane_id: str
    is_default: bool

    @property
    def canonical_path(self) -> str:
        return f"lane/{self.lane_id}"


def resolve_route(path: Optional[str], default_lane_id: str = DEFAULT_LANE_ID) -> LaneRoute:
    raw = path or ""
    segments = [s for s in raw.strip().split("/") if s]

    if len(segments) == 2 and segments[0] == "lane":
        return LaneRoute(path=raw, lane_id=segments[1], is_default=False)

    return LaneRoute(path=raw, lane_id=default_lane_id, is_default=True)


def resolve_lane_id(path: Optional[str], default_lane_id: str = DEFAULT_LANE_ID) -> str:
    return resolve_route(path, default_lane_id).lane_id
