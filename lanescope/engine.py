"""
Engine Orchestration Module

Unified interface coordinating retrieval, scaling, diagnostics and
presentation while keeping each layer independent.

LAYER FLOW:
===========
1. Navigation: route -> lane id
2. Retrieval:  lane id -> FetchResult (single-flight, cached)
3. Core:       Lane -> ScaledLane (pure)
4. Topology:   Lane -> TopologyMetrics (diagnostic only)
5. Frontend:   ScaledLane -> LaneGraphView
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import logging

from .config import LaneScopeConfig
from .contracts.lane import Lane
from .core.scaling import ScalingEngine
from .core.topology import LaneTopology, TopologyMetrics
from .frontend.interaction.navigation import LaneRoute, resolve_route
from .frontend.visualization.graph import LaneGraphView, build_graph_view
from .ingestion.contracts import FetchResult
from .ingestion.fetcher import LaneFetcher
from .ingestion.registry import LaneRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LaneViewResult:
    """A fetch outcome and, when it succeeded, the view built from it."""
    fetch: FetchResult
    view: Optional[LaneGraphView] = None
    topology: Optional[TopologyMetrics] = None

    @property
    def is_success(self) -> bool:
        return self.view is not None


class LaneScopeBackend:
    """
    Lane viewer backend.

    Holds the only shared state (the lane registry); scaling stays pure.
    """

    def __init__(
        self,
        config: Optional[LaneScopeConfig] = None,
        registry: Optional[LaneRegistry] = None,
        scaling: Optional[ScalingEngine] = None,
    ):
        self._config = config or LaneScopeConfig()
        self._registry = registry or LaneRegistry(
            LaneFetcher(
                base_url=self._config.api_base_url,
                timeout=self._config.request_timeout,
            )
        )
        self._scaling = scaling or ScalingEngine()

    @property
    def config(self) -> LaneScopeConfig:
        return self._config

    @property
    def registry(self) -> LaneRegistry:
        return self._registry

    # =========================================================================
    # PURE INTERFACE
    # =========================================================================

    def build_view(
        self,
        lane: Lane,
        viewport_width: Optional[float] = None,
        viewport_height: Optional[float] = None,
        margin_fraction: Optional[float] = None,
    ) -> LaneGraphView:
        """Scale an in-memory lane with the configured defaults."""
        width = self._config.viewport_width if viewport_width is None else viewport_width
        height = self._config.viewport_height if viewport_height is None else viewport_height
        margin = self._config.margin_fraction if margin_fraction is None else margin_fraction

        scaled = self._scaling.scale_lane(lane, width, height, margin)
        return build_graph_view(lane.id, lane.name, scaled, width, height)

    def inspect(self, lane: Lane) -> TopologyMetrics:
        metrics = LaneTopology(lane).compute_metrics()
        if metrics.dangling_edge_count:
            logger.warning(
                "lane %s has %d dangling edge(s); they are not drawn",
                lane.id, metrics.dangling_edge_count
            )
        if metrics.unreachable_vertex_ids:
            logger.warning(
                "lane %s: vertices %s are unreachable from entry vertices",
                lane.id, list(metrics.unreachable_vertex_ids)
            )
        return metrics

    # =========================================================================
    # RETRIEVAL INTERFACE
    # =========================================================================

    async def load_view(
        self,
        lane_id: str,
        viewport_width: Optional[float] = None,
        viewport_height: Optional[float] = None,
        margin_fraction: Optional[float] = None,
    ) -> LaneViewResult:
        """Fetch (or replay) a lane and build its view."""
        fetch = await self._registry.get(lane_id)
        if not fetch.is_success:
            return LaneViewResult(fetch=fetch)

        lane = fetch.lane
        return LaneViewResult(
            fetch=fetch,
            view=self.build_view(lane, viewport_width, viewport_height, margin_fraction),
            topology=self.inspect(lane),
        )

    def resolve(self, path: Optional[str]) -> LaneRoute:
        return resolve_route(path, self._config.default_lane_id)

    async def load_route(
        self,
        path: Optional[str],
        viewport_width: Optional[float] = None,
        viewport_height: Optional[float] = None,
        margin_fraction: Optional[float] = None,
    ) -> LaneViewResult:
        route = self.resolve(path)
        if route.is_default:
            logger.debug("route %r resolved to default lane %s", path, route.lane_id)
        return await self.load_view(
            route.lane_id, viewport_width, viewport_height, margin_fraction
        )
