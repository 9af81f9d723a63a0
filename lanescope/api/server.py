"""
LaneScope: Read API Server
==========================

Read-only API serving scaled lane views.

Endpoints:
- GET /health                          -> status + registry stats
- GET /api/v1/lanes/{lane_id}/view     -> scaled view of one lane
- GET /api/v1/routes/{path}            -> scaled view of the lane a route selects

Usage:
    uvicorn lanescope.api.server:app --reload
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware

from ..config import LaneScopeConfig
from ..contracts.base import ErrorCode
from ..engine import LaneScopeBackend, LaneViewResult
from .mapper import LaneViewDTO, map_fetch_error, map_view_to_dto

logger = logging.getLogger(__name__)


# =============================================================================
# INFRASTRUCTURE SETUP
# =============================================================================

def create_app(
    config: Optional[LaneScopeConfig] = None,
    backend: Optional[LaneScopeBackend] = None
) -> FastAPI:
    """Build the API. A supplied backend is used as-is; otherwise one is built at startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "backend", None) is None:
            cfg = config or LaneScopeConfig.from_env()
            logger.info("initializing lane backend against %s", cfg.api_base_url)
            app.state.backend = LaneScopeBackend(cfg)
        yield
        logger.info("shutting down lane backend")

    app = FastAPI(
        title="LaneScope API",
        version="0.1.0",
        description="Scaled lane views for drive-through lane visualization",
        lifespan=lifespan
    )
    app.state.backend = backend

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    # =========================================================================
    # ENDPOINTS
    # =========================================================================

    @app.get("/health")
    async def health_check(request: Request):
        backend = _backend(request)
        stats = backend.registry.stats()
        return {
            "status": "online",
            "cached_lanes": stats.cached_count,
            "in_flight": stats.in_flight_count,
        }

    @app.get("/api/v1/lanes/{lane_id}/view", response_model=LaneViewDTO)
    async def get_lane_view(
        request: Request,
        lane_id: str,
        width: Optional[float] = Query(None, gt=0),
        height: Optional[float] = Query(None, gt=0),
        margin: Optional[float] = Query(None, ge=0, lt=0.5),
    ):
        backend = _backend(request)
        result = await backend.load_view(lane_id, width, height, margin)
        return _respond(backend, result, margin)

    @app.get("/api/v1/routes/{path:path}", response_model=LaneViewDTO)
    async def get_route_view(
        request: Request,
        path: str,
        width: Optional[float] = Query(None, gt=0),
        height: Optional[float] = Query(None, gt=0),
        margin: Optional[float] = Query(None, ge=0, lt=0.5),
    ):
        backend = _backend(request)
        result = await backend.load_route(path, width, height, margin)
        return _respond(backend, result, margin)

    return app


def _backend(request: Request) -> LaneScopeBackend:
    backend = getattr(request.app.state, "backend", None)
    if backend is None:
        raise HTTPException(status_code=503, detail="Backend not initialized")
    return backend


def _respond(backend: LaneScopeBackend, result: LaneViewResult, margin: Optional[float]) -> LaneViewDTO:
    if not result.is_success:
        error = map_fetch_error(result.fetch)
        not_found = result.fetch.error is not None and result.fetch.error.code == ErrorCode.LANE_NOT_FOUND
        raise HTTPException(status_code=404 if not_found else 502, detail=error.model_dump())

    effective_margin = backend.config.margin_fraction if margin is None else margin
    return map_view_to_dto(result.view, effective_margin, result.topology)


app = create_app()
