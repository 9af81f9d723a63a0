"""
Read API Tests
==============

Endpoints exercised through FastAPI's TestClient with a registry backed by
an in-memory fetch.
"""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from lanescope.api.server import create_app
from lanescope.config import LaneScopeConfig
from lanescope.contracts import Error, ErrorCode, Lane
from lanescope.engine import LaneScopeBackend
from lanescope.ingestion import FetchResult, FetchStatus, LaneRegistry

LANES = {
    "680bc0": {
        "id": "680bc0",
        "name": "Lane 1",
        "vertices": [
            {"id": 0, "name": "Start", "vertexType": "SERVICE_POINT", "isEntry": True,
             "location": {"coordinates": [0, 0]},
             "adjacent": [{"adjacentVertex": 1, "interiorPath": [{"coordinates": [5, 5]}]}]},
            {"id": 1, "name": "End", "vertexType": "LANE_MERGE",
             "location": {"coordinates": [10, 0]}},
        ],
    },
    "dangling": {
        "id": "dangling",
        "name": "Broken",
        "vertices": [
            {"id": 0, "name": "A", "location": {"coordinates": [0, 0]},
             "adjacent": [{"adjacentVertex": 7}]},
            {"id": 1, "name": "B", "location": {"coordinates": [10, 10]}},
        ],
    },
}


async def fake_fetch(lane_id: str) -> FetchResult:
    now = datetime.now(timezone.utc)
    url = f"http://lanes.test/lanes/{lane_id}"
    if lane_id == "offline":
        return FetchResult(
            lane_id=lane_id, url=url, status=FetchStatus.NETWORK_ERROR,
            attempted_at=now, completed_at=now,
            error=Error.now(ErrorCode.SOURCE_UNREACHABLE, "connection refused"),
        )
    if lane_id not in LANES:
        return FetchResult(
            lane_id=lane_id, url=url, status=FetchStatus.HTTP_ERROR,
            attempted_at=now, completed_at=now, http_status=404,
            error=Error.now(ErrorCode.LANE_NOT_FOUND, "HTTP 404"),
        )
    return FetchResult(
        lane_id=lane_id, url=url, status=FetchStatus.SUCCESS,
        attempted_at=now, completed_at=now, http_status=200,
        lane=Lane.from_dict(LANES[lane_id]),
    )


@pytest.fixture
def client():
    config = LaneScopeConfig(viewport_width=120, viewport_height=120, margin_fraction=0.1)
    backend = LaneScopeBackend(config, registry=LaneRegistry(fetch=fake_fetch))
    return TestClient(create_app(config, backend))


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "online", "cached_lanes": 0, "in_flight": 0}

    def test_health_counts_cached_lanes(self, client):
        client.get("/api/v1/lanes/680bc0/view")
        assert client.get("/health").json()["cached_lanes"] == 1


class TestLaneView:

    def test_view_with_explicit_viewport(self, client):
        response = client.get("/api/v1/lanes/680bc0/view?width=100&height=100&margin=0")
        assert response.status_code == 200

        data = response.json()
        assert data["lane_id"] == "680bc0"
        assert data["lane_name"] == "Lane 1"
        assert data["viewport"] == {"width": 100.0, "height": 100.0, "margin": 0.0}
        assert data["path_data"] == "M 0 75 L 50 25 L 100 75"
        assert data["transform"]["scale"] == 10.0
        assert data["lane_width_px"] == 25.0
        assert [n["shape"] for n in data["nodes"]] == ["circle", "triangle"]
        assert data["nodes"][0]["is_entry"] is True
        assert data["topology"]["edge_count"] == 1

    def test_view_uses_configured_defaults(self, client):
        data = client.get("/api/v1/lanes/680bc0/view").json()
        assert data["viewport"] == {"width": 120.0, "height": 120.0, "margin": 0.1}
        assert data["transform"]["scale"] == pytest.approx(9.6)

    def test_dangling_edges_reported(self, client):
        data = client.get("/api/v1/lanes/dangling/view?width=100&height=100&margin=0").json()
        assert data["path_data"] == ""
        assert data["topology"]["dangling_edge_count"] == 1

    def test_unknown_lane_is_404(self, client):
        response = client.get("/api/v1/lanes/nope/view")
        assert response.status_code == 404
        detail = response.json()["detail"]
        assert detail["code"] == "LANE_NOT_FOUND"
        assert detail["lane_id"] == "nope"
        assert detail["http_status"] == 404

    def test_unreachable_source_is_502(self, client):
        response = client.get("/api/v1/lanes/offline/view")
        assert response.status_code == 502
        assert response.json()["detail"]["code"] == "SOURCE_UNREACHABLE"

    @pytest.mark.parametrize("query", ["width=0", "height=-1", "margin=0.5", "margin=-0.1"])
    def test_invalid_viewport_is_422(self, client, query):
        response = client.get(f"/api/v1/lanes/680bc0/view?{query}")
        assert response.status_code == 422


class TestRoutes:

    def test_lane_route(self, client):
        data = client.get("/api/v1/routes/lane/dangling").json()
        assert data["lane_id"] == "dangling"

    def test_unknown_route_falls_back_to_default_lane(self, client):
        data = client.get("/api/v1/routes/settings").json()
        assert data["lane_id"] == "680bc0"


class TestUninitialized:

    def test_missing_backend_is_503(self):
        response = TestClient(create_app(LaneScopeConfig())).get("/health")
        assert response.status_code == 503
