"""
Lane Retrieval Tests
====================

Fetcher outcome mapping over a mocked transport, and single-flight
semantics of the lane registry.
"""

import asyncio
from datetime import datetime, timezone

import httpx
import pytest

from lanescope.contracts import ErrorCode, Lane
from lanescope.ingestion import (
    FetchResult, FetchStatus, LaneFetcher, LaneRegistry, RegistryStats,
)

BASE_URL = "http://lanes.test/lanes"

LANE_JSON = {
    "id": "680bc0",
    "name": "Lane 1",
    "vertices": [
        {"id": 0, "name": "A", "isEntry": True, "location": {"coordinates": [0, 0]},
         "adjacent": [{"adjacentVertex": 1, "interiorPath": []}]},
        {"id": 1, "name": "B", "location": {"coordinates": [10, 5]}},
    ],
}


def make_fetcher(handler) -> LaneFetcher:
    transport = httpx.MockTransport(handler)
    return LaneFetcher(base_url=BASE_URL, transport=transport, sync_transport=transport)


def ok_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json=LANE_JSON)


# =============================================================================
# FETCHER
# =============================================================================

class TestLaneFetcher:

    def test_url_for_strips_trailing_slash(self):
        fetcher = LaneFetcher(base_url=BASE_URL + "/")
        assert fetcher.url_for("680bc0") == "http://lanes.test/lanes/680bc0"

    def test_success(self):
        seen = []

        def handler(request):
            seen.append(request)
            return ok_handler(request)

        result = asyncio.run(make_fetcher(handler).fetch("680bc0"))

        assert result.is_success
        assert result.status == FetchStatus.SUCCESS
        assert result.http_status == 200
        assert result.lane.id == "680bc0"
        assert len(result.lane.vertices) == 2
        assert result.error is None
        assert result.completed_at >= result.attempted_at
        assert str(seen[0].url) == "http://lanes.test/lanes/680bc0"
        assert seen[0].headers["Accept"] == "application/json"

    def test_sync_success(self):
        result = make_fetcher(ok_handler).fetch_sync("680bc0")
        assert result.is_success
        assert result.lane.name == "Lane 1"

    def test_not_found(self):
        fetcher = make_fetcher(lambda request: httpx.Response(404))
        result = asyncio.run(fetcher.fetch("missing"))

        assert not result.is_success
        assert result.status == FetchStatus.HTTP_ERROR
        assert result.http_status == 404
        assert result.error.code == ErrorCode.LANE_NOT_FOUND
        assert ("url", "http://lanes.test/lanes/missing") in result.error.context

    @pytest.mark.parametrize("status", [500, 503, 401])
    def test_other_http_errors(self, status):
        fetcher = make_fetcher(lambda request: httpx.Response(status))
        result = fetcher.fetch_sync("680bc0")

        assert result.status == FetchStatus.HTTP_ERROR
        assert result.http_status == status
        assert result.error.code == ErrorCode.UPSTREAM_ERROR

    def test_invalid_json(self):
        fetcher = make_fetcher(lambda request: httpx.Response(200, content=b"{not json"))
        result = asyncio.run(fetcher.fetch("680bc0"))

        assert result.status == FetchStatus.PARSE_ERROR
        assert result.error.code == ErrorCode.MALFORMED_PAYLOAD
        assert result.lane is None

    def test_invalid_payload(self):
        payload = {"id": "x", "vertices": [{"id": 0, "location": {"coordinates": [1]}}]}
        fetcher = make_fetcher(lambda request: httpx.Response(200, json=payload))
        result = asyncio.run(fetcher.fetch("x"))

        assert result.status == FetchStatus.PARSE_ERROR
        assert result.error.code == ErrorCode.INVALID_COORDINATES

    def test_oversized_integer_coordinate_is_parse_error(self):
        body = (
            b'{"id": "big", "name": "Big", "vertices": [{"id": 0, "name": "v", '
            b'"location": {"coordinates": [1' + b"0" * 400 + b', 0]}}]}'
        )
        fetcher = make_fetcher(lambda request: httpx.Response(200, content=body))

        result = asyncio.run(fetcher.fetch("big"))
        assert result.status == FetchStatus.PARSE_ERROR
        assert result.error.code == ErrorCode.INVALID_COORDINATES

        result = fetcher.fetch_sync("big")
        assert result.status == FetchStatus.PARSE_ERROR

    def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        result = asyncio.run(make_fetcher(handler).fetch("680bc0"))

        assert result.status == FetchStatus.NETWORK_ERROR
        assert result.error.code == ErrorCode.SOURCE_UNREACHABLE
        assert result.http_status is None

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("too slow", request=request)

        result = make_fetcher(handler).fetch_sync("680bc0")

        assert result.status == FetchStatus.TIMEOUT
        assert result.error.code == ErrorCode.SOURCE_UNREACHABLE


# =============================================================================
# REGISTRY
# =============================================================================

class CountingFetch:
    """Fake fetch that records calls and yields to the loop before answering."""

    def __init__(self, fail_ids=()):
        self.calls = []
        self._fail_ids = set(fail_ids)

    async def __call__(self, lane_id: str) -> FetchResult:
        self.calls.append(lane_id)
        await asyncio.sleep(0.01)
        now = datetime.now(timezone.utc)
        if lane_id in self._fail_ids:
            return FetchResult(
                lane_id=lane_id, url=f"{BASE_URL}/{lane_id}", status=FetchStatus.HTTP_ERROR,
                attempted_at=now, completed_at=now, http_status=500,
            )
        return FetchResult(
            lane_id=lane_id, url=f"{BASE_URL}/{lane_id}", status=FetchStatus.SUCCESS,
            attempted_at=now, completed_at=now, lane=Lane.from_dict(LANE_JSON), http_status=200,
        )


class TestLaneRegistry:

    def test_concurrent_requests_share_one_fetch(self):
        fetch = CountingFetch()
        registry = LaneRegistry(fetch=fetch)

        async def scenario():
            return await asyncio.gather(*(registry.get("680bc0") for _ in range(5)))

        results = asyncio.run(scenario())

        assert fetch.calls == ["680bc0"]
        assert all(r is results[0] for r in results)
        stats = registry.stats()
        assert stats.miss_count == 1
        assert stats.hit_count == 4

    def test_completed_result_is_replayed(self):
        fetch = CountingFetch()
        registry = LaneRegistry(fetch=fetch)

        async def scenario():
            first = await registry.get("680bc0")
            second = await registry.get("680bc0")
            return first, second

        first, second = asyncio.run(scenario())

        assert first is second
        assert fetch.calls == ["680bc0"]
        assert registry.peek("680bc0") is first
        assert not registry.is_in_flight("680bc0")

    def test_distinct_ids_fetch_independently(self):
        fetch = CountingFetch()
        registry = LaneRegistry(fetch=fetch)

        async def scenario():
            await asyncio.gather(registry.get("a"), registry.get("b"), registry.get("a"))

        asyncio.run(scenario())

        assert sorted(fetch.calls) == ["a", "b"]
        assert registry.stats().cached_count == 2

    def test_failed_fetch_is_delivered_then_retried(self):
        fetch = CountingFetch(fail_ids={"bad"})
        registry = LaneRegistry(fetch=fetch)

        async def scenario():
            concurrent = await asyncio.gather(registry.get("bad"), registry.get("bad"))
            later = await registry.get("bad")
            return concurrent, later

        concurrent, later = asyncio.run(scenario())

        assert all(not r.is_success for r in concurrent)
        assert not later.is_success
        assert fetch.calls == ["bad", "bad"]
        assert registry.peek("bad") is None
        assert registry.stats().eviction_count == 2

    def test_invalidate_forces_refetch(self):
        fetch = CountingFetch()
        registry = LaneRegistry(fetch=fetch)

        async def scenario():
            await registry.get("680bc0")
            registry.invalidate("680bc0")
            await registry.get("680bc0")

        asyncio.run(scenario())
        assert fetch.calls == ["680bc0", "680bc0"]
        assert registry.stats().eviction_count == 1

    def test_clear(self):
        fetch = CountingFetch()
        registry = LaneRegistry(fetch=fetch)

        async def scenario():
            await asyncio.gather(registry.get("a"), registry.get("b"))

        asyncio.run(scenario())
        registry.clear()

        stats = registry.stats()
        assert stats.cached_count == 0
        assert stats.eviction_count == 2

    def test_invalidate_unknown_id_is_noop(self):
        registry = LaneRegistry(fetch=CountingFetch())
        registry.invalidate("nothing")
        assert registry.stats().eviction_count == 0

    def test_registry_over_fetcher(self):
        registry = LaneRegistry(make_fetcher(ok_handler))
        result = asyncio.run(registry.get("680bc0"))
        assert result.is_success
        assert registry.stats().cached_count == 1


class TestRegistryStats:

    def test_hit_rate(self):
        assert RegistryStats(1, 0, 3, 1, 0).hit_rate == 0.75

    def test_hit_rate_without_requests(self):
        assert RegistryStats(0, 0, 0, 0, 0).hit_rate == 0.0
