"""
Lane Registry

Single-flight, per-identifier cache of lane fetches.

SEMANTICS:
==========
1. The first request for an id starts exactly one fetch
2. Concurrent requests for the same id await that same fetch
3. Later requests replay the completed result without refetching
4. Failed results are delivered, then evicted so the next request retries

The registry is owned by whoever constructs it; there is no module global.
"""

from __future__ import annotations
from typing import Awaitable, Callable, Dict, Optional
import asyncio
import logging

from .contracts import FetchResult, RegistryStats
from .fetcher import LaneFetcher

logger = logging.getLogger(__name__)

FetchFn = Callable[[str], Awaitable[FetchResult]]


class LaneRegistry:
    """Keyed registry of memoized lane fetches."""

    def __init__(self, fetcher: Optional[LaneFetcher] = None, fetch: Optional[FetchFn] = None):
        if fetch is None:
            fetch = (fetcher or LaneFetcher()).fetch
        self._fetch = fetch
        self._completed: Dict[str, FetchResult] = {}
        self._in_flight: Dict[str, asyncio.Task] = {}
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    async def get(self, lane_id: str) -> FetchResult:
        """Return the fetch result for a lane, fetching at most once."""
        cached = self._completed.get(lane_id)
        if cached is not None:
            self._hits += 1
            return cached

        task = self._in_flight.get(lane_id)
        if task is None:
            self._misses += 1
            task = asyncio.ensure_future(self._run(lane_id))
            self._in_flight[lane_id] = task
        else:
            self._hits += 1
            logger.debug("joining in-flight fetch for lane %s", lane_id)

        # Shielded so one cancelled caller does not cancel the shared fetch.
        return await asyncio.shield(task)

    async def _run(self, lane_id: str) -> FetchResult:
        try:
            result = await self._fetch(lane_id)
        finally:
            self._in_flight.pop(lane_id, None)

        if result.is_success:
            self._completed[lane_id] = result
        else:
            self._evictions += 1
            logger.info("not caching failed fetch for lane %s", lane_id)
        return result

    def peek(self, lane_id: str) -> Optional[FetchResult]:
        """Completed result for an id, without triggering a fetch."""
        return self._completed.get(lane_id)

    def is_in_flight(self, lane_id: str) -> bool:
        return lane_id in self._in_flight

    def invalidate(self, lane_id: str):
        """Drop a completed result; the next get() fetches again."""
        if self._completed.pop(lane_id, None) is not None:
            self._evictions += 1

    def clear(self):
        self._evictions += len(self._completed)
        self._completed.clear()

    def stats(self) -> RegistryStats:
        return RegistryStats(
            cached_count=len(self._completed),
            in_flight_count=len(self._in_flight),
            hit_count=self._hits,
            miss_count=self._misses,
            eviction_count=self._evictions,
        )
