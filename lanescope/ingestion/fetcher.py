"""
Lane Fetcher

Retrieves lane graphs from the lane server over HTTP.

PRINCIPLES:
===========
1. Failed fetches are first-class results
2. Parse with the lane contracts, never ad hoc
3. Track attempted_at vs completed_at
"""

from __future__ import annotations
from typing import Optional
from datetime import datetime, timezone
import json
import logging

import httpx

from ..contracts.base import Error, ErrorCode, LanePayloadError
from ..contracts.lane import Lane
from .contracts import FetchResult, FetchStatus

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3000/lanes"


class LaneFetcher:
    """
    Fetches and parses lanes by identifier.

    GUARANTEES:
    ===========
    1. fetch() never raises for HTTP, network or payload problems
    2. A 404 is reported as LANE_NOT_FOUND
    3. The returned Lane is fully validated
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        user_agent: str = "LaneScope/1.0",
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sync_transport: Optional[httpx.BaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._user_agent = user_agent
        self._transport = transport
        self._sync_transport = sync_transport

    def url_for(self, lane_id: str) -> str:
        return f"{self._base_url}/{lane_id}"

    async def fetch(self, lane_id: str) -> FetchResult:
        """Fetch one lane. Always returns a FetchResult."""
        url = self.url_for(lane_id)
        attempted_at = _utcnow()

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport
            ) as client:
                response = await client.get(
                    url,
                    headers={'User-Agent': self._user_agent, 'Accept': 'application/json'},
                    follow_redirects=True
                )
        except httpx.TimeoutException:
            return self._failure(
                lane_id, url, attempted_at, FetchStatus.TIMEOUT,
                ErrorCode.SOURCE_UNREACHABLE, f"timed out after {self._timeout}s"
            )
        except httpx.HTTPError as e:
            return self._failure(
                lane_id, url, attempted_at, FetchStatus.NETWORK_ERROR,
                ErrorCode.SOURCE_UNREACHABLE, str(e) or type(e).__name__
            )

        return self._interpret(lane_id, url, attempted_at, response)

    def fetch_sync(self, lane_id: str) -> FetchResult:
        """Synchronous version of fetch."""
        url = self.url_for(lane_id)
        attempted_at = _utcnow()

        try:
            with httpx.Client(timeout=self._timeout, transport=self._sync_transport) as client:
                response = client.get(
                    url,
                    headers={'User-Agent': self._user_agent, 'Accept': 'application/json'},
                    follow_redirects=True
                )
        except httpx.TimeoutException:
            return self._failure(
                lane_id, url, attempted_at, FetchStatus.TIMEOUT,
                ErrorCode.SOURCE_UNREACHABLE, f"timed out after {self._timeout}s"
            )
        except httpx.HTTPError as e:
            return self._failure(
                lane_id, url, attempted_at, FetchStatus.NETWORK_ERROR,
                ErrorCode.SOURCE_UNREACHABLE, str(e) or type(e).__name__
            )

        return self._interpret(lane_id, url, attempted_at, response)

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _interpret(
        self,
        lane_id: str,
        url: str,
        attempted_at: datetime,
        response: httpx.Response
    ) -> FetchResult:
        if response.status_code != 200:
            code = (
                ErrorCode.LANE_NOT_FOUND if response.status_code == 404
                else ErrorCode.UPSTREAM_ERROR
            )
            return self._failure(
                lane_id, url, attempted_at, FetchStatus.HTTP_ERROR,
                code, f"HTTP {response.status_code}", http_status=response.status_code
            )

        try:
            lane = Lane.from_dict(response.json())
        except json.JSONDecodeError as e:
            return self._failure(
                lane_id, url, attempted_at, FetchStatus.PARSE_ERROR,
                ErrorCode.MALFORMED_PAYLOAD, f"invalid JSON: {e}",
                http_status=response.status_code
            )
        except LanePayloadError as e:
            return self._failure(
                lane_id, url, attempted_at, FetchStatus.PARSE_ERROR,
                e.code, str(e), http_status=response.status_code
            )

        logger.debug("fetched lane %s (%d vertices) from %s", lane_id, len(lane.vertices), url)
        return FetchResult(
            lane_id=lane_id,
            url=url,
            status=FetchStatus.SUCCESS,
            attempted_at=attempted_at,
            completed_at=_utcnow(),
            lane=lane,
            http_status=response.status_code,
        )

    def _failure(
        self,
        lane_id: str,
        url: str,
        attempted_at: datetime,
        status: FetchStatus,
        code: ErrorCode,
        message: str,
        http_status: Optional[int] = None
    ) -> FetchResult:
        logger.warning("fetch of lane %s failed: %s (%s)", lane_id, message, status.value)
        return FetchResult(
            lane_id=lane_id,
            url=url,
            status=status,
            attempted_at=attempted_at,
            completed_at=_utcnow(),
            http_status=http_status,
            error=Error.now(code, message).with_context("url", url),
        )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)
