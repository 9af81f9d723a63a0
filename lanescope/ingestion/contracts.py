"""
Lane Retrieval Contracts

Immutable data structures for lane retrieval.

BOUNDARY: Ingestion Layer
Every lane fetched over HTTP enters through these contracts.
Failed fetches are first-class results, not exceptions.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
from datetime import datetime
from enum import Enum

from ..contracts.base import Error
from ..contracts.lane import Lane


# =============================================================================
# ENUMS
# =============================================================================

class FetchStatus(Enum):
    """Status of a fetch attempt."""
    SUCCESS = "success"
    TIMEOUT = "timeout"
    HTTP_ERROR = "http_error"
    PARSE_ERROR = "parse_error"
    NETWORK_ERROR = "network_error"


# =============================================================================
# RESULTS
# =============================================================================

@dataclass(frozen=True)
class FetchResult:
    """
    Outcome of one lane fetch.

    Exactly one of `lane` and `error` is set.
    """
    lane_id: str
    url: str
    status: FetchStatus
    attempted_at: datetime
    completed_at: datetime
    lane: Optional[Lane] = None
    http_status: Optional[int] = None
    error: Optional[Error] = None

    @property
    def is_success(self) -> bool:
        return self.status == FetchStatus.SUCCESS and self.lane is not None

    @property
    def duration_ms(self) -> float:
        return (self.completed_at - self.attempted_at).total_seconds() * 1000


@dataclass(frozen=True)
class RegistryStats:
    """Point-in-time statistics of a LaneRegistry."""
    cached_count: int
    in_flight_count: int
    hit_count: int
    miss_count: int
    eviction_count: int

    @property
    def hit_rate(self) -> float:
        total = self.hit_count + self.miss_count
        return self.hit_count / total if total > 0 else 0.0
