"""
Lane Retrieval Layer

RESPONSIBILITY: Fetch lanes by identifier, share one fetch per identifier
ALLOWED INPUTS: Lane identifiers
OUTPUTS: FetchResult (immutable)
"""

from .contracts import FetchStatus, FetchResult, RegistryStats
from .fetcher import LaneFetcher, DEFAULT_BASE_URL
from .registry import LaneRegistry

__all__ = [
    'FetchStatus',
    'FetchResult',
    'RegistryStats',
    'LaneFetcher',
    'DEFAULT_BASE_URL',
    'LaneRegistry',
]
