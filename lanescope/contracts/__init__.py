"""
Lane Contracts Package

Immutable data structures shared by every layer.

BOUNDARY ENFORCEMENT:
=====================
1. All contracts are frozen (immutable)
2. Wire payloads become contracts only through Lane.from_dict()
3. No layer mutates a Lane it did not create
"""

from .base import ErrorCode, Error, LanePayloadError
from .lane import Coordinates, Adjacent, Vertex, Lane, VertexType

__all__ = [
    # Errors
    'ErrorCode',
    'Error',
    'LanePayloadError',
    # Lane
    'Coordinates',
    'Adjacent',
    'Vertex',
    'Lane',
    'VertexType',
]
