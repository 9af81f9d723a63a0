"""
Base Contracts and Shared Types

Foundational error types used across all layers.
All types here are IMMUTABLE and represent pure data.

BOUNDARY ENFORCEMENT:
=====================
- This module is READ-ONLY from all layers
- Errors are data, not exceptions, wherever they cross a layer boundary
- The only exception type here is raised at parse time, before a Lane exists
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Tuple
from enum import Enum, auto


# =============================================================================
# ERROR STATES (Explicit, never silent)
# =============================================================================

class ErrorCode(Enum):
    """
    Explicit error codes for lane retrieval and parsing.
    Every failure state is enumerated.
    """
    # Payload errors
    EMPTY_PAYLOAD = auto()
    MALFORMED_PAYLOAD = auto()
    INVALID_COORDINATES = auto()
    DUPLICATE_VERTEX_ID = auto()

    # Retrieval errors
    LANE_NOT_FOUND = auto()
    SOURCE_UNREACHABLE = auto()
    UPSTREAM_ERROR = auto()


@dataclass(frozen=True)
class Error:
    """
    Immutable error representation with full context.
    Errors are data, not exceptions - they can be stored and returned.
    """
    code: ErrorCode
    message: str
    timestamp: datetime
    context: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    @staticmethod
    def now(code: ErrorCode, message: str) -> Error:
        return Error(code=code, message=message, timestamp=datetime.now(timezone.utc))

    def with_context(self, key: str, value: str) -> Error:
        """Return new Error with additional context (immutable)."""
        return Error(
            code=self.code,
            message=self.message,
            timestamp=self.timestamp,
            context=self.context + ((key, value),)
        )


class LanePayloadError(ValueError):
    """Raised when a lane payload cannot be turned into a Lane."""

    def __init__(self, code: ErrorCode, message: str, path: Optional[str] = None):
        self.code = code
        self.path = path
        if path:
            message = f"{message} (at {path})"
        super().__init__(message)

    def to_error(self) -> Error:
        error = Error.now(self.code, str(self))
        if self.path:
            error = error.with_context("path", self.path)
        return error
