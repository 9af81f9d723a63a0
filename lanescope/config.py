"""
Configuration

Single dataclass for every tunable, with environment overrides.

ENVIRONMENT:
============
LANESCOPE_API_BASE_URL     lane server base URL
LANESCOPE_TIMEOUT          request timeout in seconds
LANESCOPE_VIEWPORT_WIDTH   default viewport width (px)
LANESCOPE_VIEWPORT_HEIGHT  default viewport height (px)
LANESCOPE_MARGIN           default margin fraction
LANESCOPE_DEFAULT_LANE     lane shown when a route names none
LANESCOPE_LOG_LEVEL        logging level name
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Mapping, Optional
import os

from .frontend.interaction.navigation import DEFAULT_LANE_ID
from .ingestion.fetcher import DEFAULT_BASE_URL


@dataclass
class LaneScopeConfig:
    """Unified configuration for the lane viewer."""
    api_base_url: str = DEFAULT_BASE_URL
    request_timeout: float = 10.0
    viewport_width: float = 1920
    viewport_height: float = 1080
    margin_fraction: float = 0.05
    default_lane_id: str = DEFAULT_LANE_ID
    log_level: str = "INFO"

    def __post_init__(self):
        if self.viewport_width <= 0 or self.viewport_height <= 0:
            raise ValueError("viewport dimensions must be positive")
        if not 0.0 <= self.margin_fraction < 0.5:
            raise ValueError("margin_fraction must be in [0, 0.5)")
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")
        if not self.default_lane_id:
            raise ValueError("default_lane_id must be a non-empty string")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'LaneScopeConfig':
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            api_base_url=env.get("LANESCOPE_API_BASE_URL", defaults.api_base_url),
            request_timeout=float(env.get("LANESCOPE_TIMEOUT", defaults.request_timeout)),
            viewport_width=float(env.get("LANESCOPE_VIEWPORT_WIDTH", defaults.viewport_width)),
            viewport_height=float(env.get("LANESCOPE_VIEWPORT_HEIGHT", defaults.viewport_height)),
            margin_fraction=float(env.get("LANESCOPE_MARGIN", defaults.margin_fraction)),
            default_lane_id=env.get("LANESCOPE_DEFAULT_LANE", defaults.default_lane_id),
            log_level=env.get("LANESCOPE_LOG_LEVEL", defaults.log_level),
        )
