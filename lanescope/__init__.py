"""
LaneScope

Fits drive-through lane graphs into a fixed-size viewport.

PACKAGES:
=========
contracts  - immutable lane data model and wire parsing
core       - scaling engine (pure) and topology diagnostics
ingestion  - HTTP lane retrieval and single-flight registry
frontend   - markers, renderable views and route resolution
api        - FastAPI read service
"""

__version__ = "0.1.0"
