from __future__ import annotations

from .builder import build_dense_table, build_percentile_table
from .lookup import estimate_rank, fallback_percentile, lookup_percentile, resolve_percentile
from .parser import parse_anchor_text
from .store import InMemoryPercentileMapStore, PercentileMapStore
from .value_objects import (
    AnchorParseResult,
    PercentileLookupResult,
    PercentileMapDocument,
    PercentileTableResult,
    RawAnchor,
    ValidatedAnchor,
)

__all__ = [
    "build_dense_table",
    "build_percentile_table",
    "parse_anchor_text",
    "lookup_percentile",
    "resolve_percentile",
    "fallback_percentile",
    "estimate_rank",
    "PercentileMapStore",
    "InMemoryPercentileMapStore",
    "RawAnchor",
    "ValidatedAnchor",
    "AnchorParseResult",
    "PercentileTableResult",
    "PercentileMapDocument",
    "PercentileLookupResult",
]
