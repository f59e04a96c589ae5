"""Score to percentile conversion.

The table-driven path is exact: the score is rounded half-up to a mark,
clamped into the table and the stored value returned.

When a test has no usable map the fallback produces a *placeholder*, not a
percentile: ``score% * weight + jitter`` with jitter drawn from
``[0, span)``, rounded and capped below 100. In ``random`` mode repeated calls
for the same score differ, so tests should only assert its range. The
``deterministic`` mode replaces the jitter with the midpoint of its span.
"""

from __future__ import annotations

import math
import random
from typing import Literal, Optional

from gearx.core.config import settings
from gearx.core.logging import get_logger
from gearx.core.metrics import inc_counter
from gearx.core.numeric import clamp, round_half_up, safe_div, safe_round
from gearx.engine.percentiles.validation import coerce_table
from gearx.engine.percentiles.value_objects import PercentileLookupResult, PercentileMapDocument

logger = get_logger("gearx.engine.percentiles.lookup", component="engine")

FallbackMode = Literal["random", "deterministic"]

_rng = random.Random()

__all__ = [
    "table_index",
    "fallback_percentile",
    "resolve_percentile",
    "lookup_percentile",
    "estimate_rank",
]


def table_index(score: float, length: int) -> int:
    """Map a (possibly fractional or non-finite) score onto ``[0, length - 1]``."""
    if length <= 0:
        raise ValueError("length must be positive")
    if math.isnan(score):
        return 0
    if math.isinf(score):
        return length - 1 if score > 0 else 0
    return clamp(round_half_up(score), 0, length - 1)


def fallback_percentile(
    score: float,
    max_possible_score: float,
    *,
    mode: Optional[FallbackMode] = None,
    rng: Optional[random.Random] = None,
) -> float:
    """Approximate placeholder percentile used when no map is available."""
    mode = mode or settings.fallback_mode
    span = settings.fallback_jitter_span
    cap = settings.fallback_percentile_cap

    percentage = safe_div(float(score), float(max_possible_score), default=0.0) * 100.0
    if not math.isfinite(percentage):
        percentage = 0.0 if math.isnan(percentage) or percentage < 0 else 100.0
    if mode == "deterministic":
        jitter = span / 2.0
    else:
        jitter = (rng or _rng).random() * span
    blended = percentage * settings.fallback_score_weight + jitter
    return safe_round(clamp(blended, 0.0, cap), 2)


def resolve_percentile(
    score: float,
    document: Optional[PercentileMapDocument],
    max_possible_score: float,
    *,
    mode: Optional[FallbackMode] = None,
    rng: Optional[random.Random] = None,
) -> PercentileLookupResult:
    """Look ``score`` up in ``document`` or fall back to the heuristic.

    Never raises because the map is missing or malformed.
    """
    table = coerce_table(document.table) if document is not None else None
    if table is not None:
        index = table_index(float(score), len(table))
        inc_counter("percentile.lookup.table")
        return PercentileLookupResult(
            percentile=clamp(table[index], 0.0, 100.0),
            source="table",
            index=index,
        )

    if document is not None:
        logger.warning(
            "percentile_map_malformed",
            extra={"structured_data": {"test_id": document.test_id}},
        )
    inc_counter("percentile.lookup.fallback")
    value = fallback_percentile(score, max_possible_score, mode=mode, rng=rng)
    return PercentileLookupResult(percentile=value, source="fallback")


def lookup_percentile(
    score: float,
    document: Optional[PercentileMapDocument],
    max_possible_score: float,
) -> float:
    return resolve_percentile(score, document, max_possible_score).percentile


def estimate_rank(percentile: float, candidates: Optional[int] = None) -> int:
    """Rough all-India rank implied by ``percentile`` among ``candidates`` test takers."""
    population = candidates if candidates is not None else settings.estimated_candidates
    return max(1, round_half_up((100.0 - percentile) / 100.0 * population))
