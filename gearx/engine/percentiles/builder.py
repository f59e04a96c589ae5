from __future__ import annotations

from typing import Dict, Iterable, List

from gearx.core.logging import get_logger
from gearx.core.metrics import inc_counter, timer
from gearx.core.numeric import clamp, safe_round
from gearx.engine.percentiles.parser import parse_anchor_text
from gearx.engine.percentiles.validation import validate_max_marks
from gearx.engine.percentiles.value_objects import PercentileTableResult, ValidatedAnchor

logger = get_logger("gearx.engine.percentiles.builder", component="engine")

__all__ = ["build_dense_table", "build_percentile_table"]


def _last_wins(anchors: Iterable[ValidatedAnchor]) -> List[ValidatedAnchor]:
    by_mark: Dict[int, float] = {}
    for anchor in anchors:
        by_mark[anchor.mark] = anchor.percentile
    return [ValidatedAnchor(mark=mark, percentile=by_mark[mark]) for mark in sorted(by_mark)]


def build_dense_table(anchors: Iterable[ValidatedAnchor], max_marks: int) -> List[float]:
    """Expand sparse anchors into a percentile for every mark ``0..max_marks``.

    Duplicate marks keep the last anchor seen. Slots below the first anchor
    and above the last one repeat that anchor's percentile; slots between
    two anchors are linearly interpolated. A left-to-right pass then lifts
    any slot that is lower than its predecessor, so erroneous non-monotonic
    input still produces a non-decreasing table. Values are rounded to two
    decimals and kept inside ``[0, 100]``.

    Raises:
        ValueError: if ``anchors`` is empty.
    """
    max_marks = validate_max_marks(max_marks)
    known = _last_wins(anchors)
    if not known:
        raise ValueError("at least one anchor is required to build a percentile table")

    size = max_marks + 1
    table: List[float] = [0.0] * size

    first, last = known[0], known[-1]
    for mark in range(0, first.mark):
        table[mark] = first.percentile
    for mark in range(last.mark + 1, size):
        table[mark] = last.percentile

    for lower, upper in zip(known, known[1:]):
        span = upper.mark - lower.mark
        delta = upper.percentile - lower.percentile
        for mark in range(lower.mark + 1, upper.mark):
            table[mark] = lower.percentile + delta * (mark - lower.mark) / span

    for anchor in known:
        table[anchor.mark] = anchor.percentile

    for mark in range(1, size):
        if table[mark] < table[mark - 1]:
            table[mark] = table[mark - 1]

    return [clamp(safe_round(value, 2), 0.0, 100.0) for value in table]


def build_percentile_table(raw_text: str, max_marks: int) -> PercentileTableResult:
    """Parse ``raw_text`` and build the dense table in one step.

    Line errors are returned alongside a valid table (partial success); the
    table is ``None`` only when no row could be used.
    """
    with timer("percentile.build"):
        parsed = parse_anchor_text(raw_text, max_marks)
        if not parsed.ok:
            inc_counter("percentile.build.failed")
            return PercentileTableResult(table=None, errors=list(parsed.errors))
        table = build_dense_table(parsed.anchors, max_marks)

    inc_counter("percentile.build.success")
    logger.info(
        "percentile_table_built",
        extra={
            "structured_data": {
                "max_marks": len(table) - 1,
                "anchors": len(parsed.anchors),
                "line_errors": len(parsed.errors),
            }
        },
    )
    return PercentileTableResult(table=table, errors=list(parsed.errors), anchor_count=len(parsed.anchors))
