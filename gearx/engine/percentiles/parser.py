"""Line-oriented parser for pasted or uploaded percentile anchors.

Administrators paste spreadsheet exports, so the parser tolerates commas,
semicolons, tabs and spaces (mixed freely) and a single header row. Bad rows
are reported by line number and skipped; they never abort the parse.
"""

from __future__ import annotations

import re
from typing import Iterator, List, Tuple

from gearx.core.logging import get_logger
from gearx.core.metrics import inc_counter
from gearx.core.numeric import clamp, parse_finite, round_half_up
from gearx.engine.percentiles.validation import validate_max_marks
from gearx.engine.percentiles.value_objects import AnchorParseResult, RawAnchor, ValidatedAnchor
from gearx.i18n.en_messages import PercentileMessages

logger = get_logger("gearx.engine.percentiles.parser", component="engine")

_TOKEN_SPLIT = re.compile(r"[,;\s]+")
_HEADER_HINT = re.compile(r"[A-Za-z]")

__all__ = ["iter_raw_anchors", "validate_anchor", "parse_anchor_text"]


def _numbered_lines(raw_text: str) -> Iterator[Tuple[int, str]]:
    # Blank lines are dropped before numbering.
    non_blank = (line.strip() for line in raw_text.splitlines())
    yield from enumerate((line for line in non_blank if line), start=1)


def iter_raw_anchors(raw_text: str, errors: List[str]) -> Iterator[RawAnchor]:
    """Yield one :class:`RawAnchor` per usable line, appending line errors to ``errors``.

    Only the first non-blank line is considered as a header candidate.
    """
    first = True
    for number, line in _numbered_lines(raw_text or ""):
        if first:
            first = False
            if _HEADER_HINT.search(line):
                continue
        tokens = [token for token in _TOKEN_SPLIT.split(line) if token]
        if len(tokens) < 2:
            errors.append(PercentileMessages.EXPECTED_TWO_COLUMNS.format(line=number))
            continue
        mark = parse_finite(tokens[0])
        percentile = parse_finite(tokens[1])
        if mark is None or percentile is None:
            errors.append(
                PercentileMessages.NON_NUMERIC.format(line=number, mark=tokens[0], percentile=tokens[1])
            )
            continue
        yield RawAnchor(mark=mark, percentile=percentile, line=number)


def validate_anchor(anchor: RawAnchor, max_marks: int) -> ValidatedAnchor:
    """Clamp a raw anchor into range; the mark is rounded, the percentile is not."""
    mark = round_half_up(clamp(float(anchor.mark), 0.0, float(max_marks)))
    percentile = clamp(float(anchor.percentile), 0.0, 100.0)
    return ValidatedAnchor(mark=mark, percentile=percentile)


def parse_anchor_text(raw_text: str, max_marks: int) -> AnchorParseResult:
    """Parse ``raw_text`` into validated anchors and human-readable errors.

    When no anchor is accepted the errors end with the "no valid rows"
    message so callers can show it without special casing.
    """
    max_marks = validate_max_marks(max_marks)
    errors: List[str] = []
    anchors = tuple(validate_anchor(raw, max_marks) for raw in iter_raw_anchors(raw_text, errors))
    if errors:
        inc_counter("percentile.parse.line_errors", len(errors))
    if not anchors:
        errors.append(PercentileMessages.NO_VALID_ROWS)
        logger.info(
            "percentile_parse_no_rows",
            extra={"structured_data": {"max_marks": max_marks, "line_errors": len(errors) - 1}},
        )
    return AnchorParseResult(anchors=anchors, errors=tuple(errors))
