from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Literal, Optional, Tuple

LookupSource = Literal["table", "fallback"]


@dataclass(frozen=True, slots=True)
class RawAnchor:
    """Unvalidated (mark, percentile) pair read from one input line."""

    mark: float
    percentile: float
    line: int = 0


@dataclass(frozen=True, slots=True)
class ValidatedAnchor:
    """Anchor with ``mark`` in ``[0, max_marks]`` and ``percentile`` in ``[0, 100]``."""

    mark: int
    percentile: float


@dataclass(frozen=True, slots=True)
class AnchorParseResult:
    anchors: Tuple[ValidatedAnchor, ...]
    errors: Tuple[str, ...]

    @property
    def ok(self) -> bool:
        return bool(self.anchors)


@dataclass(frozen=True, slots=True)
class PercentileTableResult:
    """Outcome of building a dense table from raw text.

    ``table`` is ``None`` when no anchor survived parsing; ``errors`` then
    ends with the "no valid rows" message.
    """

    table: Optional[List[float]]
    errors: List[str] = field(default_factory=list)
    anchor_count: int = 0

    def as_tuple(self) -> tuple[Optional[List[float]], List[str]]:
        return self.table, self.errors


@dataclass(frozen=True, slots=True)
class PercentileMapDocument:
    """Persisted percentile map for one test."""

    test_id: str
    max_marks: int
    table: Tuple[float, ...]
    updated_at: Optional[datetime] = None


@dataclass(frozen=True, slots=True)
class PercentileLookupResult:
    """Percentile plus where it came from; ``index`` is ``None`` for the fallback."""

    percentile: float
    source: LookupSource
    index: Optional[int] = None

    @property
    def used_fallback(self) -> bool:
        return self.source == "fallback"


__all__ = [
    "LookupSource",
    "RawAnchor",
    "ValidatedAnchor",
    "AnchorParseResult",
    "PercentileTableResult",
    "PercentileMapDocument",
    "PercentileLookupResult",
]
