from __future__ import annotations

from typing import Any, Optional, Sequence, Tuple

from gearx.core.errors import InvalidPercentileInput
from gearx.core.numeric import is_finite_number
from gearx.i18n.en_messages import PercentileMessages

__all__ = ["validate_max_marks", "coerce_table", "is_monotonic"]


def validate_max_marks(max_marks: Any) -> int:
    """Return ``max_marks`` as an int or raise :class:`InvalidPercentileInput`.

    Integral floats (``300.0``) are accepted; negatives, booleans and
    fractional values are not.
    """
    if isinstance(max_marks, bool) or not is_finite_number(max_marks):
        raise InvalidPercentileInput(PercentileMessages.MAX_MARKS_INVALID, detail={"max_marks": max_marks})
    if int(max_marks) != max_marks or max_marks < 0:
        raise InvalidPercentileInput(PercentileMessages.MAX_MARKS_INVALID, detail={"max_marks": max_marks})
    return int(max_marks)


def coerce_table(table: Any) -> Optional[Tuple[float, ...]]:
    """Normalize a stored table to a tuple of floats.

    Returns ``None`` when ``table`` is not a non-empty list/tuple of finite
    numbers; callers treat that exactly like a missing map.
    """
    if not isinstance(table, (list, tuple)) or not table:
        return None
    if not all(is_finite_number(value) for value in table):
        return None
    return tuple(float(value) for value in table)


def is_monotonic(table: Sequence[float]) -> bool:
    return all(table[i] <= table[i + 1] for i in range(len(table) - 1))
