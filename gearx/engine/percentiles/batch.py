from __future__ import annotations

from typing import Any, Sequence, TYPE_CHECKING

from gearx.core.errors import InvalidPercentileInput
from gearx.engine.percentiles.validation import coerce_table
from gearx.i18n.en_messages import PercentileMessages

if TYPE_CHECKING:  # pragma: no cover
    import numpy as _np
    from numpy.typing import NDArray as _NDArray

    FloatArray = _NDArray[_np.float64]
else:
    FloatArray = Any  # type: ignore[assignment]

_NUMPY_MODULE = None


def _require_numpy():
    """Import numpy lazily so single lookups never pay for it."""

    global _NUMPY_MODULE
    if _NUMPY_MODULE is None:
        import numpy as np  # type: ignore[import-not-found]

        _NUMPY_MODULE = np
    return _NUMPY_MODULE


def batch_lookup(scores: Sequence[float] | FloatArray, table: Sequence[float]) -> FloatArray:
    """Table-driven lookup for many scores at once.

    Matches :func:`gearx.engine.percentiles.lookup.table_index` element-wise:
    half-up rounding, NaN mapped to mark 0, infinities and out-of-range
    scores clamped to the table ends.

    Args:
        scores: 1-D sequence of raw scores.
        table: dense percentile table.

    Returns:
        ``(n,)`` float array of percentiles.
    """

    values = coerce_table(table)
    if values is None:
        raise InvalidPercentileInput(PercentileMessages.MALFORMED_TABLE)
    np_mod = _require_numpy()
    lookup = np_mod.clip(np_mod.asarray(values, dtype=np_mod.float64), 0.0, 100.0)
    raw = np_mod.asarray(scores, dtype=np_mod.float64)
    if raw.ndim != 1:
        raise ValueError("scores must be one-dimensional")
    if raw.size == 0:
        return np_mod.empty((0,), dtype=np_mod.float64)

    last = float(len(values) - 1)
    cleaned = np_mod.nan_to_num(raw, nan=0.0, posinf=last, neginf=0.0)
    indices = np_mod.clip(np_mod.floor(cleaned + 0.5), 0.0, last).astype(np_mod.int64)
    return lookup[indices]


__all__ = ["batch_lookup"]
