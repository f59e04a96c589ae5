"""Numeric helpers shared by the percentile engine and scoring services.

Centralizes clamping, half-up rounding and finite-number parsing so the
builder, the lookup and the scoring code agree on the same rules.
"""

from __future__ import annotations

import math
import re
from decimal import Decimal, ROUND_HALF_UP
from numbers import Real
from typing import Optional, TypeVar

__all__ = [
    "clamp",
    "safe_round",
    "round_half_up",
    "safe_div",
    "is_finite_number",
    "parse_finite",
]


NumericT = TypeVar("NumericT", int, float)

_NUMBER_TOKEN = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
_RADIX_TOKEN = re.compile(r"^0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)$")


def clamp(value: NumericT, min_value: NumericT, max_value: NumericT) -> NumericT:
    """Clamp a numeric value to be within the specified range.

    Example:
        >>> clamp(150, 0, 100)
        100
        >>> clamp(-5, 0, 100)
        0
    """
    if min_value > max_value:
        raise ValueError(f"min_value ({min_value}) must be <= max_value ({max_value})")
    return max(min_value, min(value, max_value))


def safe_round(value: float, decimals: int = 2) -> float:
    """Round half-up to ``decimals`` places using ``Decimal`` arithmetic.

    Example:
        >>> safe_round(2.555, 2)
        2.56
        >>> safe_round(33.333333, 2)
        33.33
    """
    quantizer = Decimal(10) ** -decimals
    rounded = Decimal(str(value)).quantize(quantizer, rounding=ROUND_HALF_UP)
    return float(rounded)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with ties going towards +infinity.

    Example:
        >>> round_half_up(2.5)
        3
        >>> round_half_up(-2.5)
        -2
    """
    return int(math.floor(value + 0.5))


def safe_div(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide, returning ``default`` when the denominator is zero."""
    if denominator == 0:
        return default
    return numerator / denominator


def is_finite_number(value: object) -> bool:
    """True for real, finite numbers (booleans are rejected)."""
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return math.isfinite(float(value))


def parse_finite(token: str) -> Optional[float]:
    """Parse a numeric token, returning ``None`` unless it is finite.

    Accepts decimals with an optional exponent and unsigned ``0x``/``0o``/``0b``
    integer literals. Words such as ``nan``/``inf``, signed radix literals and
    digit separators are rejected.

    Example:
        >>> parse_finite("12.5")
        12.5
        >>> parse_finite("1e3")
        1000.0
        >>> parse_finite("0x10")
        16.0
        >>> parse_finite("abc") is None
        True
    """
    candidate = token.strip()
    if _RADIX_TOKEN.match(candidate):
        try:
            return float(int(candidate, 0))
        except OverflowError:
            return None
    if not _NUMBER_TOKEN.match(candidate):
        return None
    value = float(candidate)
    if not math.isfinite(value):
        return None
    return value
