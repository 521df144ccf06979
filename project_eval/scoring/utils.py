"""
Decimal Utilities
project_eval/scoring/utils.py

Provides precision-safe decimal math for scoring calculations.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Union

Number = Union[int, float, Decimal]

ONE_DECIMAL = Decimal("0.1")


def to_decimal(value: Number) -> Decimal:
    """Convert int/float/Decimal to Decimal without binary float noise."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_score(value: Decimal) -> Decimal:
    """Round to one decimal place, halves away from zero."""
    return value.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)


def clamp(
    value: Decimal,
    min_val: Decimal = Decimal("0"),
    max_val: Decimal = Decimal("100"),
) -> Decimal:
    """Clamp value to range [min_val, max_val]."""
    return max(min_val, min(max_val, value))


def mean(values: Iterable[Decimal]) -> Decimal:
    """
    Arithmetic mean.

    Returns Decimal("0") for an empty input.
    """
    items = list(values)
    if not items:
        return Decimal("0")
    return sum(items, Decimal("0")) / Decimal(len(items))
