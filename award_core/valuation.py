"""Currency conversion and loyalty point valuation helpers.

Both functions expect non-negative, finite input. Negative amounts or
``inf``/``nan`` are a caller error and are not clamped.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence, Tuple, Union

Number = Union[int, float, Decimal]

_WHOLE = Decimal("1")
_CENTS = Decimal("0.01")


@dataclass(frozen=True)
class ValuationTier:
    """Per-point value applied when the points total is at most ``upper_bound``.

    ``upper_bound=None`` marks the open-ended top tier.
    """

    upper_bound: Optional[int]
    rate: Decimal


DEFAULT_VALUATION_TIERS: Tuple[ValuationTier, ...] = (
    ValuationTier(20000, Decimal("0.0050")),
    ValuationTier(40000, Decimal("0.0045")),
    ValuationTier(60000, Decimal("0.0043")),
    ValuationTier(None, Decimal("0.0040")),
)


def _as_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def convert_to_usd(amount: Number, rate: Number) -> int:
    """Convert ``amount`` to dollars at ``rate`` units per dollar.

    Rounds to the nearest whole dollar, halves rounding up.
    """

    converted = _as_decimal(amount) / _as_decimal(rate)
    return int(converted.quantize(_WHOLE, rounding=ROUND_HALF_UP))


def valuation_rate(points: Number, tiers: Sequence[ValuationTier] = DEFAULT_VALUATION_TIERS) -> Decimal:
    """Return the per-point rate of the tier ``points`` falls into."""

    value = _as_decimal(points)
    for tier in tiers:
        if tier.upper_bound is None or value <= tier.upper_bound:
            return tier.rate
    # tiers without an open-ended entry: anything above the last bound uses it
    return tiers[-1].rate


def estimate_points_value(
    points: Number, tiers: Sequence[ValuationTier] = DEFAULT_VALUATION_TIERS
) -> Decimal:
    """Estimate the dollar value of ``points``.

    The whole amount is priced at the rate of its own tier, not split across
    brackets, and rounded to cents.
    """

    value = _as_decimal(points) * valuation_rate(points, tiers)
    return value.quantize(_CENTS, rounding=ROUND_HALF_UP)


__all__ = [
    "DEFAULT_VALUATION_TIERS",
    "ValuationTier",
    "convert_to_usd",
    "estimate_points_value",
    "valuation_rate",
]
