from __future__ import annotations

from dataclasses import dataclass

from storefront_fx.services.money import round2

"""USD -> ZMW price conversion.

Applies rounding (round2) in a single place so every displayed price agrees.
The rate is whatever the resolver produced; this module never looks one up.
"""


@dataclass(frozen=True)
class ConversionResult:
    amount_usd: float
    rate: float
    amount_zmw: float


def convert_usd(amount: float, rate: float) -> ConversionResult:
    if amount < 0:
        raise ValueError("amount cannot be negative")
    if rate <= 0:
        raise ValueError("rate must be positive")
    return ConversionResult(
        amount_usd=round2(amount),
        rate=rate,
        amount_zmw=round2(amount * rate),
    )
