"""Money / rounding helpers.

Centralized so the conversion endpoint and its callers share one
rounding rule (half-up, 2 decimals).
"""

from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP


def round2(value: float) -> float:
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
