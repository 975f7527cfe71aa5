"""
Amount coercion — source cells become exact Decimals or are rejected.
"""
from __future__ import annotations

import math
import numbers
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

_CURRENCY_RE = re.compile(r"[\$,]")


def to_amount(value) -> Decimal | None:
    """Coerce a cell to a finite Decimal; None for blanks and non-numeric cells."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, numbers.Integral):
        return Decimal(int(value))
    if isinstance(value, numbers.Real):
        f = float(value)
        if not math.isfinite(f):
            return None
        # repr() keeps the shortest round-tripping digits: 150.5 -> Decimal("150.5")
        return Decimal(repr(f))
    if isinstance(value, str):
        s = _CURRENCY_RE.sub("", value).strip()
        if not s:
            return None
        try:
            amount = Decimal(s)
        except InvalidOperation:
            return None
        return amount if amount.is_finite() else None
    return None


CENT = Decimal("0.01")


def round_cents(amount: Decimal) -> Decimal:
    """Presentation rounding (half-up to 2 places). Never used while summing."""
    # + 0 folds -0.00 into 0.00
    return amount.quantize(CENT, rounding=ROUND_HALF_UP) + 0
