"""
Money — integer minor units, never floats.

All amounts are ``int`` (IDR has no fraction digits). Percentages floor,
distance/weight costs round half up.
"""

from __future__ import annotations

from decimal import Decimal, ROUND_FLOOR, ROUND_HALF_UP

from cartflow._types import Money

# ═══════════════════════════════════════════════════════════════════════════════
# Arithmetic
# ═══════════════════════════════════════════════════════════════════════════════


def percent_of(amount: Money, percent: int | float | Decimal) -> Money:
    """Floor of ``amount * percent / 100``."""
    value = Decimal(amount) * Decimal(str(percent)) / Decimal(100)
    return int(value.to_integral_value(rounding=ROUND_FLOOR))


def round_half_up(value: int | float | Decimal) -> Money:
    """Round to the nearest whole unit, halves away from zero."""
    return int(Decimal(str(value)).to_integral_value(rounding=ROUND_HALF_UP))


def cap(amount: Money, limit: Money | None) -> Money:
    """Apply an optional upper bound."""
    if limit is None:
        return amount
    return min(amount, limit)


# ═══════════════════════════════════════════════════════════════════════════════
# Formatting
# ═══════════════════════════════════════════════════════════════════════════════

CURRENCY_SYMBOLS = {
    "IDR": "Rp",
}


def format_price(amount: Money, currency: str = "IDR") -> str:
    """
    Render an amount the way the storefront shows it.

        >>> format_price(25000)
        'Rp 25.000'
        >>> format_price(-4000)
        '-Rp 4.000'
    """
    symbol = CURRENCY_SYMBOLS.get(currency, currency)
    digits = f"{abs(amount):,}".replace(",", ".")
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol} {digits}"


__all__ = (
    "percent_of",
    "round_half_up",
    "cap",
    "CURRENCY_SYMBOLS",
    "format_price",
)
