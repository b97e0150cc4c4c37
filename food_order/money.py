"""Money helpers. Amounts are Decimal end to end; rounding is display-only."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from food_order.models import MenuModifier

ZERO = Decimal("0")
_CENTS = Decimal("0.01")


def modifiers_total(modifiers: Iterable[MenuModifier]) -> Decimal:
    return sum((m.price for m in modifiers), ZERO)


def format_money(amount: Decimal) -> str:
    """Render an amount as ``$12.34``."""
    return f"${amount.quantize(_CENTS, rounding=ROUND_HALF_UP)}"
