"""
Pricing for combo selections.

A combo is sold at its template base price. Each selection may add an extra
charge on top (a pizza upgrade, a chargeable drink). The final price is
always the base price plus the sum of extra charges, computed fresh from the
current selections on every call.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from ..money import round_money, sum_money
from ..schemas.combos import ComboTemplate, Selection


@dataclass(frozen=True)
class PriceBreakdown:
    """Base, extras and final price for the current selections."""

    base_price: Decimal
    total_extra_charge: Decimal

    @property
    def final_price(self) -> Decimal:
        return round_money(self.base_price + self.total_extra_charge)


def total_extra_charge(selections: Iterable[Selection]) -> Decimal:
    """Sum of extra charges across selections."""
    return sum_money(s.extra_charge for s in selections)


def final_price(base_price: Decimal, selections: Iterable[Selection]) -> Decimal:
    """Base price plus all extra charges."""
    return round_money(base_price + total_extra_charge(selections))


def price_breakdown(template: ComboTemplate, selections: Iterable[Selection]) -> PriceBreakdown:
    return PriceBreakdown(
        base_price=template.base_price,
        total_extra_charge=total_extra_charge(selections),
    )
