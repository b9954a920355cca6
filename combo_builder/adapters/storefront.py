"""
Storefront (customer-facing) combo wizard adapter.

Numbered step indicator, full item labels, a price breakdown only once extras
apply, and a cart toast when the combo is added.
"""

from decimal import Decimal
from typing import Optional

from ..schemas.combos import CompositeCartEntry, ItemType
from .base import ComboWizardAdapter, format_money


class StorefrontComboAdapter(ComboWizardAdapter):
    """Combo wizard as shown to customers on the online storefront."""

    SURFACE = "storefront"
    ITEM_LABELS = {
        ItemType.PIZZA: "Pizza",
        ItemType.WINGS: "Wings",
        ItemType.DRINKS: "Drinks",
        ItemType.DIPPING_SAUCE: "Dipping Sauce",
    }

    def price_caption(self, base: Decimal, extras: Decimal) -> Optional[str]:
        if extras <= 0:
            return None
        return f"Base: {format_money(base)} + Extras: {format_money(extras)}"

    def finish_message(self, entry: CompositeCartEntry) -> str:
        return f"{entry.combo_name} added to cart!"
