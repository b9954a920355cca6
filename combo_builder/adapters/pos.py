"""
POS (staff-facing) combo wizard adapter.

The point-of-sale screen is compact: the step indicator shows the item type
instead of a number, sub-category buttons use short labels, and the price
caption is always visible so staff can read the breakdown to the customer.
"""

from decimal import Decimal
from typing import Optional

from ..schemas.combos import ComboStepSpec, CompositeCartEntry, ItemType, Selection
from .base import ComboWizardAdapter, format_money


# Short labels for the POS sub-category buttons; values are unchanged
POS_SUBCATEGORY_LABELS = {
    "vegetarian": "Veg",
    "meat pizza": "Meat",
}


class PosComboAdapter(ComboWizardAdapter):
    """Combo wizard as shown to staff on the POS terminal."""

    SURFACE = "pos"
    ITEM_LABELS = {
        ItemType.PIZZA: "Pizza",
        ItemType.WINGS: "Wings",
        ItemType.DRINKS: "Drinks",
        ItemType.DIPPING_SAUCE: "Sauce",
    }

    def indicator_label(self, index: int, step: ComboStepSpec) -> str:
        return self.item_label(step.item_type)

    def subcategory_label(self, subcategory: str) -> str:
        return POS_SUBCATEGORY_LABELS.get(subcategory.lower(), subcategory)

    def selection_label(self, selection: Selection) -> str:
        parts = [selection.item.name]
        if selection.flavor:
            parts.append(selection.flavor)
        if selection.pizza_customization is not None:
            parts.append(selection.pizza_customization.size.name)
        label = " · ".join(parts)
        if selection.extra_charge > 0:
            label += f" +{format_money(selection.extra_charge)}"
        return label

    def price_caption(self, base: Decimal, extras: Decimal) -> Optional[str]:
        return f"Base {format_money(base)} · Extras {format_money(extras)}"

    def finish_message(self, entry: CompositeCartEntry) -> str:
        return f"{entry.combo_name} added to order"
