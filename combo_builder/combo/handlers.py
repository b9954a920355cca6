"""
Selection Handler for Combo Steps.

This module turns a chosen catalog item (plus, for pizza and wings, the
result of their sub-flow) into a Selection with the right extra charge:

- pizza: the combo absorbs the price of the chosen size; anything the
  customization adds above that (toppings, crust upcharge) is extra.
- wings: a flavor from the fixed list; never up-charged inside a combo.
- drinks, dipping sauces: picked directly. A chargeable step charges the
  price of the size matching the restriction, or the item's base price.
"""

import logging
from decimal import Decimal
from enum import Enum

from .. import config
from ..money import ZERO, round_money
from ..schemas.combos import CatalogItem, ComboStepSpec, ItemType, PizzaCustomization, Selection
from .size_matching import SizeMatcher, default_size_matcher


logger = logging.getLogger(__name__)


class SubFlowKind(str, Enum):
    """Sub-flows a selection can be delegated to."""
    PIZZA = "pizza"
    FLAVOR = "flavor"


SUBFLOW_BY_ITEM_TYPE: dict[ItemType, SubFlowKind] = {
    ItemType.PIZZA: SubFlowKind.PIZZA,
    ItemType.WINGS: SubFlowKind.FLAVOR,
}


def subflow_for(item_type: ItemType) -> SubFlowKind | None:
    """The sub-flow an item type needs before it becomes a selection, if any."""
    return SUBFLOW_BY_ITEM_TYPE.get(item_type)


class SelectionHandler:
    """
    Builds selections for each combo item type.

    Stateless apart from its configuration, so one instance can serve any
    number of sessions.
    """

    def __init__(
        self,
        size_matcher: SizeMatcher | None = None,
        wing_flavors: list[str] | None = None,
    ):
        """
        Initialize the selection handler.

        Args:
            size_matcher: Matcher used to resolve a step's size on simple items.
            wing_flavors: Flavors the flavor picker offers. Defaults to
                config.WING_FLAVORS.
        """
        self.size_matcher = size_matcher or default_size_matcher
        self.wing_flavors = list(wing_flavors) if wing_flavors is not None else list(config.WING_FLAVORS)

    def build_pizza(
        self,
        step: ComboStepSpec,
        item: CatalogItem,
        customization: PizzaCustomization,
        total_price: Decimal,
    ) -> Selection:
        """Selection for a customized pizza. Extra = total above the size price."""
        extra = max(ZERO, round_money(total_price) - customization.size.price)
        logger.debug(
            "Pizza %s (%s): total %s, size price %s, extra %s",
            item.name, customization.size.name, total_price, customization.size.price, extra,
        )
        return Selection(
            step_id=step.id,
            item_type=step.item_type,
            item=item,
            pizza_customization=customization,
            extra_charge=extra,
        )

    def canonical_flavor(self, flavor: str) -> str | None:
        """The flavor as spelled in the configured list, or None if unknown."""
        for known in self.wing_flavors:
            if flavor.strip().lower() == known.lower():
                return known
        return None

    def build_wings(self, step: ComboStepSpec, item: CatalogItem, flavor: str) -> Selection:
        """Selection for wings with a picked flavor. Never up-charged."""
        return Selection(
            step_id=step.id,
            item_type=step.item_type,
            item=item,
            flavor=flavor,
            extra_charge=ZERO,
        )

    def simple_charge(self, step: ComboStepSpec, item: CatalogItem) -> Decimal:
        """Extra charge for a drink/sauce pick."""
        if not step.is_chargeable:
            return ZERO
        if not step.size_restriction:
            return item.base_price
        size = self.size_matcher.find_size(step.size_restriction, item.sizes)
        if size is None:
            logger.warning(
                "No size of %s matches '%s'; charging base price %s",
                item.name, step.size_restriction, item.base_price,
            )
            return item.base_price
        return size.price

    def build_simple(self, step: ComboStepSpec, item: CatalogItem) -> Selection:
        """Selection for an item that needs no sub-flow."""
        return Selection(
            step_id=step.id,
            item_type=step.item_type,
            item=item,
            extra_charge=self.simple_charge(step, item),
        )
