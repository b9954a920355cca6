"""
Boundaries between the combo configurator and its collaborators.

The configurator reads templates and catalog items, delegates pizza and
wings detail to sub-flows, and writes exactly one entry to a cart when a
combo is finished. Each collaborator is described here as a Protocol so the
core can be driven by the HTTP host, a test, or any other UI.
"""

from datetime import date
from decimal import Decimal
from typing import Protocol, Sequence

from ..schemas.combos import CatalogItem, ComboTemplate, CompositeCartEntry, PizzaCustomization


class CatalogReader(Protocol):
    """Read-only access to combo templates and menu items."""

    def get_template(self, combo_id: str) -> ComboTemplate | None:
        ...

    def list_catalog_items(self, category: str | None = None) -> list[CatalogItem]:
        ...

    def list_active_templates(self, today: date | None = None) -> list[ComboTemplate]:
        ...


class PizzaCustomizationFlow(Protocol):
    """Pizza customization sub-flow.

    Returns (customization, total_price), or None when the user cancels.
    """

    def open_pizza_customization(
        self,
        item: CatalogItem,
        size_restriction: str | None,
    ) -> tuple[PizzaCustomization, Decimal] | None:
        ...


class FlavorPicker(Protocol):
    """Wings flavor picker. Returns a flavor name, or None when cancelled."""

    def open_flavor_picker(self, flavors: Sequence[str]) -> str | None:
        ...


class CartPort(Protocol):
    """The only write boundary: one append per finished combo."""

    def append_to_cart(self, entry: CompositeCartEntry) -> None:
        ...
