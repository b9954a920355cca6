"""
Combo Domain Schemas for Combo Builder
======================================

This module defines the Pydantic models the combo configurator works with:
templates read from the catalog, catalog items, the selections made while a
wizard session runs, and the composite cart entry emitted when it finishes.

Model Overview:
---------------
1. **ComboTemplate**: A bundled deal ("2 pizzas + wings + a drink") sold at a
   fixed base price. Holds an ordered list of ComboStepSpec, one per slot.

2. **ComboStepSpec**: One item-type slot of a template. `quantity` is the
   nominal number of selections; the effective number can be derived from the
   size restriction (see combo/required_count.py).

3. **CatalogItem / CatalogSize**: Read-only menu data. Immutable for the
   lifetime of a wizard session.

4. **PizzaCustomization**: Opaque payload returned by the pizza customization
   sub-flow. Only `size` is interpreted here; everything else is carried
   through to the cart untouched.

5. **Selection**: One choice made for one step. Frozen; a selection is never
   edited, only removed and re-added.

6. **CompositeCartEntry**: The single immutable record handed to the cart
   when a combo is finished.

Money Fields:
-------------
All prices use the `Money` type from combo_builder.money: cent-rounded
Decimals that serialize to floats in JSON.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import List, Optional
import uuid

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator

from ..money import Money, round_money, sum_money


class ItemType(str, Enum):
    """Kinds of slot a combo step can hold."""
    PIZZA = "pizza"
    WINGS = "wings"
    DRINKS = "drinks"
    DIPPING_SAUCE = "dipping_sauce"


class ScheduleType(str, Enum):
    """When a combo template is offered."""
    ALWAYS = "always"
    DAYS_OF_WEEK = "days_of_week"  # schedule_days: 0 = Sunday ... 6 = Saturday
    DATES_OF_MONTH = "dates_of_month"  # schedule_dates: 1..31


# =============================================================================
# Catalog
# =============================================================================

class CatalogSize(BaseModel):
    """A purchasable size of a catalog item."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    price: Money = Field(ge=0)


class CatalogItem(BaseModel):
    """A menu item as read from the catalog."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: str
    base_price: Money = Field(ge=0)
    sizes: tuple[CatalogSize, ...] = ()
    subcategory: Optional[str] = None
    image_url: Optional[str] = None


# =============================================================================
# Templates
# =============================================================================

class ComboStepSpec(BaseModel):
    """One slot of a combo template."""
    model_config = ConfigDict(frozen=True)

    id: str
    item_type: ItemType
    quantity: int = Field(default=1, ge=1)
    size_restriction: Optional[str] = None
    is_required: bool = True
    is_chargeable: bool = False
    sort_order: int = 0


class ComboTemplate(BaseModel):
    """A combo deal and its ordered steps."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: Optional[str] = None
    base_price: Money = Field(ge=0)
    image_url: Optional[str] = None
    is_active: bool = True
    sort_order: int = 0
    schedule_type: ScheduleType = ScheduleType.ALWAYS
    # None = no day restriction; an empty tuple is never offered
    schedule_days: Optional[tuple[int, ...]] = None
    schedule_dates: Optional[tuple[int, ...]] = None
    # Overrides config.WINGS_PIECES_PER_UNIT for this template
    wings_pieces_per_unit: Optional[int] = Field(default=None, ge=1)
    steps: tuple[ComboStepSpec, ...] = ()

    @field_validator("steps")
    @classmethod
    def order_steps(cls, steps: tuple[ComboStepSpec, ...]) -> tuple[ComboStepSpec, ...]:
        """Steps progress in sort_order; ties keep their given order."""
        return tuple(sorted(steps, key=lambda step: step.sort_order))

    def get_step(self, step_id: str) -> Optional[ComboStepSpec]:
        """Look up a step by id."""
        for step in self.steps:
            if step.id == step_id:
                return step
        return None


# =============================================================================
# Selections
# =============================================================================

class PizzaCustomization(BaseModel):
    """Result payload of the pizza customization sub-flow.

    Extra fields (crust, sauce, toppings, ...) are kept as given.
    """
    model_config = ConfigDict(frozen=True, extra="allow")

    size: CatalogSize
    original_item_id: Optional[str] = None


class Selection(BaseModel):
    """A single choice made for one combo step."""
    model_config = ConfigDict(frozen=True)

    step_id: str
    item_type: ItemType
    item: CatalogItem
    pizza_customization: Optional[PizzaCustomization] = None
    flavor: Optional[str] = None
    extra_charge: Money = Field(default=Decimal("0.00"), ge=0)

    def get_display_name(self) -> str:
        """Get display name for this selection."""
        if self.flavor:
            return f"{self.item.name} ({self.flavor})"
        return self.item.name


# =============================================================================
# Cart Output
# =============================================================================

class CompositeSelection(BaseModel):
    """One line of a finished combo, as stored on the cart."""
    model_config = ConfigDict(frozen=True)

    item_type: ItemType
    item_name: str
    flavor: Optional[str] = None
    pizza_customization: Optional[PizzaCustomization] = None
    extra_charge: Money = Field(ge=0)


class CompositeCartEntry(BaseModel):
    """The whole configured combo, emitted once on finish."""
    model_config = ConfigDict(frozen=True)

    combo_id: str
    combo_name: str
    combo_base_price: Money
    selections: tuple[CompositeSelection, ...]
    total_extra_charge: Money

    @model_validator(mode="after")
    def check_total(self) -> "CompositeCartEntry":
        """The stored total must equal the sum of the selection charges."""
        expected = sum_money(s.extra_charge for s in self.selections)
        if self.total_extra_charge != expected:
            raise ValueError(
                f"total_extra_charge {self.total_extra_charge} does not match "
                f"sum of selections {expected}"
            )
        return self

    @computed_field
    @property
    def final_price(self) -> Money:
        return round_money(self.combo_base_price + self.total_extra_charge)


class CartLine(BaseModel):
    """A cart row holding one finished combo."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: f"combo-{uuid.uuid4().hex[:12]}")
    name: str
    description: str = ""
    price: Money
    quantity: int = 1
    image_url: Optional[str] = None
    added_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    combo: CompositeCartEntry


class CartOut(BaseModel):
    """Response model for a cart."""
    cart_id: str
    lines: List[CartLine]
    subtotal: Money
