"""
Wizard View and Request Schemas for Combo Builder
=================================================

The presentation adapters render a combo wizard session into a `WizardView`.
The view is everything a storefront page or POS screen needs to draw the
wizard: the step indicator, the current step heading, candidate tiles, the
selections made on this step, the open sub-flow (if any), prices, and which
buttons are enabled.

Request bodies for the wizard routes live here too.

Usage:
------
    view = adapter.render()
    if view.pending_subflow and view.pending_subflow.kind == "flavor":
        show_flavor_picker(view.pending_subflow.flavors)
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from ..money import Money
from .combos import CompositeCartEntry, PizzaCustomization


class StepIndicatorView(BaseModel):
    """One dot of the step indicator."""
    index: int
    label: str
    is_current: bool
    is_complete: bool
    is_required: bool


class CurrentStepView(BaseModel):
    """Heading and progress for the step being edited."""
    id: str
    item_type: str
    heading: str  # e.g. "Select 2 Pizzas (Large)"
    progress: str  # e.g. "1 of 2 selected • Extra charges apply"
    selected_count: int
    required_count: int
    size_restriction: Optional[str] = None
    is_required: bool
    is_chargeable: bool


class SubcategoryOption(BaseModel):
    """A pizza sub-category filter button."""
    label: str
    value: Optional[str]  # None = "All"
    is_active: bool


class CandidateView(BaseModel):
    """A catalog item tile for the current step."""
    id: str
    name: str
    image_url: Optional[str] = None
    price_label: Optional[str] = None
    is_selected: bool
    is_enabled: bool


class SelectionView(BaseModel):
    """A selection on the current step, removable by its global index."""
    index: int
    label: str
    extra_charge: Money


class SubFlowView(BaseModel):
    """The sub-flow currently open, waiting for a result."""
    kind: str  # "pizza" | "flavor"
    item_id: str
    item_name: str
    size_restriction: Optional[str] = None
    flavors: List[str] = Field(default_factory=list)


class WizardView(BaseModel):
    """Rendered state of a combo wizard session."""
    session_id: Optional[str] = None
    surface: str
    cart_id: Optional[str] = None
    status: str
    combo_id: str
    combo_name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    current_step_index: int
    step_indicator: List[StepIndicatorView]
    current_step: Optional[CurrentStepView] = None
    subcategories: List[SubcategoryOption] = Field(default_factory=list)
    candidates: List[CandidateView] = Field(default_factory=list)
    step_selections: List[SelectionView] = Field(default_factory=list)
    pending_subflow: Optional[SubFlowView] = None
    base_price: Money
    total_extra_charge: Money
    final_price: Money
    price_caption: Optional[str] = None
    all_steps_complete: bool
    is_last_step: bool
    can_go_back: bool
    can_go_next: bool
    can_skip: bool
    can_finish: bool
    message: Optional[str] = None


class ActionResult(BaseModel):
    """Outcome of one dispatched wizard event."""
    accepted: bool
    view: WizardView
    entry: Optional[CompositeCartEntry] = None


class ComboSummaryOut(BaseModel):
    """A combo offered today, for the combo list."""
    id: str
    name: str
    description: Optional[str] = None
    base_price: Money
    image_url: Optional[str] = None
    step_count: int


# =============================================================================
# Request Bodies
# =============================================================================

class OpenSessionRequest(BaseModel):
    """Open a wizard. Finished combos go to this cart (a new one if omitted)."""
    cart_id: Optional[str] = None


class SelectRequest(BaseModel):
    item_id: str


class RemoveRequest(BaseModel):
    index: int


class JumpRequest(BaseModel):
    index: int


class SubcategoryRequest(BaseModel):
    subcategory: Optional[str] = None


class PizzaResultRequest(BaseModel):
    """Result posted back by the pizza customization sub-flow."""
    customization: PizzaCustomization
    total_price: Money = Field(ge=0)


class FlavorRequest(BaseModel):
    flavor: str
