"""
Base Presentation Adapter for the Combo Wizard.

An adapter sits between a UI surface and a StepSequencer. It does two things:

1. render(): turn the sequencer's state into a WizardView.
2. dispatch: forward one user event (select, remove, next, ...) to the
   sequencer and return an ActionResult with the re-rendered view.

Adapters never decide rules. Everything about what is allowed, what it costs
and when the combo is complete comes from the sequencer; subclasses only
choose labels and wording for their surface.

Sub-flows:
----------
When a pizza or wings candidate is selected the sequencer opens a sub-flow.
If the adapter was given a delegate (PizzaCustomizationFlow / FlavorPicker)
it runs it immediately and feeds the result back. Without delegates the open
sub-flow is rendered in the view and the host posts the result later through
complete_pizza / pick_flavor / cancel_subflow.

Concurrency:
------------
The HTTP host runs requests in a thread pool. Every dispatch method and
render() hold the adapter's lock, so two requests on one session never
interleave inside the sequencer.
"""

import functools
import logging
import threading
from decimal import Decimal
from typing import Optional

from .. import config
from ..combo.handlers import SubFlowKind, subflow_for
from ..combo.ports import CartPort, FlavorPicker, PizzaCustomizationFlow
from ..combo.sequencer import SelectOutcome, StepSequencer
from ..logging_config import log_session
from ..schemas.combos import CatalogItem, ComboStepSpec, CompositeCartEntry, ItemType, PizzaCustomization, Selection
from ..schemas.wizard import (
    ActionResult,
    CandidateView,
    CurrentStepView,
    SelectionView,
    StepIndicatorView,
    SubcategoryOption,
    SubFlowView,
    WizardView,
)


logger = logging.getLogger(__name__)


def format_money(amount: Decimal) -> str:
    return f"${amount:.2f}"


def serialized(method):
    """Run an adapter method under the session lock, logging as that session."""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self.lock, log_session(self.session_id):
            return method(self, *args, **kwargs)
    return wrapper


class ComboWizardAdapter:
    """
    Shared rendering and dispatch for combo wizard surfaces.

    Subclasses set SURFACE and ITEM_LABELS and may override the label hooks.
    """

    SURFACE = "base"
    ITEM_LABELS: dict[ItemType, str] = {
        ItemType.PIZZA: "Pizza",
        ItemType.WINGS: "Wings",
        ItemType.DRINKS: "Drinks",
        ItemType.DIPPING_SAUCE: "Dipping Sauce",
    }

    def __init__(
        self,
        sequencer: StepSequencer,
        cart: CartPort,
        pizza_flow: PizzaCustomizationFlow | None = None,
        flavor_picker: FlavorPicker | None = None,
        subcategories: list[str] | None = None,
    ):
        """
        Initialize the adapter.

        Args:
            sequencer: The wizard session to present.
            cart: Where the finished combo is appended.
            pizza_flow: Optional synchronous pizza customization delegate.
            flavor_picker: Optional synchronous flavor picker delegate.
            subcategories: Pizza sub-category filters (config default if omitted).
        """
        self.sequencer = sequencer
        self.cart = cart
        self.pizza_flow = pizza_flow
        self.flavor_picker = flavor_picker
        self.subcategories = list(subcategories) if subcategories is not None else list(config.PIZZA_SUBCATEGORIES)
        self.session_id: Optional[str] = None
        self._message: Optional[str] = None
        # Requests for one session run one at a time; render re-enters it
        self.lock = threading.RLock()

    # =========================================================================
    # Label Hooks
    # =========================================================================

    def item_label(self, item_type: ItemType) -> str:
        return self.ITEM_LABELS.get(item_type, item_type.value.replace("_", " ").title())

    def step_heading(self, step: ComboStepSpec, required: int) -> str:
        label = self.item_label(step.item_type)
        plural = "s" if required > 1 and not label.endswith("s") else ""
        heading = f"Select {required} {label}{plural}"
        if step.size_restriction:
            heading += f" ({step.size_restriction})"
        return heading

    def step_progress(self, step: ComboStepSpec, selected: int, required: int) -> str:
        parts = [f"{selected} of {required} selected"]
        if step.is_chargeable:
            parts.append("Extra charges apply")
        if not step.is_required:
            parts.append("Optional")
        return " • ".join(parts)

    def indicator_label(self, index: int, step: ComboStepSpec) -> str:
        return str(index + 1)

    def subcategory_label(self, subcategory: str) -> str:
        return subcategory

    def selection_label(self, selection: Selection) -> str:
        label = selection.get_display_name()
        if selection.extra_charge > 0:
            label += f" +{format_money(selection.extra_charge)}"
        return label

    def candidate_price_label(self, step: ComboStepSpec, item: CatalogItem) -> Optional[str]:
        """Price shown on a tile. Only simple items on chargeable steps have one."""
        if not step.is_chargeable or subflow_for(step.item_type) is not None:
            return None
        return f"+{format_money(self.sequencer.handler.simple_charge(step, item))}"

    def price_caption(self, base: Decimal, extras: Decimal) -> Optional[str]:
        return None

    def finish_message(self, entry: CompositeCartEntry) -> str:
        return f"{entry.combo_name} added"

    # =========================================================================
    # Rendering
    # =========================================================================

    def _is_candidate_selected(self, item: CatalogItem, selections: list[Selection]) -> bool:
        for selection in selections:
            if selection.item.id == item.id:
                return True
            custom = selection.pizza_customization
            if custom is not None and custom.original_item_id == item.id:
                return True
        return False

    @serialized
    def render(self) -> WizardView:
        """Build the view for the current session state."""
        seq = self.sequencer
        template = seq.template
        step = seq.current_step
        prices = seq.prices

        indicator = [
            StepIndicatorView(
                index=i,
                label=self.indicator_label(i, s),
                is_current=i == seq.current_step_index,
                is_complete=seq.is_step_complete(s),
                is_required=s.is_required,
            )
            for i, s in enumerate(seq.steps)
        ]

        current = None
        subcategories: list[SubcategoryOption] = []
        candidates: list[CandidateView] = []
        step_selections: list[SelectionView] = []
        if step is not None:
            required = seq.required_count(step)
            selected = seq.step_selections(step)
            current = CurrentStepView(
                id=step.id,
                item_type=step.item_type.value,
                heading=self.step_heading(step, required),
                progress=self.step_progress(step, len(selected), required),
                selected_count=len(selected),
                required_count=required,
                size_restriction=step.size_restriction,
                is_required=step.is_required,
                is_chargeable=step.is_chargeable,
            )
            if step.item_type == ItemType.PIZZA:
                active = (seq.subcategory_filter or "").lower()
                subcategories = [SubcategoryOption(label="All", value=None, is_active=not active)] + [
                    SubcategoryOption(
                        label=self.subcategory_label(sub),
                        value=sub,
                        is_active=sub.lower() == active,
                    )
                    for sub in self.subcategories
                ]
            can_select = seq.can_select
            for item in seq.candidates():
                is_selected = self._is_candidate_selected(item, selected)
                candidates.append(CandidateView(
                    id=item.id,
                    name=item.name,
                    image_url=item.image_url,
                    price_label=self.candidate_price_label(step, item),
                    is_selected=is_selected,
                    is_enabled=can_select or is_selected,
                ))
            step_selections = [
                SelectionView(index=index, label=self.selection_label(s), extra_charge=s.extra_charge)
                for index, s in seq.state.selections.indexed_for(step.id)
            ]

        pending = seq.pending_subflow
        subflow = None
        if pending is not None:
            subflow = SubFlowView(
                kind=pending.kind.value,
                item_id=pending.item.id,
                item_name=pending.item.name,
                size_restriction=pending.size_restriction,
                flavors=list(pending.flavors),
            )

        return WizardView(
            session_id=self.session_id,
            cart_id=getattr(self.cart, "cart_id", None),
            surface=self.SURFACE,
            status=seq.status.value,
            combo_id=template.id,
            combo_name=template.name,
            description=template.description,
            image_url=template.image_url,
            current_step_index=seq.current_step_index,
            step_indicator=indicator,
            current_step=current,
            subcategories=subcategories,
            candidates=candidates,
            step_selections=step_selections,
            pending_subflow=subflow,
            base_price=prices.base_price,
            total_extra_charge=prices.total_extra_charge,
            final_price=prices.final_price,
            price_caption=self.price_caption(prices.base_price, prices.total_extra_charge),
            all_steps_complete=seq.is_complete,
            is_last_step=seq.is_last_step,
            can_go_back=seq.can_go_prev,
            can_go_next=seq.can_go_next,
            can_skip=seq.can_skip,
            can_finish=seq.can_finish,
            message=self._message,
        )

    def _result(self, accepted: bool, entry: CompositeCartEntry | None = None) -> ActionResult:
        return ActionResult(accepted=accepted, view=self.render(), entry=entry)

    # =========================================================================
    # Dispatch
    # =========================================================================

    @serialized
    def select(self, item_id: str) -> ActionResult:
        """User tapped a candidate tile."""
        outcome = self.sequencer.select(item_id)
        if outcome == SelectOutcome.SUBFLOW_OPENED:
            return self._result(self._run_delegate())
        return self._result(outcome == SelectOutcome.ADDED)

    def _run_delegate(self) -> bool:
        """Run an attached sub-flow delegate.

        Returns True when a selection was added, or when no delegate is
        attached and the sub-flow stays open for the host.
        """
        pending = self.sequencer.pending_subflow
        if pending is None:
            return False
        if pending.kind == SubFlowKind.PIZZA and self.pizza_flow is not None:
            result = self.pizza_flow.open_pizza_customization(pending.item, pending.size_restriction)
            if result is None:
                self.sequencer.cancel_subflow()
                return False
            customization, total_price = result
            if not self.sequencer.complete_pizza(customization, total_price):
                self.sequencer.cancel_subflow()
                return False
            return True
        if pending.kind == SubFlowKind.FLAVOR and self.flavor_picker is not None:
            flavor = self.flavor_picker.open_flavor_picker(list(pending.flavors))
            if flavor is None:
                self.sequencer.cancel_subflow()
                return False
            if not self.sequencer.complete_flavor(flavor):
                self.sequencer.cancel_subflow()
                return False
            return True
        # No delegate attached: the host finishes the sub-flow later
        return True

    @serialized
    def complete_pizza(self, customization: PizzaCustomization, total_price: Decimal) -> ActionResult:
        return self._result(self.sequencer.complete_pizza(customization, total_price))

    @serialized
    def pick_flavor(self, flavor: str) -> ActionResult:
        return self._result(self.sequencer.complete_flavor(flavor))

    @serialized
    def cancel_subflow(self) -> ActionResult:
        return self._result(self.sequencer.cancel_subflow())

    @serialized
    def remove(self, index: int) -> ActionResult:
        return self._result(self.sequencer.remove_selection(index))

    @serialized
    def next(self) -> ActionResult:
        return self._result(self.sequencer.go_next())

    @serialized
    def skip(self) -> ActionResult:
        return self._result(self.sequencer.skip())

    @serialized
    def back(self) -> ActionResult:
        return self._result(self.sequencer.go_prev())

    @serialized
    def jump(self, index: int) -> ActionResult:
        return self._result(self.sequencer.jump_to(index))

    @serialized
    def set_subcategory(self, subcategory: str | None) -> ActionResult:
        return self._result(self.sequencer.set_subcategory(subcategory))

    @serialized
    def finish(self) -> ActionResult:
        """Add to cart. Refused (and nothing written) unless can_finish."""
        entry = self.sequencer.finish(self.cart)
        if entry is not None:
            self._message = self.finish_message(entry)
        return self._result(entry is not None, entry)

    @serialized
    def cancel(self) -> ActionResult:
        """Close the wizard. The cart is never touched."""
        return self._result(self.sequencer.cancel())
