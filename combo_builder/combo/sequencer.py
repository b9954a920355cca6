"""
Step Sequencer for the Combo Wizard.

This module provides the state machine behind the combo wizard. A session
walks the steps of one combo template in order; each step collects a number
of selections, and the combo is finished once every required step is
satisfied.

States:
- Editing(i) for each step index i. The session starts in Editing(0) with no
  selections.
- ReadyToFinish is not a state: it is the can_finish predicate on the last
  step.
- Finishing is held while the cart append runs, so a second finish sees a
  session that is no longer editing. A failed append returns to editing.
- Finished / Cancelled end the session. Nothing changes after that.

Sub-flows (pizza customization, wings flavor) are explicit pending state.
Opening one records what is being customized; completing it appends a
selection, cancelling it leaves everything as it was.

Key rule: no operation raises for a business-rule refusal. Every operation
returns whether it was performed, and the host renders the result.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Sequence
import logging

from ..schemas.combos import (
    CatalogItem,
    CatalogSize,
    ComboStepSpec,
    ComboTemplate,
    CompositeCartEntry,
    CompositeSelection,
    ItemType,
    PizzaCustomization,
    Selection,
)
from .handlers import SelectionHandler, SubFlowKind, subflow_for
from .item_filter import filter_items
from .ports import CartPort, CatalogReader
from .pricing import PriceBreakdown, price_breakdown
from .required_count import resolve_required_count
from .selection_store import SelectionStore
from .validation import is_complete, unmet_steps


logger = logging.getLogger(__name__)


class SessionStatus(str, Enum):
    """Lifecycle of a wizard session."""
    EDITING = "editing"
    FINISHING = "finishing"  # Cart append in progress
    FINISHED = "finished"
    CANCELLED = "cancelled"


class SelectOutcome(str, Enum):
    """Result of choosing a candidate item."""
    ADDED = "added"  # Selection appended immediately
    SUBFLOW_OPENED = "subflow_opened"  # Waiting on pizza/flavor sub-flow
    REJECTED = "rejected"  # No-op (full step, unknown item, sub-flow open, ended)


@dataclass(frozen=True)
class PendingSubFlow:
    """A sub-flow opened for one candidate of one step."""

    kind: SubFlowKind
    step_id: str
    item: CatalogItem
    size_restriction: str | None = None
    flavors: tuple[str, ...] = ()


@dataclass
class SessionState:
    """Everything one wizard session owns. Fresh for every opening."""

    template: ComboTemplate
    current_step_index: int = 0
    selections: SelectionStore = field(default_factory=SelectionStore)
    subcategory_filter: str | None = None
    pending_subflow: PendingSubFlow | None = None
    status: SessionStatus = SessionStatus.EDITING

    def reset(self) -> None:
        """Back to Editing(0) with no selections."""
        self.current_step_index = 0
        self.selections = SelectionStore()
        self.subcategory_filter = None
        self.pending_subflow = None
        self.status = SessionStatus.EDITING


class StepSequencer:
    """
    Drives one combo wizard session.

    Holds the session state, the catalog snapshot taken when the session was
    opened, and a SelectionHandler for per-item-type rules.
    """

    def __init__(
        self,
        template: ComboTemplate,
        catalog: Sequence[CatalogItem],
        handler: SelectionHandler | None = None,
    ):
        """
        Initialize a new session.

        Args:
            template: The combo being configured.
            catalog: Catalog items available during this session.
            handler: Per-item-type selection rules (default configuration if
                omitted).
        """
        self.state = SessionState(template=template)
        self.catalog: tuple[CatalogItem, ...] = tuple(catalog)
        self.handler = handler or SelectionHandler()
        self._warned_empty_steps: set[str] = set()

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def template(self) -> ComboTemplate:
        return self.state.template

    @property
    def steps(self) -> tuple[ComboStepSpec, ...]:
        return self.state.template.steps

    @property
    def current_step_index(self) -> int:
        return self.state.current_step_index

    @property
    def current_step(self) -> ComboStepSpec | None:
        if not self.steps:
            return None
        return self.steps[self.state.current_step_index]

    @property
    def selections(self) -> tuple[Selection, ...]:
        return self.state.selections.snapshot()

    @property
    def pending_subflow(self) -> PendingSubFlow | None:
        return self.state.pending_subflow

    @property
    def subcategory_filter(self) -> str | None:
        return self.state.subcategory_filter

    @property
    def status(self) -> SessionStatus:
        return self.state.status

    @property
    def is_editing(self) -> bool:
        return self.state.status == SessionStatus.EDITING

    @property
    def is_last_step(self) -> bool:
        return self.state.current_step_index >= len(self.steps) - 1

    def required_count(self, step: ComboStepSpec) -> int:
        return resolve_required_count(step, self.template.wings_pieces_per_unit)

    def step_selections(self, step: ComboStepSpec) -> list[Selection]:
        return self.state.selections.for_step(step.id)

    def is_step_complete(self, step: ComboStepSpec) -> bool:
        return self.state.selections.count_for(step.id) >= self.required_count(step)

    def candidates(self) -> list[CatalogItem]:
        """Eligible items for the current step, recomputed on every call."""
        step = self.current_step
        if step is None:
            return []
        items = filter_items(
            step,
            self.catalog,
            self.state.subcategory_filter,
            size_matcher=self.handler.size_matcher,
        )
        if not items and step.is_required and not self.state.subcategory_filter:
            if step.id not in self._warned_empty_steps:
                self._warned_empty_steps.add(step.id)
                logger.warning(
                    "Combo %s step %s (%s, size=%s) has no eligible items; "
                    "the template needs correcting",
                    self.template.id, step.id, step.item_type.value, step.size_restriction,
                )
        return items

    @property
    def can_select(self) -> bool:
        """True when the current step can take another selection."""
        step = self.current_step
        if step is None or not self.is_editing or self.state.pending_subflow is not None:
            return False
        return self.state.selections.count_for(step.id) < self.required_count(step)

    @property
    def can_go_next(self) -> bool:
        step = self.current_step
        if step is None or not self._navigable() or self.is_last_step:
            return False
        return not step.is_required or self.is_step_complete(step)

    @property
    def can_skip(self) -> bool:
        step = self.current_step
        if step is None or not self._navigable() or self.is_last_step:
            return False
        return not step.is_required

    @property
    def can_go_prev(self) -> bool:
        return self._navigable() and self.state.current_step_index > 0

    @property
    def is_complete(self) -> bool:
        """Every required step satisfied, over all steps."""
        return is_complete(self.template, self.state.selections)

    @property
    def unmet_steps(self) -> list[ComboStepSpec]:
        return unmet_steps(self.template, self.state.selections)

    @property
    def can_finish(self) -> bool:
        return self._navigable() and self.is_last_step and self.is_complete

    @property
    def prices(self) -> PriceBreakdown:
        return price_breakdown(self.template, self.state.selections)

    @property
    def total_extra_charge(self) -> Decimal:
        return self.prices.total_extra_charge

    @property
    def final_price(self) -> Decimal:
        return self.prices.final_price

    def _navigable(self) -> bool:
        """Editing and not suspended behind an open sub-flow."""
        return self.is_editing and self.state.pending_subflow is None

    def _check_editing(self, operation: str) -> bool:
        if self.is_editing:
            return True
        logger.warning(
            "Ignoring %s on combo %s session that is already %s",
            operation, self.template.id, self.state.status.value,
        )
        return False

    # =========================================================================
    # Navigation
    # =========================================================================

    def _move_to(self, index: int) -> None:
        if index != self.state.current_step_index:
            self.state.subcategory_filter = None
        self.state.current_step_index = index

    def go_next(self) -> bool:
        """Advance one step if the current one is optional or satisfied."""
        if not self._check_editing("next") or not self.can_go_next:
            return False
        self._move_to(self.state.current_step_index + 1)
        return True

    def skip(self) -> bool:
        """Advance past an optional step regardless of its selections."""
        if not self._check_editing("skip") or not self.can_skip:
            return False
        self._move_to(self.state.current_step_index + 1)
        return True

    def go_prev(self) -> bool:
        """Go back one step. Never validated."""
        if not self._check_editing("back") or not self.can_go_prev:
            return False
        self._move_to(self.state.current_step_index - 1)
        return True

    def jump_to(self, index: int) -> bool:
        """Go directly to any step (step indicator). Not gated by completion."""
        if not self._check_editing("jump") or not self._navigable():
            return False
        if not 0 <= index < len(self.steps):
            logger.debug("Jump ignored: step index %d out of range", index)
            return False
        self._move_to(index)
        return True

    def set_subcategory(self, subcategory: str | None) -> bool:
        """Narrow pizza candidates by sub-category; None shows all."""
        if not self._check_editing("subcategory"):
            return False
        step = self.current_step
        if step is None or step.item_type != ItemType.PIZZA:
            return False
        self.state.subcategory_filter = subcategory or None
        return True

    # =========================================================================
    # Selection
    # =========================================================================

    def select(self, item_id: str) -> SelectOutcome:
        """
        Choose a candidate for the current step.

        Drinks and sauces are appended at once. Pizza and wings open their
        sub-flow and wait for complete_pizza / complete_flavor.
        """
        if not self._check_editing("select"):
            return SelectOutcome.REJECTED
        step = self.current_step
        if step is None or not self.can_select:
            logger.debug("Select %s rejected: step full or sub-flow open", item_id)
            return SelectOutcome.REJECTED

        item = next((c for c in self.candidates() if c.id == item_id), None)
        if item is None:
            logger.debug("Select %s rejected: not a candidate for step %s", item_id, step.id)
            return SelectOutcome.REJECTED

        kind = subflow_for(step.item_type)
        if kind is None:
            self.state.selections.append(self.handler.build_simple(step, item))
            return SelectOutcome.ADDED

        self.state.pending_subflow = PendingSubFlow(
            kind=kind,
            step_id=step.id,
            item=item,
            size_restriction=step.size_restriction,
            flavors=tuple(self.handler.wing_flavors) if kind == SubFlowKind.FLAVOR else (),
        )
        logger.debug("Opened %s sub-flow for %s on step %s", kind.value, item.name, step.id)
        return SelectOutcome.SUBFLOW_OPENED

    def _pending_of(self, kind: SubFlowKind) -> tuple[PendingSubFlow, ComboStepSpec] | None:
        pending = self.state.pending_subflow
        if pending is None or pending.kind != kind:
            return None
        step = self.template.get_step(pending.step_id)
        if step is None:
            return None
        return pending, step

    def _has_room(self, step: ComboStepSpec) -> bool:
        return self.state.selections.count_for(step.id) < self.required_count(step)

    def _catalog_size(self, pending: PendingSubFlow, size: CatalogSize) -> CatalogSize | None:
        """The catalog size a customization names, if the step allows it."""
        found = next((s for s in pending.item.sizes if s.id == size.id), None)
        if found is None:
            logger.debug("Size %s is not offered for %s", size.id, pending.item.name)
            return None
        restriction = pending.size_restriction
        if restriction and not self.handler.size_matcher.matches(restriction, found.name):
            logger.debug("Size %s does not satisfy restriction '%s'", found.name, restriction)
            return None
        return found

    def complete_pizza(self, customization: PizzaCustomization, total_price: Decimal) -> bool:
        """
        Pizza sub-flow finished: append the customized pizza.

        The posted size must be one of the item's catalog sizes and satisfy
        the step's restriction, otherwise the customization stays open. The
        extra charge is priced from the catalog size, not the posted one.
        """
        if not self._check_editing("pizza completion"):
            return False
        found = self._pending_of(SubFlowKind.PIZZA)
        if found is None:
            return False
        pending, step = found
        size = self._catalog_size(pending, customization.size)
        if size is None:
            return False
        customization = customization.model_copy(update={"size": size})
        self.state.pending_subflow = None
        if not self._has_room(step):
            return False
        self.state.selections.append(
            self.handler.build_pizza(step, pending.item, customization, total_price)
        )
        return True

    def complete_flavor(self, flavor: str) -> bool:
        """Flavor picked: append the wings. Unknown flavors keep the picker open."""
        if not self._check_editing("flavor completion"):
            return False
        found = self._pending_of(SubFlowKind.FLAVOR)
        if found is None:
            return False
        pending, step = found
        canonical = self.handler.canonical_flavor(flavor)
        if canonical is None:
            logger.debug("Flavor '%s' is not offered; picker stays open", flavor)
            return False
        self.state.pending_subflow = None
        if not self._has_room(step):
            return False
        self.state.selections.append(self.handler.build_wings(step, pending.item, canonical))
        return True

    def cancel_subflow(self) -> bool:
        """Sub-flow dismissed. Selections are left exactly as they were."""
        if self.state.pending_subflow is None:
            return False
        logger.debug("Cancelled %s sub-flow", self.state.pending_subflow.kind.value)
        self.state.pending_subflow = None
        return True

    def remove_selection(self, global_index: int) -> bool:
        """Remove a selection, only if it belongs to the current step."""
        if not self._check_editing("remove") or not self._navigable():
            return False
        step = self.current_step
        if step is None:
            return False
        return self.state.selections.remove_at(global_index, step.id)

    # =========================================================================
    # Completion
    # =========================================================================

    def build_entry(self) -> CompositeCartEntry:
        """Fold the current selections into one composite cart entry."""
        selections = self.state.selections.snapshot()
        return CompositeCartEntry(
            combo_id=self.template.id,
            combo_name=self.template.name,
            combo_base_price=self.template.base_price,
            selections=tuple(
                CompositeSelection(
                    item_type=s.item_type,
                    item_name=s.item.name,
                    flavor=s.flavor,
                    pizza_customization=s.pizza_customization,
                    extra_charge=s.extra_charge,
                )
                for s in selections
            ),
            total_extra_charge=price_breakdown(self.template, selections).total_extra_charge,
        )

    def finish(self, cart: CartPort) -> CompositeCartEntry | None:
        """
        Emit the combo to the cart and end the session.

        Only allowed from the last step with every required step satisfied.
        The cart is written exactly once; a refused finish writes nothing.
        """
        if not self._check_editing("finish"):
            return None
        if not self.can_finish:
            logger.debug(
                "Finish refused for combo %s: unmet steps %s",
                self.template.id, [s.id for s in self.unmet_steps],
            )
            return None
        entry = self.build_entry()
        self.state.status = SessionStatus.FINISHING
        try:
            cart.append_to_cart(entry)
        except Exception:
            self.state.status = SessionStatus.EDITING
            logger.error("Cart append failed for combo %s; session stays editing", self.template.id)
            raise
        self.state.status = SessionStatus.FINISHED
        logger.info(
            "Combo %s finished: %d selections, final price %s",
            self.template.id, len(entry.selections), entry.final_price,
        )
        return entry

    def cancel(self) -> bool:
        """Discard the session without emitting anything."""
        if not self.is_editing:
            return False
        self.state.pending_subflow = None
        self.state.status = SessionStatus.CANCELLED
        logger.info("Combo %s session cancelled", self.template.id)
        return True

    def reset(self) -> None:
        """Start over: Editing(0), no selections."""
        self.state.reset()
        self._warned_empty_steps.clear()


def open_session(
    catalog: CatalogReader,
    combo_id: str,
    handler: SelectionHandler | None = None,
) -> StepSequencer | None:
    """
    Open a fresh wizard session for a combo.

    Returns:
        A new StepSequencer, or None if the template does not exist.
    """
    template = catalog.get_template(combo_id)
    if template is None:
        logger.info("Combo %s not found", combo_id)
        return None
    sequencer = StepSequencer(template, catalog.list_catalog_items(), handler=handler)
    logger.info("Opened combo %s session (%d steps)", template.id, len(template.steps))
    return sequencer
