"""
Tests for the combo wizard step sequencer.

Covers navigation rules, selection capacity, sub-flows, step-scoped removal
and the finish/cancel lifecycle.
"""
import logging
from decimal import Decimal

import pytest

from combo_builder.combo.handlers import SelectionHandler, SubFlowKind
from combo_builder.combo.sequencer import SelectOutcome, SessionStatus, StepSequencer, open_session
from combo_builder.schemas.combos import CatalogSize, ComboStepSpec, ComboTemplate, PizzaCustomization

from conftest import FailingCart, make_customization


@pytest.fixture
def seq(pizza_pop_template, catalog_items):
    return StepSequencer(pizza_pop_template, catalog_items)


@pytest.fixture
def party(party_template, catalog_items):
    return StepSequencer(party_template, catalog_items)


def add_pizza(seq, items_by_id, item_id="p-marg", size='Large 14"', total="15.99"):
    assert seq.select(item_id) == SelectOutcome.SUBFLOW_OPENED
    item = items_by_id[item_id]
    assert seq.complete_pizza(make_customization(item, size), Decimal(total))


# =============================================================================
# Initial State
# =============================================================================

class TestOpenSession:

    def test_opens_on_first_step_with_nothing_selected(self, memory_catalog):
        seq = open_session(memory_catalog, "pizza-pop")
        assert seq.current_step_index == 0
        assert seq.current_step.id == "st-pizza"
        assert seq.selections == ()
        assert seq.status == SessionStatus.EDITING
        assert seq.final_price == Decimal("24.99")

    def test_unknown_combo(self, memory_catalog):
        assert open_session(memory_catalog, "nope") is None

    def test_each_opening_is_fresh(self, memory_catalog, items_by_id):
        first = open_session(memory_catalog, "pizza-pop")
        add_pizza(first, items_by_id)
        second = open_session(memory_catalog, "pizza-pop")
        assert second.selections == ()

    def test_steps_follow_sort_order(self, catalog_items):
        template = ComboTemplate(
            id="t", name="T", base_price=Decimal("5"),
            steps=[
                ComboStepSpec(id="b", item_type="drinks", sort_order=2),
                ComboStepSpec(id="a", item_type="dipping_sauce", sort_order=1),
            ],
        )
        seq = StepSequencer(template, catalog_items)
        assert [s.id for s in seq.steps] == ["a", "b"]


# =============================================================================
# Navigation
# =============================================================================

class TestNavigation:

    def test_next_blocked_until_required_step_satisfied(self, seq, items_by_id):
        assert not seq.can_go_next
        assert not seq.go_next()
        assert seq.current_step_index == 0

        add_pizza(seq, items_by_id)
        assert seq.can_go_next
        assert seq.go_next()
        assert seq.current_step_index == 1

    def test_skip_only_on_optional_steps(self, seq, items_by_id):
        assert not seq.skip()

        template = ComboTemplate(
            id="t", name="T", base_price=Decimal("5"),
            steps=[
                ComboStepSpec(id="a", item_type="dipping_sauce", is_required=False),
                ComboStepSpec(id="b", item_type="drinks"),
            ],
        )
        other = StepSequencer(template, list(items_by_id.values()))
        assert other.can_skip
        assert other.skip()
        assert other.current_step_index == 1

    def test_back_is_never_validated(self, seq, items_by_id):
        assert not seq.go_prev()
        add_pizza(seq, items_by_id)
        seq.go_next()
        assert seq.go_prev()
        assert seq.current_step_index == 0

    def test_jump_to_any_step(self, seq):
        assert seq.jump_to(2)
        assert seq.current_step_index == 2
        assert seq.is_last_step

    def test_jump_out_of_range_is_noop(self, seq):
        assert not seq.jump_to(3)
        assert not seq.jump_to(-1)
        assert seq.current_step_index == 0

    def test_step_change_clears_subcategory(self, seq):
        assert seq.set_subcategory("Chicken")
        assert [c.id for c in seq.candidates()] == ["p-supreme"]
        seq.jump_to(1)
        seq.jump_to(0)
        assert seq.subcategory_filter is None
        assert len(seq.candidates()) == 3

    def test_subcategory_only_on_pizza_steps(self, seq):
        seq.jump_to(1)
        assert not seq.set_subcategory("Chicken")

    def test_next_not_offered_on_last_step(self, seq):
        seq.jump_to(2)
        assert not seq.can_go_next
        assert not seq.can_skip


# =============================================================================
# Selection
# =============================================================================

class TestSelection:

    def test_simple_item_added_immediately(self, seq):
        seq.jump_to(1)
        assert seq.select("d-coke") == SelectOutcome.ADDED
        assert seq.selections[0].extra_charge == Decimal("4.99")

    def test_capacity_is_enforced(self, seq):
        seq.jump_to(1)
        seq.select("d-coke")
        assert not seq.can_select
        assert seq.select("d-sprite") == SelectOutcome.REJECTED
        assert len(seq.selections) == 1

    def test_non_candidate_rejected(self, seq):
        assert seq.select("p-kids") == SelectOutcome.REJECTED
        assert seq.select("d-coke") == SelectOutcome.REJECTED
        assert seq.pending_subflow is None

    def test_candidates_are_recomputed(self, seq):
        first = seq.candidates()
        assert seq.candidates() == first
        assert seq.candidates() is not first

    def test_empty_required_step_warns_once(self, catalog_items, caplog):
        template = ComboTemplate(
            id="broken", name="Broken", base_price=Decimal("5"),
            steps=[ComboStepSpec(id="keg", item_type="drinks", size_restriction="Keg")],
        )
        seq = StepSequencer(template, catalog_items)
        with caplog.at_level(logging.WARNING, logger="combo_builder"):
            assert seq.candidates() == []
            assert seq.candidates() == []
        warnings = [r for r in caplog.records if "no eligible items" in r.getMessage()]
        assert len(warnings) == 1
        assert not seq.can_go_next


class TestRemoval:

    def test_remove_on_current_step(self, party, items_by_id):
        add_pizza(party, items_by_id)
        add_pizza(party, items_by_id, "p-supreme", "Large", "18.99")
        assert party.remove_selection(0)
        assert [s.item.id for s in party.selections] == ["p-supreme"]

    def test_cannot_remove_other_steps_selection(self, seq, items_by_id):
        add_pizza(seq, items_by_id)
        seq.go_next()
        seq.select("d-coke")
        assert not seq.remove_selection(0)
        assert len(seq.selections) == 2

    def test_removal_never_touches_other_steps(self, seq, items_by_id):
        add_pizza(seq, items_by_id, total="18.49")
        seq.go_next()
        seq.select("d-coke")
        pizza_charge = seq.step_selections(seq.steps[0])[0].extra_charge

        assert seq.remove_selection(1)
        assert len(seq.step_selections(seq.steps[0])) == 1
        assert seq.step_selections(seq.steps[0])[0].extra_charge == pizza_charge
        assert seq.total_extra_charge == Decimal("2.50")


# =============================================================================
# Sub-flows
# =============================================================================

class TestPizzaSubFlow:

    def test_extra_is_total_above_size_price(self, seq, items_by_id):
        add_pizza(seq, items_by_id, total="18.49")
        assert seq.selections[0].extra_charge == Decimal("2.50")
        assert seq.final_price == Decimal("27.49")

    def test_cheaper_total_never_goes_negative(self, seq, items_by_id):
        add_pizza(seq, items_by_id, total="10.00")
        assert seq.selections[0].extra_charge == Decimal("0.00")

    def test_pending_subflow_records_item_and_restriction(self, seq):
        seq.select("p-supreme")
        pending = seq.pending_subflow
        assert pending.kind == SubFlowKind.PIZZA
        assert pending.item.id == "p-supreme"
        assert pending.size_restriction == "Large"

    def test_navigation_blocked_while_open(self, seq, items_by_id):
        seq.select("p-marg")
        assert not seq.jump_to(1)
        assert not seq.can_go_prev
        assert not seq.can_select
        assert seq.select("p-supreme") == SelectOutcome.REJECTED

    def test_cancel_leaves_selections_unchanged(self, party, items_by_id):
        add_pizza(party, items_by_id)
        before = party.selections
        party.select("p-supreme")
        assert party.cancel_subflow()
        assert party.selections == before
        assert party.pending_subflow is None
        assert not party.cancel_subflow()

    def test_customization_extras_carried_through(self, seq, items_by_id):
        item = items_by_id["p-marg"]
        custom = make_customization(item, 'Large 14"', crust="thin", toppings=["olives"])
        seq.select("p-marg")
        seq.complete_pizza(custom, Decimal("16.99"))
        stored = seq.selections[0].pizza_customization
        assert stored.crust == "thin"
        assert stored.toppings == ["olives"]

    def test_completion_without_pending_is_rejected(self, seq, items_by_id):
        custom = make_customization(items_by_id["p-marg"], "Medium")
        assert not seq.complete_pizza(custom, Decimal("12.99"))

    def test_size_outside_restriction_keeps_customization_open(self, seq, items_by_id):
        seq.select("p-marg")
        custom = make_customization(items_by_id["p-marg"], "Medium")
        assert not seq.complete_pizza(custom, Decimal("12.99"))
        assert seq.pending_subflow is not None
        assert seq.selections == ()

    def test_size_not_offered_for_item_is_rejected(self, seq, items_by_id):
        seq.select("p-marg")
        other = make_customization(items_by_id["p-supreme"], "Large")
        assert not seq.complete_pizza(other, Decimal("18.99"))
        assert seq.pending_subflow is not None
        assert seq.selections == ()

    def test_extra_priced_from_catalog_size(self, seq, items_by_id):
        seq.select("p-marg")
        catalog_size = items_by_id["p-marg"].sizes[1]
        posted = CatalogSize(id=catalog_size.id, name=catalog_size.name, price=Decimal("40.00"))
        custom = PizzaCustomization(size=posted, original_item_id="p-marg")

        assert seq.complete_pizza(custom, Decimal("17.99"))
        selection = seq.selections[0]
        assert selection.pizza_customization.size.price == Decimal("15.99")
        assert selection.extra_charge == Decimal("2.00")


class TestFlavorSubFlow:

    @pytest.fixture
    def wings(self, wings_template, catalog_items):
        return StepSequencer(wings_template, catalog_items)

    def test_flavor_picker_offers_configured_list(self, wings):
        assert wings.select("w-classic") == SelectOutcome.SUBFLOW_OPENED
        assert wings.pending_subflow.kind == SubFlowKind.FLAVOR
        assert "Honey Garlic" in wings.pending_subflow.flavors

    def test_flavor_is_canonicalized(self, wings):
        wings.select("w-hot")
        assert wings.complete_flavor("honey garlic")
        selection = wings.selections[0]
        assert selection.flavor == "Honey Garlic"
        assert selection.extra_charge == Decimal("0.00")
        assert selection.get_display_name() == "Hot Wings (Honey Garlic)"

    def test_unknown_flavor_keeps_picker_open(self, wings):
        wings.select("w-hot")
        assert not wings.complete_flavor("Mango Habanero")
        assert wings.pending_subflow is not None
        assert wings.selections == ()

    def test_custom_flavor_list(self, wings_template, catalog_items):
        seq = StepSequencer(wings_template, catalog_items, SelectionHandler(wing_flavors=["Mango"]))
        seq.select("w-hot")
        assert seq.pending_subflow.flavors == ("Mango",)
        assert seq.complete_flavor("mango")

    def test_cancel_leaves_nothing_behind(self, wings):
        wings.select("w-classic")
        wings.cancel_subflow()
        assert wings.selections == ()
        assert wings.can_select


# =============================================================================
# Lifecycle
# =============================================================================

class TestFinish:

    def test_refused_until_complete_and_on_last_step(self, seq, items_by_id, cart):
        assert seq.finish(cart) is None
        add_pizza(seq, items_by_id)
        seq.go_next()
        seq.select("d-coke")
        assert seq.is_complete
        assert seq.finish(cart) is None  # not on last step yet
        seq.go_next()
        assert seq.can_finish
        assert seq.finish(cart) is not None
        assert len(cart.entries) == 1

    def test_finish_ends_session(self, seq, items_by_id, cart):
        add_pizza(seq, items_by_id)
        seq.go_next()
        seq.select("d-coke")
        seq.go_next()
        seq.finish(cart)
        assert seq.status == SessionStatus.FINISHED
        assert seq.finish(cart) is None
        assert seq.select("s-garlic") == SelectOutcome.REJECTED
        assert len(cart.entries) == 1

    def test_cart_failure_leaves_session_editing(self, seq, items_by_id):
        add_pizza(seq, items_by_id)
        seq.go_next()
        seq.select("d-coke")
        seq.go_next()
        with pytest.raises(RuntimeError):
            seq.finish(FailingCart())
        assert seq.status == SessionStatus.EDITING
        assert seq.can_finish

    def test_finish_during_cart_append_is_refused(self, seq, items_by_id, cart):
        add_pizza(seq, items_by_id)
        seq.go_next()
        seq.select("d-coke")
        seq.go_next()

        seen = []

        class ReentrantCart:
            def append_to_cart(self, entry):
                seen.append(seq.status)
                seen.append(seq.finish(cart))

        assert seq.finish(ReentrantCart()) is not None
        assert seen == [SessionStatus.FINISHING, None]
        assert cart.entries == []
        assert seq.status == SessionStatus.FINISHED

    def test_cancel_never_touches_cart(self, seq, items_by_id, cart):
        add_pizza(seq, items_by_id)
        assert seq.cancel()
        assert seq.status == SessionStatus.CANCELLED
        assert cart.entries == []
        assert not seq.cancel()

    def test_operations_after_end_warn(self, seq, caplog):
        seq.cancel()
        with caplog.at_level(logging.WARNING, logger="combo_builder"):
            assert not seq.jump_to(1)
        assert any("already cancelled" in r.getMessage() for r in caplog.records)

    def test_reset_starts_over(self, seq, items_by_id):
        add_pizza(seq, items_by_id)
        seq.go_next()
        seq.reset()
        assert seq.current_step_index == 0
        assert seq.selections == ()
