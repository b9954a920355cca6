"""
Tests for candidate filtering.
"""
import pytest

from combo_builder.combo.item_filter import CATEGORY_BY_ITEM_TYPE, filter_items, item_matches_type
from combo_builder.schemas.combos import ComboStepSpec, ItemType


def ids(items):
    return [item.id for item in items]


class TestTypeMapping:

    @pytest.mark.parametrize("item_type", list(ItemType))
    def test_never_returns_other_categories(self, catalog_items, item_type):
        step = ComboStepSpec(id="s", item_type=item_type)
        for item in filter_items(step, catalog_items):
            assert item.category == CATEGORY_BY_ITEM_TYPE[item_type]

    def test_wings_need_wings_in_name(self, items_by_id):
        assert item_matches_type(items_by_id["w-classic"], ItemType.WINGS)
        assert not item_matches_type(items_by_id["w-bites"], ItemType.WINGS)

    def test_unrestricted_step_returns_every_item_of_type_in_catalog_order(self, catalog_items):
        step = ComboStepSpec(id="s", item_type="dipping_sauce")
        assert ids(filter_items(step, catalog_items)) == ["s-garlic", "s-ranch"]


class TestSizeRestriction:

    def test_large_pizza(self, catalog_items):
        step = ComboStepSpec(id="s", item_type="pizza", size_restriction="Large")
        assert ids(filter_items(step, catalog_items)) == ["p-marg", "p-paneer", "p-supreme"]

    def test_two_litre_drinks(self, catalog_items):
        step = ComboStepSpec(id="s", item_type="drinks", size_restriction="2 Litre")
        assert ids(filter_items(step, catalog_items)) == ["d-coke", "d-sprite"]

    def test_piece_count_wings_step_is_not_size_filtered(self, catalog_items):
        step = ComboStepSpec(id="s", item_type="wings", size_restriction="24 Pieces")
        assert ids(filter_items(step, catalog_items)) == ["w-classic", "w-hot"]

    def test_no_match_gives_empty_list(self, catalog_items):
        step = ComboStepSpec(id="s", item_type="drinks", size_restriction="Keg")
        assert filter_items(step, catalog_items) == []


class TestSubcategoryFilter:

    def test_narrows_pizza_candidates(self, catalog_items):
        step = ComboStepSpec(id="s", item_type="pizza", size_restriction="Large")
        assert ids(filter_items(step, catalog_items, "Chicken")) == ["p-supreme"]

    def test_is_case_insensitive(self, catalog_items):
        step = ComboStepSpec(id="s", item_type="pizza")
        assert ids(filter_items(step, catalog_items, "vegetarian")) == ["p-marg", "p-kids"]

    def test_ignored_on_non_pizza_steps(self, catalog_items):
        step = ComboStepSpec(id="s", item_type="drinks")
        assert len(filter_items(step, catalog_items, "Chicken")) == 3
