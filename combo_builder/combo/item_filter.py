"""
Candidate filtering for a combo step.

Given a step and the full catalog, returns the items the user may pick for
that step:

1. Category must map to the step's item type (wings additionally require
   "wings" in the item name, so boneless bites and tenders stay out).
2. With a size restriction, the item must offer a matching size. A wings step
   whose restriction is a piece count is exempt; that text sets the required
   count instead.
3. On pizza steps, an active sub-category filter narrows by subcategory.

The result is recomputed on every call; nothing is cached.
"""

import logging
from typing import Iterable

from ..schemas.combos import CatalogItem, ComboStepSpec, ItemType
from .required_count import is_piece_count_step
from .size_matching import SizeMatcher, default_size_matcher


logger = logging.getLogger(__name__)


# Combo item type -> catalog category
CATEGORY_BY_ITEM_TYPE: dict[ItemType, str] = {
    ItemType.PIZZA: "pizza",
    ItemType.WINGS: "chicken_wings",
    ItemType.DRINKS: "drinks",
    ItemType.DIPPING_SAUCE: "dipping_sauce",
}


def item_matches_type(item: CatalogItem, item_type: ItemType) -> bool:
    """True when a catalog item belongs to a combo item type."""
    category = CATEGORY_BY_ITEM_TYPE.get(item_type)
    if category is None or item.category != category:
        return False
    if item_type == ItemType.WINGS:
        return "wings" in item.name.lower()
    return True


def filter_items(
    step: ComboStepSpec,
    catalog: Iterable[CatalogItem],
    subcategory_filter: str | None = None,
    size_matcher: SizeMatcher | None = None,
) -> list[CatalogItem]:
    """
    Return the catalog items eligible for a step, in catalog order.

    Args:
        step: The combo step being rendered.
        catalog: All catalog items.
        subcategory_filter: Pizza sub-category to narrow by (case-insensitive).
        size_matcher: Matcher for size restrictions (default table if omitted).

    Returns:
        List of eligible items. May be empty for a misconfigured template.
    """
    matcher = size_matcher or default_size_matcher

    items = [item for item in catalog if item_matches_type(item, step.item_type)]

    if step.size_restriction and not is_piece_count_step(step):
        items = [item for item in items if matcher.any_match(step.size_restriction, item.sizes)]

    if step.item_type == ItemType.PIZZA and subcategory_filter:
        wanted = subcategory_filter.lower()
        items = [item for item in items if (item.subcategory or "").lower() == wanted]

    logger.debug(
        "Step %s (%s, size=%s, subcategory=%s): %d candidates",
        step.id, step.item_type.value, step.size_restriction, subcategory_filter, len(items),
    )
    return items
