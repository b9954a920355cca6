"""
Combo Configurator Core.

This package implements the rules of the combo wizard once, independent of
any UI:
- Required selection counts per step (wings piece counts included)
- Candidate filtering by item type, size restriction and sub-category
- Per-item-type selection rules and sub-flow delegation
- Step-scoped selection storage, pricing and completion checks
- The step sequencer that ties them together and emits the cart entry
"""

from .required_count import (
    parse_piece_count,
    is_piece_count_step,
    resolve_required_count,
)

from .size_matching import (
    SizeMatcher,
    default_size_matcher,
)

from .item_filter import (
    CATEGORY_BY_ITEM_TYPE,
    item_matches_type,
    filter_items,
)

from .selection_store import SelectionStore

from .pricing import (
    PriceBreakdown,
    total_extra_charge,
    final_price,
    price_breakdown,
)

from .validation import (
    is_step_satisfied,
    unmet_steps,
    is_complete,
)

from .handlers import (
    SubFlowKind,
    SelectionHandler,
    subflow_for,
)

from .schedule import (
    is_combo_active_on,
    is_combo_offered,
)

from .sequencer import (
    SessionStatus,
    SelectOutcome,
    PendingSubFlow,
    SessionState,
    StepSequencer,
    open_session,
)

__all__ = [
    "parse_piece_count",
    "is_piece_count_step",
    "resolve_required_count",
    "SizeMatcher",
    "default_size_matcher",
    "CATEGORY_BY_ITEM_TYPE",
    "item_matches_type",
    "filter_items",
    "SelectionStore",
    "PriceBreakdown",
    "total_extra_charge",
    "final_price",
    "price_breakdown",
    "is_step_satisfied",
    "unmet_steps",
    "is_complete",
    "SubFlowKind",
    "SelectionHandler",
    "subflow_for",
    "is_combo_active_on",
    "is_combo_offered",
    "SessionStatus",
    "SelectOutcome",
    "PendingSubFlow",
    "SessionState",
    "StepSequencer",
    "open_session",
]
