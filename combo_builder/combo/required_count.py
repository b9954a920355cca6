"""
Required selection count for a combo step.

Most steps need exactly `quantity` selections. Wings steps are the exception:
a restriction like "24 Pieces" describes a total piece count, and catalog
wings items are sold in fixed units (12 pieces unless configured otherwise),
so the step needs ceil(24 / 12) = 2 selections.
"""

import math
import re

from .. import config
from ..schemas.combos import ComboStepSpec, ItemType


PIECES_PATTERN = re.compile(r"(\d+)\s*pieces?", re.IGNORECASE)


def parse_piece_count(size_restriction: str | None) -> int | None:
    """Extract N from an "N Pieces" restriction, or None if it is not one.

    Examples:
        "24 Pieces" -> 24
        "12 piece" -> 12
        "Large" -> None
    """
    if not size_restriction:
        return None
    match = PIECES_PATTERN.search(size_restriction)
    if not match:
        return None
    return int(match.group(1))


def is_piece_count_step(step: ComboStepSpec) -> bool:
    """True when a wings step's size restriction is really a piece count."""
    return step.item_type == ItemType.WINGS and parse_piece_count(step.size_restriction) is not None


def resolve_required_count(step: ComboStepSpec, pieces_per_unit: int | None = None) -> int:
    """
    Return how many selections a step needs to be satisfied.

    Args:
        step: The combo step.
        pieces_per_unit: Pieces per catalog wings item. Defaults to
            config.WINGS_PIECES_PER_UNIT.

    Returns:
        A positive integer.
    """
    if step.item_type == ItemType.WINGS:
        pieces = parse_piece_count(step.size_restriction)
        if pieces is not None:
            unit = pieces_per_unit or config.WINGS_PIECES_PER_UNIT
            return max(1, math.ceil(pieces / unit))
    return step.quantity
