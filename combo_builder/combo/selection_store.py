"""
Selection store for a combo wizard session.

Holds the selections made so far in the order they were made. Selections are
grouped by step id; removal is always scoped to one step so that editing one
step can never disturb another.
"""

import logging
from typing import Iterator

from ..schemas.combos import Selection


logger = logging.getLogger(__name__)


class SelectionStore:
    """Ordered, step-scoped list of selections."""

    def __init__(self, selections: list[Selection] | None = None):
        self._selections: list[Selection] = list(selections or [])

    def __len__(self) -> int:
        return len(self._selections)

    def __iter__(self) -> Iterator[Selection]:
        return iter(tuple(self._selections))

    def __getitem__(self, index: int) -> Selection:
        return self._selections[index]

    def append(self, selection: Selection) -> None:
        """Add a selection at the end. Capacity is checked by the caller."""
        self._selections.append(selection)

    def remove_at(self, global_index: int, step_id: str) -> bool:
        """
        Remove the selection at a global index, if it belongs to step_id.

        Returns:
            True if a selection was removed, False if the index is out of
            range or the selection belongs to a different step.
        """
        if not 0 <= global_index < len(self._selections):
            logger.debug("Remove ignored: index %d out of range", global_index)
            return False
        selection = self._selections[global_index]
        if selection.step_id != step_id:
            logger.debug(
                "Remove ignored: index %d belongs to step %s, not %s",
                global_index, selection.step_id, step_id,
            )
            return False
        del self._selections[global_index]
        return True

    def for_step(self, step_id: str) -> list[Selection]:
        return [s for s in self._selections if s.step_id == step_id]

    def count_for(self, step_id: str) -> int:
        return sum(1 for s in self._selections if s.step_id == step_id)

    def indexed_for(self, step_id: str) -> list[tuple[int, Selection]]:
        """Selections of one step with their global indexes."""
        return [(i, s) for i, s in enumerate(self._selections) if s.step_id == step_id]

    def snapshot(self) -> tuple[Selection, ...]:
        """Immutable copy of the current selections."""
        return tuple(self._selections)

    def clear(self) -> None:
        self._selections.clear()
