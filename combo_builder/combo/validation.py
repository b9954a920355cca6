"""
Completion checks for a combo.

A combo is complete when every required step has at least its resolved
required count of selections. Optional steps never block completion. Every
check counts the selections passed in; no per-step flag is stored.
"""

from typing import Iterable

from ..schemas.combos import ComboStepSpec, ComboTemplate, Selection
from .required_count import resolve_required_count


def count_for_step(step: ComboStepSpec, selections: Iterable[Selection]) -> int:
    return sum(1 for s in selections if s.step_id == step.id)


def is_step_satisfied(
    step: ComboStepSpec,
    selections: Iterable[Selection],
    pieces_per_unit: int | None = None,
) -> bool:
    """True when a step has at least its required count of selections."""
    return count_for_step(step, selections) >= resolve_required_count(step, pieces_per_unit)


def unmet_steps(template: ComboTemplate, selections: Iterable[Selection]) -> list[ComboStepSpec]:
    """Required steps that still need selections, in step order."""
    selections = tuple(selections)
    return [
        step for step in template.steps
        if step.is_required
        and not is_step_satisfied(step, selections, template.wings_pieces_per_unit)
    ]


def is_complete(template: ComboTemplate, selections: Iterable[Selection]) -> bool:
    """True when every required step of the template is satisfied."""
    return not unmet_steps(template, selections)
