"""
Presentation adapters for the combo wizard.

Both surfaces run the same StepSequencer; they differ only in wording.
"""

from .base import ComboWizardAdapter, format_money
from .storefront import StorefrontComboAdapter
from .pos import PosComboAdapter

ADAPTERS_BY_SURFACE = {
    StorefrontComboAdapter.SURFACE: StorefrontComboAdapter,
    PosComboAdapter.SURFACE: PosComboAdapter,
}

__all__ = [
    "ComboWizardAdapter",
    "StorefrontComboAdapter",
    "PosComboAdapter",
    "ADAPTERS_BY_SURFACE",
    "format_money",
]
