"""
Schemas Package for Combo Builder
=================================

Pydantic models used by the combo core and the HTTP host.

Schema Organization:
--------------------
- **combos.py**: Domain models (templates, catalog items, selections, cart
  entries)
- **wizard.py**: Wizard view models rendered by the presentation adapters and
  request bodies accepted by the wizard routes

Naming Conventions:
-------------------
- *Out / *View: Response models
- *Request: Request bodies
"""

from .combos import (
    ItemType,
    ScheduleType,
    CatalogSize,
    CatalogItem,
    ComboStepSpec,
    ComboTemplate,
    PizzaCustomization,
    Selection,
    CompositeSelection,
    CompositeCartEntry,
    CartLine,
    CartOut,
)
