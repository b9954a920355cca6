"""
Catalog Read Service for Combo Builder
======================================

This module implements the catalog read port used to open combo wizard
sessions. Two implementations are provided:

1. **SqlCatalog**: Reads combos, combo items, menu items and their sizes
   through a SQLAlchemy session. Used by the HTTP host.

2. **InMemoryCatalog**: Holds already-built ComboTemplate and CatalogItem
   values. Used by tests and by hosts that load the menu some other way.

Both return pydantic domain models (schemas/combos.py), never ORM rows, so a
wizard session cannot observe or trigger database changes.

Usage:
------
    from combo_builder.services.catalog import SqlCatalog

    catalog = SqlCatalog(db)
    template = catalog.get_template(combo_id)
    items = catalog.list_catalog_items()
"""

import logging
from datetime import date
from typing import Dict, Iterable, List, Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session, selectinload

from ..combo.schedule import is_combo_offered
from ..models import Combo, MenuItem
from ..schemas.combos import CatalogItem, CatalogSize, ComboStepSpec, ComboTemplate


logger = logging.getLogger(__name__)


# =============================================================================
# Row Conversion
# =============================================================================

def combo_to_template(combo: Combo) -> ComboTemplate:
    """Convert a Combo row (with its items) to a ComboTemplate."""
    return ComboTemplate(
        id=combo.id,
        name=combo.name,
        description=combo.description,
        base_price=combo.price,
        image_url=combo.image_url,
        is_active=combo.is_active,
        sort_order=combo.sort_order or 0,
        schedule_type=combo.schedule_type or "always",
        schedule_days=combo.schedule_days,
        schedule_dates=combo.schedule_dates,
        wings_pieces_per_unit=combo.wings_pieces_per_unit,
        steps=[
            ComboStepSpec(
                id=item.id,
                item_type=item.item_type,
                quantity=item.quantity or 1,
                size_restriction=item.size_restriction or None,
                is_required=item.is_required,
                is_chargeable=item.is_chargeable,
                sort_order=item.sort_order or 0,
            )
            for item in combo.items
        ],
    )


def menu_item_to_catalog(item: MenuItem) -> CatalogItem:
    """Convert a MenuItem row (with its sizes) to a CatalogItem."""
    return CatalogItem(
        id=item.id,
        name=item.name,
        category=item.category,
        subcategory=item.subcategory,
        base_price=item.base_price,
        image_url=item.image_url,
        sizes=[CatalogSize(id=s.id, name=s.name, price=s.price) for s in item.sizes],
    )


# =============================================================================
# SQLAlchemy Catalog
# =============================================================================

class SqlCatalog:
    """Catalog read port backed by the catalog database."""

    def __init__(self, db: Session):
        self.db = db

    def get_template(self, combo_id: str) -> Optional[ComboTemplate]:
        combo = (
            self.db.query(Combo)
            .options(selectinload(Combo.items))
            .filter(Combo.id == combo_id)
            .first()
        )
        if combo is None:
            return None
        return combo_to_template(combo)

    def list_catalog_items(self, category: Optional[str] = None) -> List[CatalogItem]:
        """Available menu items, optionally for one category, in menu order."""
        query = (
            self.db.query(MenuItem)
            .options(selectinload(MenuItem.sizes))
            .filter(MenuItem.is_available.is_(True))
        )
        if category:
            query = query.filter(MenuItem.category == category)
        rows = query.order_by(MenuItem.sort_order.asc(), MenuItem.name.asc()).all()
        return [menu_item_to_catalog(row) for row in rows]

    def list_active_templates(self, today: Optional[date] = None) -> List[ComboTemplate]:
        """Active combos whose schedule offers them today."""
        combos = (
            self.db.query(Combo)
            .options(selectinload(Combo.items))
            .filter(Combo.is_active.is_(True))
            .order_by(Combo.sort_order.asc())
            .all()
        )
        templates = []
        for combo in combos:
            try:
                templates.append(combo_to_template(combo))
            except ValidationError as e:
                logger.warning("Skipping misconfigured combo %s: %s", combo.id, e)
        return [t for t in templates if is_combo_offered(t, today)]


# =============================================================================
# In-Memory Catalog
# =============================================================================

class InMemoryCatalog:
    """Catalog read port over values held in memory."""

    def __init__(
        self,
        templates: Iterable[ComboTemplate] = (),
        items: Iterable[CatalogItem] = (),
    ):
        self._templates: Dict[str, ComboTemplate] = {t.id: t for t in templates}
        self._items: List[CatalogItem] = list(items)

    def get_template(self, combo_id: str) -> Optional[ComboTemplate]:
        return self._templates.get(combo_id)

    def list_catalog_items(self, category: Optional[str] = None) -> List[CatalogItem]:
        if category:
            return [item for item in self._items if item.category == category]
        return list(self._items)

    def list_active_templates(self, today: Optional[date] = None) -> List[ComboTemplate]:
        templates = sorted(self._templates.values(), key=lambda t: t.sort_order)
        return [t for t in templates if is_combo_offered(t, today)]
