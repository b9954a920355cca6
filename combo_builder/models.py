import uuid

from sqlalchemy import (
    Column,
    String,
    Integer,
    Numeric,
    Boolean,
    JSON,
    DateTime,
    ForeignKey,
    Text,
    Index,
    func,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def _uuid() -> str:
    return str(uuid.uuid4())


# --- Combo templates ---

class Combo(Base):
    __tablename__ = "combos"

    id = Column(String, primary_key=True, default=_uuid)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    image_url = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    sort_order = Column(Integer, nullable=False, default=0)

    # 'always' | 'days_of_week' | 'dates_of_month'
    schedule_type = Column(String, nullable=True, default="always")
    schedule_days = Column(JSON, nullable=True)    # [0..6], 0 = Sunday
    schedule_dates = Column(JSON, nullable=True)   # [1..31]

    # Pieces per catalog wings item for "N Pieces" steps; NULL = app default
    wings_pieces_per_unit = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    items = relationship(
        "ComboItem",
        back_populates="combo",
        cascade="all, delete-orphan",
        order_by="ComboItem.sort_order",
    )


class ComboItem(Base):
    """One step of a combo: an item type slot with its quantity and rules."""
    __tablename__ = "combo_items"

    id = Column(String, primary_key=True, default=_uuid)
    combo_id = Column(String, ForeignKey("combos.id", ondelete="CASCADE"), nullable=False, index=True)
    item_type = Column(String, nullable=False)  # 'pizza', 'wings', 'drinks', 'dipping_sauce'
    quantity = Column(Integer, nullable=False, default=1)
    size_restriction = Column(String, nullable=True)  # e.g. 'Large', '2 Litre', '24 Pieces'
    is_required = Column(Boolean, nullable=False, default=True)
    is_chargeable = Column(Boolean, nullable=False, default=False)
    sort_order = Column(Integer, nullable=False, default=0)

    combo = relationship("Combo", back_populates="items")


# --- Menu catalog ---

class MenuItem(Base):
    __tablename__ = "menu_items"

    id = Column(String, primary_key=True, default=_uuid)
    name = Column(String, nullable=False)
    category = Column(String, nullable=False, index=True)  # 'pizza', 'chicken_wings', 'drinks', 'dipping_sauce', ...
    subcategory = Column(String, nullable=True)  # 'Vegetarian', 'Chicken', ...
    base_price = Column(Numeric(10, 2), nullable=False)
    image_url = Column(String, nullable=True)
    is_available = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)

    sizes = relationship(
        "MenuItemSize",
        back_populates="menu_item",
        cascade="all, delete-orphan",
        order_by="MenuItemSize.sort_order",
    )

    __table_args__ = (
        Index("ix_menu_items_category_available", "category", "is_available"),
    )


class MenuItemSize(Base):
    __tablename__ = "menu_item_sizes"

    id = Column(String, primary_key=True, default=_uuid)
    menu_item_id = Column(String, ForeignKey("menu_items.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)

    menu_item = relationship("MenuItem", back_populates="sizes")
