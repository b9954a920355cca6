from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import combo_builder.config as config_mod
import combo_builder.db as db
from combo_builder.app_factory import create_app
from combo_builder.models import Base, Combo, ComboItem, MenuItem, MenuItemSize
from combo_builder.schemas.combos import (
    CatalogItem,
    CatalogSize,
    ComboStepSpec,
    ComboTemplate,
    PizzaCustomization,
)
from combo_builder.services.cart import clear_carts
from combo_builder.services.catalog import InMemoryCatalog
from combo_builder.services.session import clear_sessions

# Test staff credentials
TEST_STAFF_USERNAME = "teststaff"
TEST_STAFF_PASSWORD = "testpassword123"


# =============================================================================
# Domain Builders
# =============================================================================

def make_item(item_id, name, category, base_price, sizes=(), subcategory=None):
    return CatalogItem(
        id=item_id,
        name=name,
        category=category,
        base_price=Decimal(base_price),
        sizes=tuple(
            CatalogSize(id=f"{item_id}-{i}", name=size_name, price=Decimal(price))
            for i, (size_name, price) in enumerate(sizes)
        ),
        subcategory=subcategory,
    )


def make_customization(item: CatalogItem, size_name: str, **extra) -> PizzaCustomization:
    size = next(s for s in item.sizes if s.name == size_name)
    return PizzaCustomization(size=size, original_item_id=item.id, **extra)


class RecordingCart:
    """Cart port that records every append."""

    def __init__(self):
        self.entries = []

    def append_to_cart(self, entry):
        self.entries.append(entry)


class FailingCart:
    """Cart port whose append always fails."""

    def append_to_cart(self, entry):
        raise RuntimeError("cart unavailable")


# =============================================================================
# Catalog Fixtures
# =============================================================================

@pytest.fixture
def catalog_items():
    return [
        make_item("p-marg", "Margherita", "pizza", "12.99",
                  sizes=[("Medium", "12.99"), ('Large 14"', "15.99")], subcategory="Vegetarian"),
        make_item("p-paneer", "Paneer Tikka", "pizza", "14.99",
                  sizes=[("Large", "17.99")], subcategory="Paneer"),
        make_item("p-supreme", "Chicken Supreme", "pizza", "15.99",
                  sizes=[("Large", "18.99"), ("Extra Large", "21.99")], subcategory="Chicken"),
        make_item("p-kids", "Kids Cheese", "pizza", "8.99",
                  sizes=[("Small", "8.99")], subcategory="Vegetarian"),
        make_item("w-classic", "Classic Chicken Wings", "chicken_wings", "13.99",
                  sizes=[("12 Pieces", "13.99")]),
        make_item("w-hot", "Hot Wings", "chicken_wings", "13.99",
                  sizes=[("12 Pieces", "13.99")]),
        make_item("w-bites", "Boneless Bites", "chicken_wings", "9.99"),
        make_item("d-coke", "Coke", "drinks", "1.99",
                  sizes=[("Can", "1.99"), ("2 Litre", "4.99")]),
        make_item("d-sprite", "Sprite", "drinks", "1.99",
                  sizes=[("355ml Can", "1.99"), ("2L", "4.79")]),
        make_item("d-water", "Water", "drinks", "1.49",
                  sizes=[("500ml Bottle", "1.49")]),
        make_item("s-garlic", "Garlic Dip", "dipping_sauce", "0.99"),
        make_item("s-ranch", "Ranch", "dipping_sauce", "1.29"),
    ]


@pytest.fixture
def items_by_id(catalog_items):
    return {item.id: item for item in catalog_items}


@pytest.fixture
def pizza_pop_template():
    """Large pizza plus a chargeable 2 Litre drink and an optional sauce."""
    return ComboTemplate(
        id="pizza-pop",
        name="Pizza & Pop",
        base_price=Decimal("24.99"),
        steps=[
            ComboStepSpec(id="st-pizza", item_type="pizza", size_restriction="Large", sort_order=0),
            ComboStepSpec(id="st-drink", item_type="drinks", size_restriction="2 Litre",
                          is_chargeable=True, sort_order=1),
            ComboStepSpec(id="st-sauce", item_type="dipping_sauce", is_required=False, sort_order=2),
        ],
    )


@pytest.fixture
def wings_template():
    """24 wing pieces (two units) and an optional chargeable sauce."""
    return ComboTemplate(
        id="wings-night",
        name="Wings Night",
        base_price=Decimal("29.99"),
        steps=[
            ComboStepSpec(id="st-wings", item_type="wings", size_restriction="24 Pieces", sort_order=0),
            ComboStepSpec(id="st-dip", item_type="dipping_sauce", is_required=False,
                          is_chargeable=True, sort_order=1),
        ],
    )


@pytest.fixture
def party_template():
    """Two large pizzas, then a 2 Litre drink."""
    return ComboTemplate(
        id="party",
        name="Party Pack",
        base_price=Decimal("39.99"),
        steps=[
            ComboStepSpec(id="st-pizzas", item_type="pizza", quantity=2,
                          size_restriction="Large", sort_order=0),
            ComboStepSpec(id="st-pop", item_type="drinks", size_restriction="2 Litre", sort_order=1),
        ],
    )


@pytest.fixture
def memory_catalog(catalog_items, pizza_pop_template, wings_template, party_template):
    return InMemoryCatalog(
        templates=[pizza_pop_template, wings_template, party_template],
        items=catalog_items,
    )


@pytest.fixture
def cart():
    return RecordingCart()


# =============================================================================
# HTTP Fixtures
# =============================================================================

def _seed_catalog(session):
    session.add(Combo(
        id="pizza-pop",
        name="Pizza & Pop",
        description="A large pizza with a 2 litre drink",
        price=Decimal("24.99"),
        sort_order=0,
        items=[
            ComboItem(id="st-pizza", item_type="pizza", size_restriction="Large", sort_order=0),
            ComboItem(id="st-drink", item_type="drinks", size_restriction="2 Litre",
                      is_chargeable=True, sort_order=1),
            ComboItem(id="st-sauce", item_type="dipping_sauce", is_required=False, sort_order=2),
        ],
    ))
    session.add(Combo(
        id="wings-night",
        name="Wings Night",
        price=Decimal("29.99"),
        sort_order=1,
        items=[
            ComboItem(id="st-wings", item_type="wings", size_restriction="24 Pieces", sort_order=0),
        ],
    ))
    session.add(Combo(
        id="friday-wings",
        name="Friday Wings",
        price=Decimal("19.99"),
        sort_order=2,
        schedule_type="days_of_week",
        schedule_days=[5],  # Friday
        items=[
            ComboItem(id="st-friday-wings", item_type="wings", size_restriction="12 Pieces", sort_order=0),
        ],
    ))
    session.add(Combo(
        id="retired",
        name="Retired Deal",
        price=Decimal("9.99"),
        is_active=False,
        items=[ComboItem(id="st-retired", item_type="drinks", sort_order=0)],
    ))

    session.add(MenuItem(
        id="p-marg", name="Margherita", category="pizza", subcategory="Vegetarian",
        base_price=Decimal("12.99"), sort_order=0,
        sizes=[
            MenuItemSize(id="p-marg-m", name="Medium", price=Decimal("12.99"), sort_order=0),
            MenuItemSize(id="p-marg-l", name="Large", price=Decimal("15.99"), sort_order=1),
        ],
    ))
    session.add(MenuItem(
        id="p-supreme", name="Chicken Supreme", category="pizza", subcategory="Chicken",
        base_price=Decimal("15.99"), sort_order=1,
        sizes=[MenuItemSize(id="p-supreme-l", name="Large", price=Decimal("18.99"))],
    ))
    session.add(MenuItem(
        id="w-classic", name="Classic Chicken Wings", category="chicken_wings",
        base_price=Decimal("13.99"),
        sizes=[MenuItemSize(id="w-classic-12", name="12 Pieces", price=Decimal("13.99"))],
    ))
    session.add(MenuItem(
        id="d-coke", name="Coke", category="drinks", base_price=Decimal("1.99"),
        sizes=[
            MenuItemSize(id="d-coke-can", name="Can", price=Decimal("1.99"), sort_order=0),
            MenuItemSize(id="d-coke-2l", name="2 Litre", price=Decimal("4.99"), sort_order=1),
        ],
    ))
    session.add(MenuItem(
        id="d-old", name="Discontinued Cola", category="drinks", base_price=Decimal("1.00"),
        is_available=False,
        sizes=[MenuItemSize(id="d-old-2l", name="2 Litre", price=Decimal("3.00"))],
    ))
    session.add(MenuItem(
        id="s-garlic", name="Garlic Dip", category="dipping_sauce", base_price=Decimal("0.99"),
    ))


@pytest.fixture
def db_session_factory():
    """In-memory SQLite database seeded with a small catalog.

    Uses StaticPool so all connections share the same in-memory database.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    _seed_catalog(session)
    session.commit()
    session.close()

    yield TestingSessionLocal
    engine.dispose()


@pytest.fixture
def client(db_session_factory, monkeypatch):
    """Shared FastAPI TestClient over the seeded in-memory database.

    Sets up test staff credentials for the POS endpoints.
    """
    monkeypatch.setattr(config_mod, "STAFF_USERNAME", TEST_STAFF_USERNAME)
    monkeypatch.setattr(config_mod, "STAFF_PASSWORD", TEST_STAFF_PASSWORD)
    monkeypatch.setattr(db, "SessionLocal", db_session_factory)

    app = create_app()

    def override_get_db():
        db_sess = db_session_factory()
        try:
            yield db_sess
        finally:
            db_sess.close()

    app.dependency_overrides[db.get_db] = override_get_db

    clear_sessions()
    clear_carts()

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    clear_sessions()
    clear_carts()


@pytest.fixture
def staff_auth():
    """Returns HTTP Basic Auth tuple for POS endpoints."""
    return (TEST_STAFF_USERNAME, TEST_STAFF_PASSWORD)
