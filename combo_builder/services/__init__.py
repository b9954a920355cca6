"""
Services Package for Combo Builder
==================================

Host-side services around the combo configurator core:

- **catalog**: Catalog read port over the database (SqlCatalog) or memory
  (InMemoryCatalog)
- **cart**: In-memory carts that receive finished combos
- **session**: Registry of live wizard sessions with TTL and eviction

Usage:
------
    from combo_builder.services.catalog import SqlCatalog
    from combo_builder.services.cart import get_or_create_cart
    from combo_builder.services.session import register_session, get_session
"""
