"""
Configuration Module for Combo Builder
======================================

This module centralizes all configuration settings, environment variables, and
constants used throughout the combo builder. Values are read once at import
time and exposed as typed module-level constants.

Configuration Categories:
-------------------------
- **Combo Rules**: The number of wing pieces sold per catalog wings item, the
  fixed wing flavor list offered by the flavor picker, and the pizza
  sub-category filters shown on pizza steps.

- **Size Normalization**: The alias table used to match a step's size
  restriction against catalog size names (see combo/size_matching.py).

- **Database**: Connection URL for the catalog database read by SqlCatalog.

- **Wizard Sessions**: TTL and capacity for the in-memory registry of live
  wizard sessions kept by the HTTP host.

- **Staff Authentication**: HTTP Basic credentials for the POS routes.

- **CORS Settings**: Allowed origins for the storefront and POS frontends.

Environment Variables:
----------------------
- WINGS_PIECES_PER_UNIT: Pieces per catalog wings item (default: 12)
- WING_FLAVORS: Comma-separated flavor list (default: "Hot,Honey Garlic,BBQ,Salt & Pepper,Plain")
- PIZZA_SUBCATEGORIES: Comma-separated pizza filters (default: "Vegetarian,Paneer,Chicken,Meat Pizza,Hawaiian")
- DATABASE_URL: SQLAlchemy URL (default: "sqlite:///./combo_builder.db")
- COMBO_SESSION_TTL_SECONDS: Idle wizard session lifetime (default: 1800)
- COMBO_SESSION_MAX: Max live wizard sessions (default: 500)
- STAFF_USERNAME: POS username (default: "staff")
- STAFF_PASSWORD: POS password (required for POS access)
- CORS_ORIGINS: Comma-separated allowed origins (default: "*")
- LOG_LEVEL: Read by logging_config.setup_logging (default: "INFO")

Usage:
------
    from combo_builder.config import WINGS_PIECES_PER_UNIT, WING_FLAVORS
"""

import os
from typing import Dict, List


def _split_list(raw: str) -> List[str]:
    """Parse a comma-separated environment value, dropping empty entries."""
    return [part.strip() for part in raw.split(",") if part.strip()]


# =============================================================================
# Combo Rules
# =============================================================================
# A wings step restricted to "N Pieces" counts pieces, not catalog items.
# Each catalog wings item is sold in units of this many pieces, so a
# "24 Pieces" step needs two selections. Templates may override this.

WINGS_PIECES_PER_UNIT: int = int(os.getenv("WINGS_PIECES_PER_UNIT", "12"))

# Fixed list offered by the flavor picker for wings selections
WING_FLAVORS: List[str] = _split_list(
    os.getenv("WING_FLAVORS", "Hot,Honey Garlic,BBQ,Salt & Pepper,Plain")
)

# Sub-category filters shown on pizza steps
PIZZA_SUBCATEGORIES: List[str] = _split_list(
    os.getenv("PIZZA_SUBCATEGORIES", "Vegetarian,Paneer,Chicken,Meat Pizza,Hawaiian")
)


# =============================================================================
# Size Normalization
# =============================================================================
# Maps normalized size text to a canonical size key. Restrictions and catalog
# size names that normalize to the same key match each other. Text that is not
# in the table falls back to its leading token.

SIZE_ALIASES: Dict[str, str] = {
    # Pizza sizes
    "small": "small",
    "small 10": "small",
    "medium": "medium",
    "medium 12": "medium",
    "large": "large",
    "large 14": "large",
    "extra large": "xl",
    "extra-large": "xl",
    "x-large": "xl",
    "x large": "xl",
    "xl": "xl",
    "xl 16": "xl",
    # Drink sizes
    "2 litre": "2l",
    "2 liter": "2l",
    "2-litre": "2l",
    "2-liter": "2l",
    "2l": "2l",
    "2 l": "2l",
    "can": "can",
    "355ml can": "can",
    "355 ml can": "can",
    "500ml": "500ml",
    "500 ml": "500ml",
    "500ml bottle": "500ml",
    "bottle": "500ml",
}


# =============================================================================
# Database Configuration
# =============================================================================

DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./combo_builder.db")


# =============================================================================
# Wizard Session Configuration
# =============================================================================
# Live wizard sessions are kept in memory only. A session that has not been
# touched within the TTL is dropped; at capacity the oldest are evicted.

COMBO_SESSION_TTL_SECONDS: int = int(os.getenv("COMBO_SESSION_TTL_SECONDS", "1800"))
COMBO_SESSION_MAX: int = int(os.getenv("COMBO_SESSION_MAX", "500"))


# =============================================================================
# Staff Authentication Configuration
# =============================================================================
# Credentials for HTTP Basic Auth on POS endpoints.
# STAFF_PASSWORD must be set for POS access to work.

STAFF_USERNAME: str = os.getenv("STAFF_USERNAME", "staff")
STAFF_PASSWORD: str = os.getenv("STAFF_PASSWORD", "")


# =============================================================================
# CORS Configuration
# =============================================================================

_cors_origins_env = os.getenv("CORS_ORIGINS", "")
CORS_ORIGINS: List[str] = _split_list(_cors_origins_env) or ["*"]
