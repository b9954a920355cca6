"""
Routes Package for Combo Builder
================================

Each module defines FastAPI APIRouters for one area:

- combos.py: Storefront combo list and wizard sessions (public)
- pos_combos.py: The same wizard for staff under /pos (HTTP Basic auth)
- carts.py: Read back the carts finished combos were added to

Error Handling:
---------------
Routes raise HTTPException for:
- 401: Unauthorized (invalid staff credentials)
- 404: Not found (unknown combo, session or cart)
- 503: Service unavailable (staff password not configured)
Request body validation errors answer 422.
"""

from .combos import combos_router, combo_sessions_router
from .pos_combos import pos_combos_router, pos_combo_sessions_router
from .carts import carts_router

__all__ = [
    "combos_router",
    "combo_sessions_router",
    "pos_combos_router",
    "pos_combo_sessions_router",
    "carts_router",
]
