"""
POS Combo Wizard Routes
=======================

The staff point-of-sale mirror of the storefront combo wizard. Every endpoint
under /pos requires HTTP Basic staff credentials (see auth.py).

Endpoints:
----------
- GET /pos/combos
- POST /pos/combos/{combo_id}/sessions
- GET, DELETE /pos/combo-sessions/{sid}
- POST /pos/combo-sessions/{sid}/select | remove | next | skip | back | jump |
  subcategory | pizza | flavor | subflow/cancel | finish

Sessions opened here render with PosComboAdapter wording and cannot be driven
through the storefront endpoints (and vice versa).
"""

from fastapi import APIRouter, Depends

from ..adapters import PosComboAdapter
from ..auth import verify_staff_credentials
from .combos import add_wizard_routes


_staff = [Depends(verify_staff_credentials)]

pos_combos_router = APIRouter(prefix="/pos/combos", tags=["POS Combos"], dependencies=_staff)
pos_combo_sessions_router = APIRouter(
    prefix="/pos/combo-sessions", tags=["POS Combo Sessions"], dependencies=_staff,
)

add_wizard_routes(pos_combos_router, pos_combo_sessions_router, PosComboAdapter)
