"""
Combo Wizard Routes
===================

This module exposes the combo wizard over HTTP for the customer storefront.
The same endpoint set is mounted for staff under /pos (see pos_combos.py);
both are built by `add_wizard_routes()` and differ only in the adapter class
they open sessions with.

Endpoints:
----------
- GET /combos: Combos offered today (active and within schedule)
- POST /combos/{combo_id}/sessions: Open a wizard session
- GET /combo-sessions/{sid}: Current wizard view
- POST /combo-sessions/{sid}/select: Tap a candidate tile
- POST /combo-sessions/{sid}/remove: Remove a selection of the current step
- POST /combo-sessions/{sid}/next | skip | back | jump: Navigate steps
- POST /combo-sessions/{sid}/subcategory: Filter pizza candidates
- POST /combo-sessions/{sid}/pizza: Post the pizza customization result
- POST /combo-sessions/{sid}/flavor: Post the picked wing flavor
- POST /combo-sessions/{sid}/subflow/cancel: Abandon the open sub-flow
- POST /combo-sessions/{sid}/finish: Add the combo to the cart
- DELETE /combo-sessions/{sid}: Cancel the wizard

Responses:
----------
Every wizard action returns an ActionResult. A refused action (a full step,
an incomplete combo at finish, navigation while a sub-flow is open) is not
an HTTP error: it answers 200 with `accepted: false` and the unchanged view.
HTTP errors are reserved for unknown combos or sessions (404) and malformed
bodies (422). A combo that is inactive or not scheduled today cannot be
opened either (404), even by id.

Sub-flows:
----------
HTTP sessions run without delegates. Selecting a pizza or wings candidate
returns a view whose `pending_subflow` tells the client which dialog to show;
the client then posts /pizza, /flavor or /subflow/cancel.

Session Lifecycle:
------------------
Sessions are kept in the in-memory registry (services/session.py) and are
discarded as soon as they finish or are cancelled, so later requests for the
same id answer 404.
"""

import logging
import uuid
from datetime import date
from typing import List, Type

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError
from sqlalchemy.orm import Session

from ..adapters import ComboWizardAdapter, StorefrontComboAdapter
from ..combo.schedule import is_combo_offered
from ..combo.sequencer import SessionStatus, open_session
from ..db import get_db
from ..schemas.combos import ComboTemplate
from ..schemas.wizard import (
    ActionResult,
    ComboSummaryOut,
    FlavorRequest,
    JumpRequest,
    OpenSessionRequest,
    PizzaResultRequest,
    RemoveRequest,
    SelectRequest,
    SubcategoryRequest,
    WizardView,
)
from ..services.cart import get_or_create_cart
from ..services.catalog import SqlCatalog
from ..services.session import discard_session, get_session, register_session


logger = logging.getLogger(__name__)

# Router definitions
combos_router = APIRouter(prefix="/combos", tags=["Combos"])
combo_sessions_router = APIRouter(prefix="/combo-sessions", tags=["Combo Sessions"])


# =============================================================================
# Helper Functions
# =============================================================================

def template_to_summary(template: ComboTemplate) -> ComboSummaryOut:
    return ComboSummaryOut(
        id=template.id,
        name=template.name,
        description=template.description,
        base_price=template.base_price,
        image_url=template.image_url,
        step_count=len(template.steps),
    )


def _load_adapter(session_id: str, adapter_cls: Type[ComboWizardAdapter]) -> ComboWizardAdapter:
    """Fetch a live session opened on this surface, or 404."""
    adapter = get_session(session_id)
    if adapter is None or adapter.SURFACE != adapter_cls.SURFACE:
        raise HTTPException(status_code=404, detail="Combo session not found")
    return adapter


def _close_if_ended(session_id: str, adapter: ComboWizardAdapter) -> None:
    if adapter.sequencer.status in (SessionStatus.FINISHED, SessionStatus.CANCELLED):
        discard_session(session_id)


# =============================================================================
# Route Registration
# =============================================================================

def add_wizard_routes(
    catalog_router: APIRouter,
    sessions_router: APIRouter,
    adapter_cls: Type[ComboWizardAdapter],
) -> None:
    """
    Register the combo list and wizard session endpoints on two routers.

    Args:
        catalog_router: Router for the combo list and session opening.
        sessions_router: Router for actions on an open session.
        adapter_cls: Presentation adapter used for sessions opened here.
    """

    @catalog_router.get("", response_model=List[ComboSummaryOut])
    def list_combos(db: Session = Depends(get_db)) -> List[ComboSummaryOut]:
        """List combos offered today."""
        templates = SqlCatalog(db).list_active_templates(date.today())
        return [template_to_summary(t) for t in templates]

    @catalog_router.post("/{combo_id}/sessions", response_model=WizardView, status_code=201)
    def open_combo_session(
        combo_id: str,
        payload: OpenSessionRequest | None = None,
        db: Session = Depends(get_db),
    ) -> WizardView:
        """Open a wizard on the combo's first step."""
        catalog = SqlCatalog(db)
        try:
            sequencer = open_session(catalog, combo_id)
        except ValidationError as e:
            logger.error("Combo %s has invalid template data: %s", combo_id, e)
            raise HTTPException(status_code=404, detail="Combo not available")
        if sequencer is None:
            raise HTTPException(status_code=404, detail="Combo not found")
        if not is_combo_offered(sequencer.template):
            logger.info("Combo %s is inactive or not scheduled today", combo_id)
            raise HTTPException(status_code=404, detail="Combo not available")

        cart_id = (payload.cart_id if payload else None) or uuid.uuid4().hex
        adapter = adapter_cls(sequencer, get_or_create_cart(cart_id))
        register_session(adapter)
        return adapter.render()

    @sessions_router.get("/{session_id}", response_model=WizardView)
    def get_combo_session(session_id: str) -> WizardView:
        return _load_adapter(session_id, adapter_cls).render()

    @sessions_router.post("/{session_id}/select", response_model=ActionResult)
    def select_item(session_id: str, payload: SelectRequest) -> ActionResult:
        return _load_adapter(session_id, adapter_cls).select(payload.item_id)

    @sessions_router.post("/{session_id}/remove", response_model=ActionResult)
    def remove_selection(session_id: str, payload: RemoveRequest) -> ActionResult:
        return _load_adapter(session_id, adapter_cls).remove(payload.index)

    @sessions_router.post("/{session_id}/next", response_model=ActionResult)
    def next_step(session_id: str) -> ActionResult:
        return _load_adapter(session_id, adapter_cls).next()

    @sessions_router.post("/{session_id}/skip", response_model=ActionResult)
    def skip_step(session_id: str) -> ActionResult:
        return _load_adapter(session_id, adapter_cls).skip()

    @sessions_router.post("/{session_id}/back", response_model=ActionResult)
    def previous_step(session_id: str) -> ActionResult:
        return _load_adapter(session_id, adapter_cls).back()

    @sessions_router.post("/{session_id}/jump", response_model=ActionResult)
    def jump_to_step(session_id: str, payload: JumpRequest) -> ActionResult:
        return _load_adapter(session_id, adapter_cls).jump(payload.index)

    @sessions_router.post("/{session_id}/subcategory", response_model=ActionResult)
    def set_subcategory(session_id: str, payload: SubcategoryRequest) -> ActionResult:
        return _load_adapter(session_id, adapter_cls).set_subcategory(payload.subcategory)

    @sessions_router.post("/{session_id}/pizza", response_model=ActionResult)
    def complete_pizza(session_id: str, payload: PizzaResultRequest) -> ActionResult:
        adapter = _load_adapter(session_id, adapter_cls)
        return adapter.complete_pizza(payload.customization, payload.total_price)

    @sessions_router.post("/{session_id}/flavor", response_model=ActionResult)
    def pick_flavor(session_id: str, payload: FlavorRequest) -> ActionResult:
        return _load_adapter(session_id, adapter_cls).pick_flavor(payload.flavor)

    @sessions_router.post("/{session_id}/subflow/cancel", response_model=ActionResult)
    def cancel_subflow(session_id: str) -> ActionResult:
        return _load_adapter(session_id, adapter_cls).cancel_subflow()

    @sessions_router.post("/{session_id}/finish", response_model=ActionResult)
    def finish_combo(session_id: str) -> ActionResult:
        """Append the combo to the cart. Refused unless every required step is met."""
        adapter = _load_adapter(session_id, adapter_cls)
        result = adapter.finish()
        _close_if_ended(session_id, adapter)
        return result

    @sessions_router.delete("/{session_id}", response_model=ActionResult)
    def cancel_combo(session_id: str) -> ActionResult:
        """Close the wizard without touching the cart."""
        adapter = _load_adapter(session_id, adapter_cls)
        result = adapter.cancel()
        _close_if_ended(session_id, adapter)
        logger.info("Cancelled combo session %s", session_id)
        return result


add_wizard_routes(combos_router, combo_sessions_router, StorefrontComboAdapter)
