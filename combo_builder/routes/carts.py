"""
Cart Routes
===========

- GET /carts/{cart_id}: Lines appended by finished combo wizards
"""

import logging

from fastapi import APIRouter, HTTPException

from ..schemas.combos import CartOut
from ..services.cart import get_cart


logger = logging.getLogger(__name__)

carts_router = APIRouter(prefix="/carts", tags=["Carts"])


@carts_router.get("/{cart_id}", response_model=CartOut)
def read_cart(cart_id: str) -> CartOut:
    cart = get_cart(cart_id)
    if cart is None:
        raise HTTPException(status_code=404, detail="Cart not found")
    return cart.to_out()
