"""
In-memory cart used by the combo builder host.

InMemoryCart implements the cart mutation port: each finished combo becomes
one CartLine priced at the combo's final price. The cart registry keys carts by
the client-supplied cart_id so storefront and POS sessions can share a cart.
"""

import logging
import threading
from decimal import Decimal
from typing import Dict, List, Optional

from ..money import sum_money
from ..schemas.combos import CartLine, CartOut, CompositeCartEntry


logger = logging.getLogger(__name__)


class InMemoryCart:
    """A cart that keeps its lines in memory."""

    def __init__(self, cart_id: str = "default"):
        self.cart_id = cart_id
        self._lines: List[CartLine] = []
        self._lock = threading.Lock()

    def append_to_cart(self, entry: CompositeCartEntry) -> CartLine:
        """Append one finished combo as a cart line."""
        line = CartLine(
            name=entry.combo_name,
            description=", ".join(s.item_name for s in entry.selections),
            price=entry.final_price,
            combo=entry,
        )
        with self._lock:
            self._lines.append(line)
        logger.info(
            "Cart %s: added %s at %s",
            self.cart_id, entry.combo_name, entry.final_price,
        )
        return line

    @property
    def lines(self) -> List[CartLine]:
        with self._lock:
            return list(self._lines)

    @property
    def subtotal(self) -> Decimal:
        return sum_money(line.price * line.quantity for line in self.lines)

    def to_out(self) -> CartOut:
        return CartOut(cart_id=self.cart_id, lines=self.lines, subtotal=self.subtotal)


# =============================================================================
# Cart Registry
# =============================================================================

CARTS: Dict[str, InMemoryCart] = {}
_carts_lock = threading.Lock()


def get_or_create_cart(cart_id: str) -> InMemoryCart:
    with _carts_lock:
        cart = CARTS.get(cart_id)
        if cart is None:
            cart = InMemoryCart(cart_id)
            CARTS[cart_id] = cart
        return cart


def get_cart(cart_id: str) -> Optional[InMemoryCart]:
    with _carts_lock:
        return CARTS.get(cart_id)


def clear_carts() -> int:
    """Drop every cart. Returns how many there were."""
    with _carts_lock:
        count = len(CARTS)
        CARTS.clear()
        return count
