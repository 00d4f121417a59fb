import logging
import threading
import time
from dataclasses import dataclass
from typing import Dict, List, Optional
from uuid import uuid4

from services.errors import NotFoundError

logger = logging.getLogger(__name__)

MAIN_CATEGORY = "main"


@dataclass
class CartItem:
    """One cart line. Lines are keyed by (menu item id, spicy level)."""
    menu_item: object
    quantity: int
    spicy_level: int

    @property
    def key(self):
        return (self.menu_item.id, self.spicy_level)

    @property
    def subtotal(self) -> int:
        return self.menu_item.price * self.quantity


def resolve_spicy_level(menu_item, requested: Optional[int]) -> int:
    """Only main dishes carry a spicy level; everything else is level 0."""
    category = getattr(menu_item.category, "value", menu_item.category)
    if category != MAIN_CATEGORY:
        return 0
    if requested is None:
        return menu_item.spicy_level
    return requested


class Cart:
    """
    In-memory shopping cart.

    ``menu_item`` is whatever snapshot the caller added: prices are read from
    it, never re-read from the catalog, so a cart keeps the prices it was
    filled with.
    """

    def __init__(self, cart_id: Optional[str] = None):
        self.id = cart_id or uuid4().hex
        self.items: List[CartItem] = []

    def _find(self, menu_item_id, spicy_level) -> Optional[CartItem]:
        for line in self.items:
            if line.key == (menu_item_id, spicy_level):
                return line
        return None

    def add_to_cart(self, menu_item, spicy_level: int) -> CartItem:
        return self.add_line(menu_item, 1, spicy_level)

    def add_line(self, menu_item, quantity: int, spicy_level: int) -> CartItem:
        line = self._find(menu_item.id, spicy_level)
        if line:
            line.quantity += quantity
        else:
            line = CartItem(menu_item=menu_item, quantity=quantity, spicy_level=spicy_level)
            self.items.append(line)
        return line

    def remove_from_cart(self, menu_item_id) -> None:
        # Drops every spicy-level variant of the item
        self.items = [line for line in self.items if line.menu_item.id != menu_item_id]

    def update_quantity(self, menu_item_id, quantity: int) -> None:
        if quantity <= 0:
            self.remove_from_cart(menu_item_id)
            return
        for line in self.items:
            if line.menu_item.id == menu_item_id:
                line.quantity = quantity

    def clear_cart(self) -> None:
        self.items = []

    def get_total_price(self) -> int:
        return sum(line.menu_item.price * line.quantity for line in self.items)

    def get_total_items(self) -> int:
        return sum(line.quantity for line in self.items)

    def is_empty(self) -> bool:
        return not self.items


class CartStore:
    """
    Carts of the customers currently browsing, keyed by cart id.

    A cart is dropped once checked out, or after ``idle_seconds`` without
    being read. Idle carts are swept whenever a new cart is created.
    """

    def __init__(self, idle_seconds: float = 2 * 60 * 60, clock=time.monotonic):
        self._carts: Dict[str, Cart] = {}
        self._touched: Dict[str, float] = {}
        self._lock = threading.Lock()
        self.idle_seconds = idle_seconds
        self.clock = clock

    def _sweep(self, now: float) -> None:
        expired = [cart_id for cart_id, touched in self._touched.items() if now - touched > self.idle_seconds]
        for cart_id in expired:
            self._carts.pop(cart_id, None)
            self._touched.pop(cart_id, None)
        if expired:
            logger.debug(f"Dropped {len(expired)} idle carts")

    def create(self) -> Cart:
        cart = Cart()
        with self._lock:
            now = self.clock()
            self._sweep(now)
            self._carts[cart.id] = cart
            self._touched[cart.id] = now
        logger.debug(f"Cart {cart.id} created")
        return cart

    def get(self, cart_id: str) -> Cart:
        with self._lock:
            now = self.clock()
            cart = self._carts.get(cart_id)
            if cart is None or now - self._touched[cart_id] > self.idle_seconds:
                cart = None
            else:
                self._touched[cart_id] = now
        if cart is None:
            raise NotFoundError(f"Cart {cart_id} not found")
        return cart

    def discard(self, cart_id: str) -> None:
        with self._lock:
            self._carts.pop(cart_id, None)
            self._touched.pop(cart_id, None)

    def __len__(self):
        return len(self._carts)
