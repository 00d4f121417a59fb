from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session
import logging

from utils.database import get_db
from utils.http_errors import to_http_exception
from utils.repository import Repository
from models.menu_management import MenuItem
from models.order_management import OrderType
from schemas.cart import CartItemAdd, CartQuantityUpdate, CartResponse
from schemas.menu_management import MenuItemResponse
from schemas.order_management import CheckoutRequest, CheckoutResponse, OrderResponse
from services.cart import Cart, CartStore, resolve_spicy_level
from services.errors import DomainError
from services.orders import submit_order
from routes.notifications import notify_order_event

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/carts", tags=["carts"])

CONFIRMATION_TIMEOUT_SECONDS = 3


def get_cart_store(request: Request) -> CartStore:
    return request.app.state.cart_store


def get_cart(cart_id: str, store: CartStore = Depends(get_cart_store)) -> Cart:
    try:
        return store.get(cart_id)
    except DomainError as e:
        raise to_http_exception(e)


def cart_response(cart: Cart) -> dict:
    return {
        "id": cart.id,
        "items": [
            {
                "menu_item": line.menu_item,
                "quantity": line.quantity,
                "spicy_level": line.spicy_level,
                "subtotal": line.subtotal,
            }
            for line in cart.items
        ],
        "total_price": cart.get_total_price(),
        "total_items": cart.get_total_items(),
    }


@router.post("", response_model=CartResponse, status_code=status.HTTP_201_CREATED)
async def create_cart(store: CartStore = Depends(get_cart_store)):
    return cart_response(store.create())


@router.get("/{cart_id}", response_model=CartResponse)
async def read_cart(cart: Cart = Depends(get_cart)):
    return cart_response(cart)


@router.post("/{cart_id}/items", response_model=CartResponse)
async def add_to_cart(item: CartItemAdd, cart: Cart = Depends(get_cart), db: Session = Depends(get_db)):
    try:
        menu_item = Repository(db, MenuItem).get(item.menu_item_id)
    except DomainError as e:
        raise to_http_exception(e, "Terjadi kesalahan saat menambahkan item")
    if not menu_item or not menu_item.is_available:
        logger.warning(f"Cart {cart.id}: menu item {item.menu_item_id} not found or unavailable")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Menu item not found or unavailable")

    # The cart keeps its own copy, so later catalog edits do not reprice it
    snapshot = MenuItemResponse.model_validate(menu_item)
    line = cart.add_to_cart(snapshot, resolve_spicy_level(snapshot, item.spicy_level))
    logger.debug(f"Cart {cart.id}: {snapshot.name} (spicy {line.spicy_level}) x{line.quantity}")
    return cart_response(cart)


@router.put("/{cart_id}/items/{menu_item_id}", response_model=CartResponse)
async def update_cart_quantity(menu_item_id: int, update: CartQuantityUpdate, cart: Cart = Depends(get_cart)):
    cart.update_quantity(menu_item_id, update.quantity)
    return cart_response(cart)


@router.delete("/{cart_id}/items/{menu_item_id}", response_model=CartResponse)
async def remove_from_cart(menu_item_id: int, cart: Cart = Depends(get_cart)):
    cart.remove_from_cart(menu_item_id)
    return cart_response(cart)


@router.delete("/{cart_id}", response_model=CartResponse)
async def clear_cart(cart: Cart = Depends(get_cart)):
    cart.clear_cart()
    return cart_response(cart)


@router.post("/{cart_id}/checkout", response_model=CheckoutResponse, status_code=status.HTTP_201_CREATED)
async def checkout(
    details: CheckoutRequest,
    cart: Cart = Depends(get_cart),
    store: CartStore = Depends(get_cart_store),
    db: Session = Depends(get_db)
):
    try:
        order = submit_order(
            db,
            cart,
            customer_name=details.customer_name,
            customer_phone=details.customer_phone,
            order_type=OrderType.ONLINE,
            notes=details.notes,
            payment_method=details.payment_method,
        )
    except DomainError as e:
        logger.warning(f"Checkout of cart {cart.id} failed: {e.message}")
        raise to_http_exception(e, "Terjadi kesalahan saat membuat pesanan. Silakan coba lagi.")

    store.discard(cart.id)
    await notify_order_event("order_created", order.id, order.status.value)
    return {
        "order": OrderResponse.model_validate(order),
        "message": f"Terima kasih {order.customer_name}! Pesanan Anda sedang diproses.",
        "confirmation_timeout_seconds": CONFIRMATION_TIMEOUT_SECONDS,
    }
