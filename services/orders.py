import logging
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from models.menu_management import MenuItem
from models.order_management import Order, OrderItem, OrderStatus, OrderType, PaymentMethod
from services.cart import Cart, resolve_spicy_level
from services.errors import InvalidTransitionError, PersistenceError, ValidationError
from utils.repository import Repository

logger = logging.getLogger(__name__)

# Staff may move an order between any two statuses, including reopening a
# completed one. The table is the single place to tighten that.
ORDER_STATUS_TRANSITIONS = {
    current: {status for status in OrderStatus}
    for current in OrderStatus
}

INITIAL_STATUS = {
    OrderType.ONLINE: OrderStatus.PENDING,
    # Entered at the counter once the customer has been served
    OrderType.OFFLINE: OrderStatus.COMPLETED,
}


def validate_order_status_transition(current: OrderStatus, new: OrderStatus) -> None:
    if new not in ORDER_STATUS_TRANSITIONS[OrderStatus(current)]:
        raise InvalidTransitionError(f"Invalid status transition from {current.value} to {new.value}")


def submit_order(
    db: Session,
    cart: Cart,
    customer_name: str,
    customer_phone: str,
    order_type: OrderType,
    notes: Optional[str] = None,
    payment_method: Optional[PaymentMethod] = None,
    created_by: Optional[int] = None,
    clear_cart: bool = True,
) -> Order:
    """
    Persist the cart as an order with one line per cart line.

    The total and the line prices come from the prices held by the cart, not
    from the live catalog. Header and lines are written in one transaction;
    on any failure nothing is kept and the cart is left as it was. The cart is
    emptied only after the commit succeeds.
    """
    if cart.is_empty():
        raise ValidationError("Tambahkan minimal 1 item")
    if not customer_name or not customer_name.strip():
        raise ValidationError("Nama pelanggan wajib diisi")
    if not customer_phone or not customer_phone.strip():
        raise ValidationError("Nomor telepon wajib diisi")

    orders = Repository(db, Order)
    order_items = Repository(db, OrderItem)
    total_amount = cart.get_total_price()

    try:
        db_order = orders.insert(Order(
            customer_name=customer_name.strip(),
            customer_phone=customer_phone.strip(),
            order_type=order_type,
            payment_method=payment_method,
            total_amount=total_amount,
            status=INITIAL_STATUS[order_type],
            notes=notes or None,
            created_by=created_by,
        ))

        order_items.insert_many([
            OrderItem(
                order_id=db_order.id,
                menu_item_id=line.menu_item.id,
                quantity=line.quantity,
                price=line.menu_item.price,
                spicy_level=line.spicy_level,
            )
            for line in cart.items
        ])
        orders.commit()
    except PersistenceError:
        orders.rollback()
        logger.error(f"Order submission for {customer_name} rolled back; cart {cart.id} kept")
        raise

    db.refresh(db_order)
    logger.info(
        f"Order {db_order.id} ({order_type.value}) created with {len(cart.items)} lines, total {total_amount}"
    )
    if clear_cart:
        cart.clear_cart()
    return db_order


def build_offline_cart(db: Session, items: Iterable) -> Cart:
    """Resolve staff-entered lines against the available catalog into a cart."""
    items = list(items)
    if not items:
        raise ValidationError("Tambahkan minimal 1 item")

    ids = {item.menu_item_id for item in items}
    catalog = {
        menu_item.id: menu_item
        for menu_item in Repository(db, MenuItem).list(
            filters=[MenuItem.id.in_(ids), MenuItem.is_available.is_(True)]
        )
    }

    cart = Cart()
    for item in items:
        menu_item = catalog.get(item.menu_item_id)
        if menu_item is None:
            raise ValidationError(f"Menu item {item.menu_item_id} not found or unavailable")
        spicy_level = resolve_spicy_level(menu_item, item.spicy_level)
        cart.add_line(menu_item, item.quantity, spicy_level)
    return cart


def list_orders(db: Session, status: Optional[OrderStatus] = None) -> List[Order]:
    filters = [Order.status == status] if status else []
    return Repository(db, Order).list(filters=filters, order_by=[Order.created_at.desc(), Order.id.desc()])


def update_order_status(db: Session, order_id: int, new_status: OrderStatus) -> Order:
    orders = Repository(db, Order)
    order = orders.get_or_404(order_id)
    validate_order_status_transition(order.status, new_status)
    previous = order.status
    orders.update(order_id, {"status": new_status})
    orders.commit()
    db.refresh(order)
    logger.info(f"Order {order_id} status {previous.value} -> {new_status.value}")
    return order


def delete_order(db: Session, order_id: int) -> None:
    orders = Repository(db, Order)
    orders.delete(order_id)
    orders.commit()
    logger.info(f"Order {order_id} deleted")
