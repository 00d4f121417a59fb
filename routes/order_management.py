from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
import logging
from typing import List, Optional

from utils.database import get_db
from utils.http_errors import to_http_exception
from utils.repository import Repository
from models.order_management import Order, OrderStatus, OrderType
from models.user import AdminUser
from schemas.order_management import OfflineOrderCreate, OrderResponse, OrderStatusUpdate
from services.errors import DomainError
from services import orders as order_service
from utils.auth import get_current_admin
from routes.notifications import notify_order_event

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/orders", tags=["orders"])


@router.get("", response_model=List[OrderResponse])
async def list_orders(
    status_filter: Optional[OrderStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    current_user: AdminUser = Depends(get_current_admin)
):
    try:
        return order_service.list_orders(db, status_filter)
    except DomainError as e:
        raise to_http_exception(e)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: int, db: Session = Depends(get_db), current_user: AdminUser = Depends(get_current_admin)):
    try:
        return Repository(db, Order).get_or_404(order_id)
    except DomainError as e:
        raise to_http_exception(e)


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_offline_order(
    order: OfflineOrderCreate,
    db: Session = Depends(get_db),
    current_user: AdminUser = Depends(get_current_admin)
):
    logger.debug(f"Parsed OfflineOrderCreate: {order.model_dump()}")
    try:
        cart = order_service.build_offline_cart(db, order.items)
        db_order = order_service.submit_order(
            db,
            cart,
            customer_name=order.customer_name,
            customer_phone=order.customer_phone,
            order_type=OrderType.OFFLINE,
            notes=order.notes,
            payment_method=order.payment_method,
            created_by=current_user.id,
        )
    except DomainError as e:
        logger.warning(f"Offline order by user {current_user.id} rejected: {e.message}")
        raise to_http_exception(e, "Terjadi kesalahan saat menambahkan pesanan")

    await notify_order_event("order_created", db_order.id, db_order.status.value)
    logger.info(f"Offline order {db_order.id} entered by user {current_user.id}")
    return db_order


@router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: int,
    status_update: OrderStatusUpdate,
    db: Session = Depends(get_db),
    current_user: AdminUser = Depends(get_current_admin)
):
    try:
        order = order_service.update_order_status(db, order_id, status_update.status)
    except DomainError as e:
        db.rollback()
        logger.warning(f"Status update of order {order_id} by user {current_user.id} failed: {e.message}")
        raise to_http_exception(e, "Terjadi kesalahan saat mengupdate status")

    await notify_order_event("order_status_updated", order.id, order.status.value)
    return order


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_order(order_id: int, db: Session = Depends(get_db), current_user: AdminUser = Depends(get_current_admin)):
    try:
        order_service.delete_order(db, order_id)
    except DomainError as e:
        db.rollback()
        raise to_http_exception(e, "Terjadi kesalahan saat menghapus pesanan")

    await notify_order_event("order_deleted", order_id)
