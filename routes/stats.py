from datetime import datetime
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging

from utils.database import get_db
from utils.http_errors import to_http_exception
from utils.timeutils import get_now
from models.user import AdminUser
from schemas.stats import DashboardStatsResponse
from services.errors import DomainError
from services.orders import list_orders
from services.stats import compute_dashboard_stats, revenue_series
from utils.auth import get_current_admin

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/stats", tags=["stats"])


@router.get("/dashboard", response_model=DashboardStatsResponse)
async def dashboard_stats(
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    current_user: AdminUser = Depends(get_current_admin)
):
    try:
        orders = list_orders(db)
    except DomainError as e:
        raise to_http_exception(e)

    stats = compute_dashboard_stats(orders, now)
    logger.debug(f"Dashboard stats over {len(orders)} orders for user {current_user.id}")
    return {**stats.to_dict(), "revenue_series": revenue_series(orders, now)}
