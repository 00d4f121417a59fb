from dataclasses import dataclass, asdict
from datetime import datetime, timedelta
from typing import Iterable, List

from models.order_management import OrderStatus
from utils.timeutils import start_of_month, days_ago


@dataclass
class DashboardStats:
    total_revenue: int = 0
    today_revenue: int = 0
    weekly_revenue: int = 0
    monthly_revenue: int = 0
    today_orders: int = 0
    weekly_orders: int = 0
    monthly_orders: int = 0
    pending_orders: int = 0
    completed_orders: int = 0
    avg_order_value: float = 0

    def to_dict(self) -> dict:
        return asdict(self)


def _revenue(orders) -> int:
    return sum(order.total_amount for order in orders)


def compute_dashboard_stats(orders: Iterable, now: datetime) -> DashboardStats:
    """
    Dashboard figures over the given orders.

    Revenue counts completed orders only; order counts include every status.
    "today" is the calendar day of ``now``, "week" the last 7x24 hours and
    "month" the calendar month to date.
    """
    orders = list(orders)
    week_ago = days_ago(now, 7)
    month_start = start_of_month(now)

    def is_today(order):
        return order.created_at.date() == now.date()

    def in_week(order):
        return order.created_at >= week_ago

    def in_month(order):
        return order.created_at >= month_start

    completed = [o for o in orders if o.status == OrderStatus.COMPLETED]
    total_revenue = _revenue(completed)

    return DashboardStats(
        total_revenue=total_revenue,
        today_revenue=_revenue(o for o in completed if is_today(o)),
        weekly_revenue=_revenue(o for o in completed if in_week(o)),
        monthly_revenue=_revenue(o for o in completed if in_month(o)),
        today_orders=sum(1 for o in orders if is_today(o)),
        weekly_orders=sum(1 for o in orders if in_week(o)),
        monthly_orders=sum(1 for o in orders if in_month(o)),
        pending_orders=sum(1 for o in orders if o.status == OrderStatus.PENDING),
        completed_orders=len(completed),
        avg_order_value=total_revenue / len(completed) if completed else 0,
    )


def revenue_series(orders: Iterable, now: datetime, days: int = 7) -> List[dict]:
    """Daily revenue of non-cancelled orders, oldest day first, zero-filled."""
    totals = {(now - timedelta(days=offset)).date(): 0 for offset in range(days - 1, -1, -1)}
    for order in orders:
        if order.status == OrderStatus.CANCELLED:
            continue
        day = order.created_at.date()
        if day in totals:
            totals[day] += order.total_amount
    return [{"date": day, "total": total} for day, total in totals.items()]
