from typing import List
from datetime import date
from pydantic import BaseModel


class RevenuePoint(BaseModel):
    date: date
    total: int


class DashboardStatsResponse(BaseModel):
    total_revenue: int
    today_revenue: int
    weekly_revenue: int
    monthly_revenue: int
    today_orders: int
    weekly_orders: int
    monthly_orders: int
    pending_orders: int
    completed_orders: int
    avg_order_value: float
    revenue_series: List[RevenuePoint]
