from typing import List, Optional
from datetime import date, datetime
from pydantic import BaseModel, model_validator
from models.recap import RecapStatus
from services.recap import RecapPeriod
from schemas.order_management import OrderResponse


class RecapCreate(BaseModel):
    period: RecapPeriod
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @model_validator(mode='after')
    def validate_custom_range(self):
        if self.period == RecapPeriod.CUSTOM:
            if self.start_date is None or self.end_date is None:
                raise ValueError("start_date and end_date are required for a custom period")
            if self.start_date > self.end_date:
                raise ValueError("start_date must not be after end_date")
        return self


class RecapReject(BaseModel):
    reason: Optional[str] = None


class RecapResponse(BaseModel):
    id: int
    period_start: date
    period_end: date
    total_revenue: int
    total_orders: int
    status: RecapStatus
    notes: str
    rejection_reason: Optional[str] = None
    created_at: datetime
    created_by: Optional[int] = None
    created_by_email: Optional[str] = None
    approved_by: Optional[int] = None

    class Config:
        from_attributes = True


class RecapDetailResponse(BaseModel):
    recap: RecapResponse
    orders: List[OrderResponse]
    live_revenue: int
    live_orders: int
