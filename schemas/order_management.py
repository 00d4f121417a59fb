from typing import List, Optional
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from models.order_management import OrderType, OrderStatus, PaymentMethod


class OrderItemResponse(BaseModel):
    id: int
    order_id: int
    menu_item_id: Optional[int] = None
    menu_item_name: Optional[str] = None
    quantity: int
    price: int
    spicy_level: int

    class Config:
        from_attributes = True


class CustomerDetails(BaseModel):
    customer_name: str = Field(..., min_length=1, description="Customer full name")
    customer_phone: str = Field(..., min_length=1, description="WhatsApp number")
    notes: Optional[str] = None
    payment_method: Optional[PaymentMethod] = None

    @field_validator('customer_name', 'customer_phone')
    @classmethod
    def strip_required(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Field must not be blank")
        return v

    @field_validator('notes')
    @classmethod
    def blank_notes_to_none(cls, v):
        if v is not None and not v.strip():
            return None
        return v


class CheckoutRequest(CustomerDetails):
    pass


class OfflineOrderItem(BaseModel):
    menu_item_id: int = Field(..., gt=0)
    quantity: int = Field(1, ge=1)
    spicy_level: int = Field(0, ge=0, le=5)


class OfflineOrderCreate(CustomerDetails):
    items: List[OfflineOrderItem] = Field(default_factory=list, description="At least one item is required")


class OrderResponse(BaseModel):
    id: int
    customer_name: str
    customer_phone: str
    order_type: OrderType
    # Orders saved without a method were settled in cash
    payment_method: PaymentMethod = Field(validation_alias="effective_payment_method")
    total_amount: int
    status: OrderStatus
    notes: Optional[str] = None
    created_at: datetime
    created_by: Optional[int] = None
    items: List[OrderItemResponse] = []

    class Config:
        from_attributes = True


class CheckoutResponse(BaseModel):
    order: OrderResponse
    message: str
    confirmation_timeout_seconds: int


class OrderStatusUpdate(BaseModel):
    status: OrderStatus
