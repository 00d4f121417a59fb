from typing import List, Optional
from pydantic import BaseModel, Field
from schemas.menu_management import MenuItemResponse


class CartItemAdd(BaseModel):
    menu_item_id: int = Field(..., gt=0)
    spicy_level: Optional[int] = Field(None, ge=0, le=5, description="Defaults to the item's own level for main dishes")


class CartQuantityUpdate(BaseModel):
    quantity: int


class CartItemResponse(BaseModel):
    menu_item: MenuItemResponse
    quantity: int
    spicy_level: int
    subtotal: int

    class Config:
        from_attributes = True


class CartResponse(BaseModel):
    id: str
    items: List[CartItemResponse]
    total_price: int
    total_items: int
