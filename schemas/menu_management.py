from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from models.menu_management import MenuCategory

class MenuItemBase(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = ""
    price: int = Field(..., ge=0, description="Price in whole Rupiah")
    category: MenuCategory
    image_url: str = ""
    is_available: bool = True
    spicy_level: int = Field(0, ge=0, le=5, description="Default spicy level, 0-5")

class MenuItemCreate(MenuItemBase):
    pass

class MenuItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    price: Optional[int] = Field(None, ge=0)
    category: Optional[MenuCategory] = None
    image_url: Optional[str] = None
    is_available: Optional[bool] = None
    spicy_level: Optional[int] = Field(None, ge=0, le=5)

class MenuItemResponse(MenuItemBase):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True

class ImageUploadResponse(BaseModel):
    url: str
