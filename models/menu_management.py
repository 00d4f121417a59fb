from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum
from utils.database import Base
from utils.timeutils import utcnow
import enum

class MenuCategory(str, enum.Enum):
    MAIN = "main"
    DRINK = "drink"
    SIDE = "side"

class MenuItem(Base):
    __tablename__ = "menu_items"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    price = Column(Integer, nullable=False)  # whole Rupiah
    category = Column(Enum(MenuCategory, name="menucategory"), nullable=False, index=True)
    image_url = Column(String, nullable=False, default="")
    is_available = Column(Boolean, default=True, nullable=False)
    spicy_level = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
