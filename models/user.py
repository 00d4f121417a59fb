from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.orm import relationship
from utils.database import Base
from utils.timeutils import utcnow
import enum

class UserRole(str, enum.Enum):
    ADMIN = "admin"      # Staff: enters offline orders, manages menu, requests recaps
    MANAGER = "manager"  # Reviews and approves recaps

    @property
    def dashboard(self) -> str:
        return "/manager" if self is UserRole.MANAGER else "/admin"

class AdminUser(Base):
    __tablename__ = "admin_users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, nullable=False, default="")
    hashed_password = Column(String, nullable=False)
    role = Column(Enum(UserRole, name="adminrole"), nullable=False, default=UserRole.ADMIN)
    created_at = Column(DateTime, default=utcnow)

    # Relationships
    offline_orders = relationship("Order", back_populates="creator")
