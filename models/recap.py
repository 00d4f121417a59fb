from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from utils.database import Base
from utils.timeutils import utcnow
import enum

class RecapStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

class Recap(Base):
    __tablename__ = "recaps"

    id = Column(Integer, primary_key=True, index=True)
    period_start = Column(Date, nullable=False)
    period_end = Column(Date, nullable=False)
    # Frozen at request time, never recomputed from later order changes
    total_revenue = Column(Integer, nullable=False, default=0)
    total_orders = Column(Integer, nullable=False, default=0)
    status = Column(Enum(RecapStatus, name="recapstatus"), default=RecapStatus.PENDING, nullable=False)
    notes = Column(String, nullable=False, default="")
    rejection_reason = Column(String, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    created_by = Column(Integer, ForeignKey("admin_users.id", ondelete="SET NULL"), nullable=True)
    approved_by = Column(Integer, ForeignKey("admin_users.id", ondelete="SET NULL"), nullable=True)

    # Relationships
    requester = relationship("AdminUser", foreign_keys=[created_by])
    reviewer = relationship("AdminUser", foreign_keys=[approved_by])

    @property
    def created_by_email(self):
        return self.requester.email if self.requester else None
