from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from utils.database import Base
from utils.timeutils import utcnow
import enum

class OrderType(str, enum.Enum):
    ONLINE = "online"    # customer self-checkout
    OFFLINE = "offline"  # entered by staff at the counter

class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

class PaymentMethod(str, enum.Enum):
    CASH = "cash"
    QRIS = "qris"
    TRANSFER = "transfer"

class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    customer_name = Column(String, nullable=False)
    customer_phone = Column(String, nullable=False)
    order_type = Column(Enum(OrderType, name="ordertype"), nullable=False)
    payment_method = Column(Enum(PaymentMethod, name="paymentmethod"), nullable=True)
    total_amount = Column(Integer, nullable=False, default=0)
    status = Column(Enum(OrderStatus, name="orderstatus"), default=OrderStatus.PENDING, nullable=False, index=True)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=utcnow, index=True)
    created_by = Column(Integer, ForeignKey("admin_users.id", ondelete="SET NULL"), nullable=True)

    # Relationships
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")
    creator = relationship("AdminUser", back_populates="offline_orders")

    @property
    def effective_payment_method(self) -> PaymentMethod:
        """Older rows carry no payment method; those were settled in cash."""
        return self.payment_method or PaymentMethod.CASH

class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    # Not owned: the menu item may be edited or deleted after the order is placed,
    # so there is no foreign key and the id may dangle
    menu_item_id = Column(Integer, nullable=True, index=True)
    quantity = Column(Integer, nullable=False)
    price = Column(Integer, nullable=False)
    spicy_level = Column(Integer, nullable=False, default=0)

    # Relationships
    order = relationship("Order", back_populates="items")
    menu_item = relationship(
        "MenuItem",
        primaryjoin="foreign(OrderItem.menu_item_id) == MenuItem.id",
        viewonly=True,
    )

    @property
    def menu_item_name(self):
        return self.menu_item.name if self.menu_item else None

    @property
    def subtotal(self) -> int:
        return self.price * self.quantity
