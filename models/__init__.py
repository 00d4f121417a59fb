from models.user import AdminUser, UserRole
from models.menu_management import MenuItem, MenuCategory
from models.order_management import Order, OrderItem, OrderType, OrderStatus, PaymentMethod
from models.recap import Recap, RecapStatus

# Register all models
__all__ = ['AdminUser', 'UserRole', 'MenuItem', 'MenuCategory', 'Order', 'OrderItem', 'OrderType', 'OrderStatus', 'PaymentMethod', 'Recap', 'RecapStatus']
