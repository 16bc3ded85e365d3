from .snapshots import StoredSnapshot
from .records import (
    OrderItem, Order, Customer, Product, UserProfile, Notification, PizzaSettings,
)

__all__ = [
    'StoredSnapshot',
    'OrderItem', 'Order', 'Customer', 'Product', 'UserProfile', 'Notification', 'PizzaSettings',
]
