"""Models package initialization"""

from .base import Base
from .user import User, UserRole
from .product import Product
from .cart import Cart
from .order import (
    Order,
    OrderStatus,
    PaymentStatus,
    PaymentMethodType,
    Actor,
    STATUS_MESSAGES,
)

# Export all models
__all__ = [
    "Base",
    "User",
    "UserRole",
    "Product",
    "Cart",
    "Order",
    "OrderStatus",
    "PaymentStatus",
    "PaymentMethodType",
    "Actor",
    "STATUS_MESSAGES",
]
