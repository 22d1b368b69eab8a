__all__ = [
    "Base",
    "TimestampMixin",
    "Product",
    "ProductSize",
    "ProductImage",
    "User",
    "Token",
    "Order",
    "OrderItem",
    "db_helper",
    "DatabaseHelper",
]

from .base import Base, TimestampMixin
from .db_helper import DatabaseHelper, db_helper
from .product import Product
from .product_size import ProductSize
from .product_image import ProductImage
from .user import User
from .token import Token
from .order import Order, OrderItem
