"""ORM models package."""
from .admin_user import AdminUser
from .base import Base, TimestampMixin
from .client import Client
from .order import Order, OrderLineItem, OrderStatus
from .product import ClientProductPrice, Product
from .statement import AgingCategory, Statement
from .template import FooterTemplate, HeaderTemplate

__all__ = [
    "AdminUser",
    "AgingCategory",
    "Base",
    "Client",
    "ClientProductPrice",
    "FooterTemplate",
    "HeaderTemplate",
    "Order",
    "OrderLineItem",
    "OrderStatus",
    "Product",
    "Statement",
    "TimestampMixin",
]
