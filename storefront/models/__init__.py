"""SQLAlchemy tables backing the Remote Table Store."""

from storefront.models.base import Base, TimestampMixin
from storefront.models.category import Category
from storefront.models.monthly_sales import MonthlySales
from storefront.models.order import Order
from storefront.models.product import Product

__all__ = [
    "Base",
    "TimestampMixin",
    "Category",
    "MonthlySales",
    "Order",
    "Product",
]
