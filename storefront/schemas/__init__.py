"""Pydantic schemas for domain entities, requests and responses."""

from storefront.schemas.auth import AdminUser, LoginRequest, LoginResponse
from storefront.schemas.backup import BACKUP_VERSION, BackupDocument
from storefront.schemas.catalog import (
    Availability,
    Category,
    CategoryCreate,
    CategoryCreateRequest,
    CategoryUpdate,
    Product,
    ProductCreate,
    ProductCreateRequest,
    ProductUpdate,
    slugify,
)
from storefront.schemas.common import CamelModel, ErrorResponse, HealthResponse, utc_now
from storefront.schemas.dashboard import DashboardStats, MonthlySales, SalesUpdate
from storefront.schemas.order import (
    CartItem,
    CustomerData,
    Order,
    OrderCreate,
    OrderStatus,
    OrderStatusUpdate,
    PaymentMethod,
    ProductSnapshot,
    cart_total,
)

__all__ = [
    "AdminUser",
    "LoginRequest",
    "LoginResponse",
    "BACKUP_VERSION",
    "BackupDocument",
    "Availability",
    "Category",
    "CategoryCreate",
    "CategoryCreateRequest",
    "CategoryUpdate",
    "Product",
    "ProductCreate",
    "ProductCreateRequest",
    "ProductUpdate",
    "slugify",
    "CamelModel",
    "ErrorResponse",
    "HealthResponse",
    "utc_now",
    "DashboardStats",
    "MonthlySales",
    "SalesUpdate",
    "CartItem",
    "CustomerData",
    "Order",
    "OrderCreate",
    "OrderStatus",
    "OrderStatusUpdate",
    "PaymentMethod",
    "ProductSnapshot",
    "cart_total",
]
