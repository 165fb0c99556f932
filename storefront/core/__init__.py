"""Storefront client core: tiered data access, cart, checkout and admin session."""

from storefront.core.admin_session import AdminSession
from storefront.core.backup import CatalogBackup
from storefront.core.cart import Cart
from storefront.core.categories import CategoryRepository, default_categories
from storefront.core.checkout import CheckoutResult, EmptyCartError, checkout
from storefront.core.errors import (
    AuthenticationError,
    DataAccessError,
    PersistenceError,
    RejectedError,
    TierError,
)
from storefront.core.order_formatter import OrderDetails, build_whatsapp_link, format_order_message
from storefront.core.order_id import generate_order_id
from storefront.core.products import ProductRepository
from storefront.core.repository import CollectionSpec, TieredRepository
from storefront.core.session import StorefrontSession

__all__ = [
    "AdminSession",
    "CatalogBackup",
    "Cart",
    "CategoryRepository",
    "default_categories",
    "CheckoutResult",
    "EmptyCartError",
    "checkout",
    "AuthenticationError",
    "DataAccessError",
    "PersistenceError",
    "RejectedError",
    "TierError",
    "OrderDetails",
    "build_whatsapp_link",
    "format_order_message",
    "generate_order_id",
    "ProductRepository",
    "CollectionSpec",
    "TieredRepository",
    "StorefrontSession",
]
