"""API routes module."""

from storefront.api.routes.admin import router as admin_router
from storefront.api.routes.catalog import router as catalog_router
from storefront.api.routes.health import router as health_router
from storefront.api.routes.orders import router as orders_router

__all__ = ["admin_router", "catalog_router", "health_router", "orders_router"]
