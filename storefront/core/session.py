"""Per-process wiring of the storefront client.

One StorefrontSession owns the cache, the backend client, the repositories,
the cart and the admin session. Nothing here is module-level state.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from storefront.core.admin_session import AdminSession
from storefront.core.backup import CatalogBackup
from storefront.core.cart import Cart
from storefront.core.categories import CategoryRepository
from storefront.core.checkout import CheckoutResult, checkout
from storefront.core.products import ProductRepository
from storefront.core.tiers import BackendCollectionTier, TableCollectionTier
from storefront.infra.local_cache import LocalCacheStore
from storefront.infra.logging import get_logger
from storefront.infra.table_store import RemoteTableStore
from storefront.schemas.catalog import Category, Product
from storefront.schemas.order import CustomerData, PaymentMethod
from storefront.services.backend_client import BackendClient

logger = get_logger(__name__)


@dataclass
class StorefrontSession:
    """Everything a storefront process needs, wired once."""

    cache: LocalCacheStore
    backend: BackendClient
    admin: AdminSession
    products: ProductRepository
    categories: CategoryRepository
    cart: Cart
    backup: CatalogBackup

    @classmethod
    def create(
        cls,
        *,
        cache_root: Path | str | None = None,
        backend: BackendClient | None = None,
        table_store: RemoteTableStore | None = None,
    ) -> "StorefrontSession":
        """Build a session.

        Args:
            cache_root: Local cache directory (defaults to settings)
            backend: Backend client (a new one by default)
            table_store: Remote table store; omit to run without the table tier
        """
        cache = LocalCacheStore(cache_root)
        backend = backend or BackendClient()
        admin = AdminSession(backend, cache)

        product_tiers: list[Any] = [
            BackendCollectionTier(backend, "products", Product, token_provider=lambda: admin.token)
        ]
        category_tiers: list[Any] = [
            BackendCollectionTier(backend, "categories", Category, token_provider=lambda: admin.token)
        ]
        if table_store is not None:
            product_tiers.append(
                TableCollectionTier(table_store, "products", Product, order_by="created_at", descending=True)
            )
            category_tiers.append(
                TableCollectionTier(table_store, "categories", Category, order_by="sort_order")
            )

        products = ProductRepository(cache, product_tiers)
        categories = CategoryRepository(cache, category_tiers, product_lookup=products.list)
        return cls(
            cache=cache,
            backend=backend,
            admin=admin,
            products=products,
            categories=categories,
            cart=Cart(cache),
            backup=CatalogBackup(cache),
        )

    async def load(self) -> None:
        """Load categories and products through the tiers."""
        await self.categories.load()
        await self.products.load()
        logger.info(
            "Storefront session loaded",
            products=len(self.products.items),
            products_source=self.products.source,
            categories=len(self.categories.items),
            categories_source=self.categories.source,
        )

    async def checkout(
        self,
        customer: CustomerData | dict[str, Any],
        payment_method: PaymentMethod | str,
        notes: str | None = None,
    ) -> CheckoutResult:
        return await checkout(self.cart, customer, payment_method, backend=self.backend, notes=notes)

    async def close(self) -> None:
        await self.backend.close()
