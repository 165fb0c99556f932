"""Product repository: catalog views and the single-featured-product rule."""

from typing import Any, Sequence

from pydantic import BaseModel

from storefront.core.repository import CollectionSpec, TieredRepository
from storefront.core.tiers import CollectionTier
from storefront.infra.local_cache import LocalCacheStore
from storefront.infra.logging import get_logger
from storefront.schemas.catalog import Availability, Product, ProductCreate, ProductUpdate
from storefront.schemas.common import utc_now

logger = get_logger(__name__)

PRODUCTS = CollectionSpec(
    name="products",
    model=Product,
    create_model=ProductCreate,
    update_model=ProductUpdate,
    id_prefix="prod",
    sort_field="created_at",
    descending=True,
    stamps_updates=True,
)


class ProductRepository(TieredRepository[Product]):
    """Products, newest first."""

    def __init__(
        self,
        cache: LocalCacheStore,
        tiers: Sequence[CollectionTier[Product]] = (),
    ) -> None:
        super().__init__(PRODUCTS, cache, tiers)

    # =========================================================================
    # Customer-facing views
    # =========================================================================

    def get_active_products(self) -> list[Product]:
        return [p for p in self._items if p.is_active]

    def get_products_by_category(self, category_id: str) -> list[Product]:
        return [p for p in self._items if p.category_id == category_id and p.is_active]

    def get_products_by_availability(self, availability: Availability | str) -> list[Product]:
        wanted = Availability(availability)
        return [p for p in self._items if p.availability == wanted and p.is_active]

    def get_featured_product(self) -> Product | None:
        """The featured active product, else the first active one."""
        active = self.get_active_products()
        for product in active:
            if product.is_featured:
                return product
        return active[0] if active else None

    # =========================================================================
    # Admin operations
    # =========================================================================

    async def add(self, payload: BaseModel | dict[str, Any]) -> Product:
        product = await super().add(payload)
        if product.is_featured:
            await self.set_featured_product(product.id)
            product = self.get_by_id(product.id) or product
        return product

    async def update(self, entity_id: str, changes: BaseModel | dict[str, Any]) -> Product | None:
        product = await super().update(entity_id, changes)
        if product is not None and product.is_featured and self._featured_count() > 1:
            await self.set_featured_product(product.id)
            product = self.get_by_id(product.id)
        return product

    async def set_active(self, product_id: str, active: bool) -> Product | None:
        return await self.update(product_id, {"is_active": active})

    async def set_in_stock(self, product_id: str, in_stock: bool) -> Product | None:
        return await self.update(product_id, {"in_stock": in_stock})

    async def toggle_active(self, product_id: str) -> Product | None:
        product = self.get_by_id(product_id)
        if product is None:
            return None
        return await self.set_active(product_id, not product.is_active)

    async def toggle_in_stock(self, product_id: str) -> Product | None:
        product = self.get_by_id(product_id)
        if product is None:
            return None
        return await self.set_in_stock(product_id, not product.in_stock)

    async def set_featured_product(self, product_id: str) -> bool:
        """Make `product_id` the only featured product.

        Locally the flag moves in one pass; remotely each tier applies it as
        one atomic operation. Safe to repeat.

        Returns:
            False if the product is unknown

        Raises:
            AuthenticationError: If the backend rejected the credential
            RejectedError: If the backend refused the change
        """
        await self._ensure_loaded()
        if self.get_by_id(product_id) is None:
            logger.info("Cannot feature unknown product", product_id=product_id)
            return False

        now = utc_now()
        snapshot = self.items
        self._items = [
            p.model_copy(
                update={
                    "is_featured": p.id == product_id,
                    "updated_at": now if p.id == product_id else p.updated_at,
                }
            )
            for p in self._items
        ]

        self._write_cache_quietly()
        await self._sync(
            "set_featured",
            lambda tier: tier.set_featured(product_id, now),
            snapshot=snapshot,
        )
        logger.info("Featured product set", product_id=product_id)
        return True

    async def reconcile_featured(self) -> str | None:
        """Repair a collection with several featured products.

        Keeps the most recently updated featured product.

        Returns:
            Id of the product kept featured, or None if nothing needed fixing
        """
        await self._ensure_loaded()
        featured = [p for p in self._items if p.is_featured]
        if len(featured) <= 1:
            return None

        keep = max(featured, key=lambda p: p.updated_at or p.created_at)
        logger.warning(
            "Several featured products found, reconciling",
            featured=[p.id for p in featured],
            keep=keep.id,
        )
        await self.set_featured_product(keep.id)
        return keep.id

    def _featured_count(self) -> int:
        return sum(1 for p in self._items if p.is_featured)
