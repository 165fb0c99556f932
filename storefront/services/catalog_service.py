"""Catalog Service - server-side products and categories over the table store.

Owns the catalog business rules of the aggregation service:
- at most one featured product, applied with a single statement
- category slug and display order defaults
- a category with active products cannot be deleted
"""

import uuid

from storefront.core.categories import default_categories
from storefront.infra.logging import get_logger
from storefront.infra.table_store import RemoteTableStore
from storefront.schemas.catalog import (
    Category,
    CategoryCreateRequest,
    CategoryUpdate,
    Product,
    ProductCreateRequest,
    ProductUpdate,
    slugify,
)
from storefront.schemas.common import utc_now
from storefront.services.errors import CategoryInUseError, EntityExistsError

logger = get_logger(__name__)

PRODUCTS_TABLE = "products"
CATEGORIES_TABLE = "categories"


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


class CatalogService:
    """Product and category operations backing the HTTP API."""

    def __init__(self, store: RemoteTableStore) -> None:
        self.store = store

    # =========================================================================
    # Products
    # =========================================================================

    async def list_products(self, active_only: bool = False) -> list[Product]:
        """Products newest first; customers only see active ones."""
        rows = await self.store.select(
            PRODUCTS_TABLE,
            filters={"is_active": True} if active_only else None,
            order_by="created_at",
            descending=True,
        )
        return [Product.from_row(row) for row in rows]

    async def get_product(self, product_id: str) -> Product | None:
        row = await self.store.get(PRODUCTS_TABLE, product_id)
        return Product.from_row(row) if row is not None else None

    async def create_product(self, request: ProductCreateRequest) -> Product:
        """Store a new product, keeping a client-assigned id when one is sent.

        Raises:
            EntityExistsError: If the id is already taken
        """
        product_id = request.id or _new_id("prod")
        if request.id and await self.store.get(PRODUCTS_TABLE, product_id) is not None:
            raise EntityExistsError(f"Product {product_id} already exists")

        data = request.model_dump(exclude={"id", "created_at"})
        product = Product(id=product_id, created_at=request.created_at or utc_now(), **data)
        await self.store.insert(PRODUCTS_TABLE, product.to_row())
        logger.info("Product created", product_id=product.id, category_id=product.category_id)

        if product.is_featured:
            await self._feature(product.id)
            product = await self.get_product(product.id) or product
        return product

    async def update_product(self, product_id: str, changes: ProductUpdate) -> Product | None:
        """Apply a partial update.

        Returns:
            The updated product, or None if it does not exist
        """
        current = await self.get_product(product_id)
        if current is None:
            return None

        fields = changes.changes()
        merged = Product.model_validate(
            {**current.model_dump(), **fields, "updated_at": utc_now()}
        )
        values = {k: v for k, v in merged.to_row().items() if k not in ("id", "created_at")}
        row = await self.store.update(PRODUCTS_TABLE, product_id, values)
        if row is None:
            return None

        if fields.get("is_featured"):
            await self._feature(product_id)
            row = await self.store.get(PRODUCTS_TABLE, product_id) or row

        logger.info("Product updated", product_id=product_id, fields=sorted(fields))
        return Product.from_row(row)

    async def delete_product(self, product_id: str) -> bool:
        deleted = await self.store.delete(PRODUCTS_TABLE, product_id)
        if deleted:
            logger.info("Product deleted", product_id=product_id)
        return deleted

    async def set_featured_product(self, product_id: str) -> Product | None:
        """Make one product the only featured product.

        Returns:
            The featured product, or None if it does not exist
        """
        if await self.store.get(PRODUCTS_TABLE, product_id) is None:
            return None
        await self._feature(product_id)
        return await self.get_product(product_id)

    async def _feature(self, product_id: str) -> None:
        await self.store.set_exclusive_flag(
            PRODUCTS_TABLE,
            "is_featured",
            product_id,
            extra_values={"updated_at": utc_now()},
        )
        logger.info("Featured product set", product_id=product_id)

    # =========================================================================
    # Categories
    # =========================================================================

    async def list_categories(self, active_only: bool = False) -> list[Category]:
        rows = await self.store.select(
            CATEGORIES_TABLE,
            filters={"is_active": True} if active_only else None,
            order_by="sort_order",
        )
        return [Category.from_row(row) for row in rows]

    async def get_category(self, category_id: str) -> Category | None:
        row = await self.store.get(CATEGORIES_TABLE, category_id)
        return Category.from_row(row) if row is not None else None

    async def create_category(self, request: CategoryCreateRequest) -> Category:
        """Store a new category with default slug and display order.

        Raises:
            EntityExistsError: If the id is already taken
        """
        category_id = request.id or _new_id("cat")
        if request.id and await self.store.get(CATEGORIES_TABLE, category_id) is not None:
            raise EntityExistsError(f"Category {category_id} already exists")

        order = request.order
        if order is None:
            order = await self.store.count(CATEGORIES_TABLE) + 1

        category = Category(
            id=category_id,
            name=request.name,
            slug=request.slug or slugify(request.name),
            description=request.description,
            order=order,
            is_active=request.is_active,
            created_at=request.created_at or utc_now(),
        )
        await self.store.insert(CATEGORIES_TABLE, category.to_row())
        logger.info("Category created", category_id=category.id, slug=category.slug)
        return category

    async def update_category(self, category_id: str, changes: CategoryUpdate) -> Category | None:
        current = await self.get_category(category_id)
        if current is None:
            return None

        fields = changes.changes()
        merged = Category.model_validate({**current.model_dump(), **fields})
        values = {k: v for k, v in merged.to_row().items() if k not in ("id", "created_at")}
        row = await self.store.update(CATEGORIES_TABLE, category_id, values)
        if row is None:
            return None

        logger.info("Category updated", category_id=category_id, fields=sorted(fields))
        return Category.from_row(row)

    async def delete_category(self, category_id: str) -> bool:
        """Delete a category.

        Returns:
            False if the category does not exist

        Raises:
            CategoryInUseError: If an active product references it
        """
        active_products = await self.store.count(
            PRODUCTS_TABLE,
            {"category_id": category_id, "is_active": True},
        )
        if active_products:
            raise CategoryInUseError(category_id, active_products)

        deleted = await self.store.delete(CATEGORIES_TABLE, category_id)
        if deleted:
            logger.info("Category deleted", category_id=category_id)
        return deleted

    async def ensure_default_categories(self) -> int:
        """Seed the default categories into an empty table.

        Returns:
            Number of categories inserted
        """
        if await self.store.count(CATEGORIES_TABLE):
            return 0

        seed = default_categories()
        for category in seed:
            await self.store.insert(CATEGORIES_TABLE, category.to_row())
        logger.info("Default categories seeded", count=len(seed))
        return len(seed)
