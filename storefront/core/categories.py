"""Category repository: default seed, ordering and the delete guard."""

from collections.abc import Awaitable, Callable, Iterable, Sequence

from storefront.core.repository import CollectionSpec, TieredRepository
from storefront.core.tiers import CollectionTier
from storefront.infra.local_cache import LocalCacheStore
from storefront.infra.logging import get_logger
from storefront.schemas.catalog import (
    Category,
    CategoryCreate,
    CategoryUpdate,
    Product,
    slugify,
)
from storefront.schemas.common import utc_now

logger = get_logger(__name__)

CATEGORIES = CollectionSpec(
    name="categories",
    model=Category,
    create_model=CategoryCreate,
    update_model=CategoryUpdate,
    id_prefix="cat",
    sort_field="order",
)

# (id, name, description) seeded on first run
DEFAULT_CATEGORIES: tuple[tuple[str, str, str], ...] = (
    ("perfumes-mulher", "Perfumes Mulher", "Fragrâncias femininas"),
    ("perfumes-homem", "Perfumes Homem", "Fragrâncias masculinas"),
    ("maquilhagem", "Maquilhagem", "Produtos de maquilhagem"),
    ("cuidados-pele", "Cuidados de Pele", "Cremes e tratamentos"),
    ("cabelos", "Cabelos", "Produtos capilares"),
)


def default_categories() -> list[Category]:
    """The five categories a new store starts with."""
    now = utc_now()
    return [
        Category(
            id=category_id,
            name=name,
            slug=category_id,
            description=description,
            order=position,
            is_active=True,
            created_at=now,
        )
        for position, (category_id, name, description) in enumerate(DEFAULT_CATEGORIES, start=1)
    ]


ProductLookup = Callable[[], Awaitable[Iterable[Product]]]


async def _no_products() -> list[Product]:
    return []


class CategoryRepository(TieredRepository[Category]):
    """Categories, in display order."""

    def __init__(
        self,
        cache: LocalCacheStore,
        tiers: Sequence[CollectionTier[Category]] = (),
        product_lookup: ProductLookup | None = None,
    ) -> None:
        """Initialize the repository.

        Args:
            cache: Local cache store
            tiers: Remote tiers, preferred first
            product_lookup: Returns the products, loading them first if
                needed; used to refuse deleting a category that still has
                active products
        """
        super().__init__(CATEGORIES, cache, tiers)
        self._product_lookup = product_lookup or _no_products

    def default_items(self) -> list[Category]:
        return default_categories()

    def build_entity(self, data: CategoryCreate) -> Category:
        return Category(
            id=self.new_id(),
            name=data.name,
            slug=data.slug or slugify(data.name),
            description=data.description,
            order=data.order if data.order is not None else len(self._items) + 1,
            is_active=data.is_active,
            created_at=utc_now(),
        )

    async def can_delete(self, entity: Category) -> bool:
        in_use = [
            p.id for p in await self._product_lookup()
            if p.category_id == entity.id and p.is_active
        ]
        if in_use:
            logger.warning(
                "Refusing to delete category with active products",
                category_id=entity.id,
                active_products=len(in_use),
            )
            return False
        return True

    def get_active_categories(self) -> list[Category]:
        return [c for c in self._items if c.is_active]

    async def reorder_categories(self, category_ids: Sequence[str]) -> list[Category]:
        """Renumber categories following `category_ids`.

        Categories missing from `category_ids` keep their relative order
        after the listed ones; unknown ids are ignored.
        """
        await self._ensure_loaded()
        by_id = {c.id: c for c in self._items}
        ordered = [by_id[cid] for cid in dict.fromkeys(category_ids) if cid in by_id]
        listed = {c.id for c in ordered}
        ordered.extend(c for c in self._items if c.id not in listed)

        for position, category in enumerate(ordered, start=1):
            if category.order != position:
                await self.update(category.id, {"order": position})

        return self.items
