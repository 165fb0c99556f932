"""Shopping cart persisted in the local cache."""

from decimal import Decimal

from storefront.infra.local_cache import LocalCacheError, LocalCacheStore
from storefront.infra.logging import get_logger
from storefront.schemas.catalog import Product
from storefront.schemas.order import CartItem, ProductSnapshot, cart_total

logger = get_logger(__name__)

CART_KEY = "cart"


class Cart:
    """Cart lines keyed by product id; every change is written to the cache."""

    def __init__(self, cache: LocalCacheStore) -> None:
        self._cache = cache
        self._items: list[CartItem] = self._load()

    def _load(self) -> list[CartItem]:
        raw = self._cache.get(CART_KEY, [])
        if not isinstance(raw, list):
            logger.warning("Cached cart is not a list, starting empty")
            return []

        items: list[CartItem] = []
        for entry in raw:
            try:
                items.append(CartItem.model_validate(entry))
            except ValueError as e:
                logger.warning("Skipping invalid cart line", error=str(e))
        return items

    def _save(self) -> None:
        try:
            self._cache.set(CART_KEY, [item.to_json_dict() for item in self._items])
        except LocalCacheError as e:
            logger.error("Failed to persist cart", error=str(e))

    @property
    def items(self) -> list[CartItem]:
        return list(self._items)

    @property
    def subtotal(self) -> Decimal:
        return cart_total(self._items)

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self._items)

    def is_empty(self) -> bool:
        return not self._items

    def add_to_cart(self, product: Product | ProductSnapshot, quantity: int = 1) -> CartItem:
        """Add a product, merging with an existing line for the same product.

        Raises:
            ValueError: If quantity is not positive
        """
        if quantity < 1:
            raise ValueError("quantity must be at least 1")

        snapshot = product if isinstance(product, ProductSnapshot) else ProductSnapshot.from_product(product)
        for index, item in enumerate(self._items):
            if item.product.id == snapshot.id:
                line = item.model_copy(update={"quantity": item.quantity + quantity})
                self._items[index] = line
                break
        else:
            line = CartItem(product=snapshot, quantity=quantity)
            self._items.append(line)

        self._save()
        return line

    def remove_from_cart(self, product_id: str) -> bool:
        before = len(self._items)
        self._items = [item for item in self._items if item.product.id != product_id]
        if len(self._items) == before:
            return False
        self._save()
        return True

    def update_quantity(self, product_id: str, quantity: int) -> CartItem | None:
        """Set a line's quantity; zero or less removes the line.

        Returns:
            The updated line, or None if it was removed or not in the cart
        """
        if quantity <= 0:
            self.remove_from_cart(product_id)
            return None

        for index, item in enumerate(self._items):
            if item.product.id == product_id:
                line = item.model_copy(update={"quantity": quantity})
                self._items[index] = line
                self._save()
                return line
        return None

    def clear(self) -> None:
        self._items = []
        self._save()
