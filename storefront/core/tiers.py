"""Storage tiers used by the tiered repository.

A tier is one remote place a collection can be read from and written to:
the Backend Aggregation Service (preferred) or the Remote Table Store
(durability fallback). Tiers translate their transport errors into
TierError, AuthenticationError or RejectedError so the repository can apply one policy.
"""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Generic, Protocol, TypeVar

from pydantic import BaseModel, ValidationError

from storefront.core.errors import AuthenticationError, RejectedError, TierError
from storefront.infra.logging import get_logger
from storefront.infra.table_store import RemoteTableStore, TableStoreError
from storefront.services.backend_client import (
    BackendAuthError,
    BackendClient,
    BackendError,
    BackendRejectedError,
)

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)
TokenProvider = Callable[[], str | None]


class CollectionTier(Protocol[ModelT]):
    """Remote storage for one collection."""

    name: str

    async def fetch_all(self) -> list[ModelT]:
        """Return every entity, in the tier's natural order."""
        ...

    async def create(self, entity: ModelT) -> None:
        ...

    async def update(self, entity: ModelT) -> None:
        """Store the full entity, creating it when the tier does not have it yet."""
        ...

    async def delete(self, entity_id: str) -> bool:
        ...

    async def set_featured(self, entity_id: str, updated_at: datetime) -> None:
        """Flag exactly one entity as featured (products only)."""
        ...


@contextmanager
def tier_errors(tier: str, operation: str) -> Iterator[None]:
    """Translate transport errors raised inside the block into tier errors."""
    try:
        yield
    except BackendAuthError as e:
        raise AuthenticationError(f"{tier} {operation} rejected: {e}") from e
    except BackendRejectedError as e:
        raise RejectedError(f"{tier} {operation} refused: {e}") from e
    except (BackendError, TableStoreError, ValidationError) as e:
        raise TierError(tier, operation, str(e)) from e


class BackendCollectionTier(Generic[ModelT]):
    """Collection access through the Backend Aggregation Service.

    Reads use the admin endpoint when a bearer token is available and the
    public endpoint otherwise. Writes always need a token.
    """

    name = "backend"

    def __init__(
        self,
        client: BackendClient,
        collection: str,
        model: type[ModelT],
        token_provider: TokenProvider | None = None,
    ) -> None:
        self._client = client
        self._collection = collection
        self._model = model
        self._token_provider = token_provider or (lambda: None)

    def _write_token(self, operation: str) -> str:
        token = self._token_provider()
        if not token:
            raise AuthenticationError(f"{self.name} {operation} on {self._collection} requires a bearer token")
        return token

    async def fetch_all(self) -> list[ModelT]:
        with tier_errors(self.name, "fetch"):
            rows = await self._client.list_collection(self._collection, token=self._token_provider())
            return [self._model.model_validate(row) for row in rows]

    async def create(self, entity: ModelT) -> None:
        token = self._write_token("create")
        with tier_errors(self.name, "create"):
            await self._client.create_entity(self._collection, entity.to_json_dict(), token)

    async def update(self, entity: ModelT) -> None:
        token = self._write_token("update")
        with tier_errors(self.name, "update"):
            payload = entity.to_json_dict()
            found = await self._client.update_entity(self._collection, entity.id, payload, token)
            if found is None:
                logger.info("Entity missing on backend, creating", collection=self._collection, id=entity.id)
                await self._client.create_entity(self._collection, payload, token)

    async def delete(self, entity_id: str) -> bool:
        token = self._write_token("delete")
        with tier_errors(self.name, "delete"):
            return await self._client.delete_entity(self._collection, entity_id, token)

    async def set_featured(self, entity_id: str, updated_at: datetime) -> None:
        token = self._write_token("set_featured")
        with tier_errors(self.name, "set_featured"):
            found = await self._client.set_featured_product(entity_id, token)
            if found is None:
                raise TierError(self.name, "set_featured", f"product {entity_id} not found")


class TableCollectionTier(Generic[ModelT]):
    """Collection access straight against the Remote Table Store."""

    name = "table"

    def __init__(
        self,
        store: RemoteTableStore,
        table: str,
        model: type[ModelT],
        order_by: str,
        descending: bool = False,
    ) -> None:
        self._store = store
        self._table = table
        self._model = model
        self._order_by = order_by
        self._descending = descending

    async def fetch_all(self) -> list[ModelT]:
        with tier_errors(self.name, "fetch"):
            rows = await self._store.select(
                self._table,
                order_by=self._order_by,
                descending=self._descending,
            )
            return [self._model.from_row(row) for row in rows]

    async def create(self, entity: ModelT) -> None:
        with tier_errors(self.name, "create"):
            await self._store.insert(self._table, entity.to_row())

    async def update(self, entity: ModelT) -> None:
        with tier_errors(self.name, "update"):
            row: dict[str, Any] = entity.to_row()
            values = {k: v for k, v in row.items() if k != "id"}
            if await self._store.update(self._table, entity.id, values) is None:
                logger.info("Row missing in table store, inserting", table=self._table, id=entity.id)
                await self._store.insert(self._table, row)

    async def delete(self, entity_id: str) -> bool:
        with tier_errors(self.name, "delete"):
            return await self._store.delete(self._table, entity_id)

    async def set_featured(self, entity_id: str, updated_at: datetime) -> None:
        with tier_errors(self.name, "set_featured"):
            if await self._store.get(self._table, entity_id) is None:
                raise TierError(self.name, "set_featured", f"product {entity_id} not found")
            await self._store.set_exclusive_flag(
                self._table,
                "is_featured",
                entity_id,
                extra_values={"updated_at": updated_at},
            )
