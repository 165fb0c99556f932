"""Tiered repository - fallback and reconciliation policy for one collection.

Reads walk the tiers in order (backend, table store) and adopt the first
non-empty result, writing it through to the local cache. When every tier
fails or is empty the cached copy is used; when nothing was ever cached the
collection is seeded with its defaults.

Writes are optimistic: the in-memory collection and the cache change first,
then the mutation is pushed to the first tier that accepts it. A failed push
does not roll the local change back. An authentication failure or a tier
refusing the mutation under a business rule does, and is raised to the
caller (a refused delete reports False).
"""

from __future__ import annotations

import uuid
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from storefront.core.errors import (
    AuthenticationError,
    DataAccessError,
    PersistenceError,
    RejectedError,
    TierError,
)
from storefront.core.tiers import CollectionTier
from storefront.infra.local_cache import LocalCacheError, LocalCacheStore
from storefront.infra.logging import get_logger
from storefront.schemas.common import utc_now

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _sortable(value: Any) -> Any:
    # Naive timestamps (older backups) compare as UTC
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass(frozen=True)
class CollectionSpec(Generic[ModelT]):
    """Static description of a collection.

    Attributes:
        name: Logical collection name; also the cache key and table name
        model: Entity model
        create_model: Model validating `add()` payloads
        update_model: Model validating `update()` payloads
        id_prefix: Prefix for generated identifiers
        sort_field: Natural sort key
        descending: Sort direction of the natural key
        stamps_updates: Whether updates set `updated_at`
    """

    name: str
    model: type[ModelT]
    create_model: type[BaseModel]
    update_model: type[BaseModel]
    id_prefix: str
    sort_field: str
    descending: bool = False
    stamps_updates: bool = False

    def sort(self, items: Iterable[ModelT]) -> list[ModelT]:
        return sorted(
            items,
            key=lambda item: _sortable(getattr(item, self.sort_field)),
            reverse=self.descending,
        )


class TieredRepository(Generic[ModelT]):
    """In-memory working copy of one collection, synchronised through the tiers.

    The repository exclusively owns its collection: callers get copies of the
    list and mutate only through the exposed operations.
    """

    def __init__(
        self,
        spec: CollectionSpec[ModelT],
        cache: LocalCacheStore,
        tiers: Sequence[CollectionTier[ModelT]] = (),
    ) -> None:
        self._spec = spec
        self._cache = cache
        self._tiers = list(tiers)
        self._items: list[ModelT] = []
        self._loaded = False
        self._source: str | None = None

    @property
    def name(self) -> str:
        return self._spec.name

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def source(self) -> str | None:
        """Where the current collection was loaded from (tier name, cache or seed)."""
        return self._source

    # =========================================================================
    # Reads
    # =========================================================================

    async def load(self) -> list[ModelT]:
        """Run the read policy and replace the in-memory collection.

        Never raises for tier failures.
        """
        for tier in self._tiers:
            try:
                fetched = await tier.fetch_all()
            except DataAccessError as e:
                logger.warning(
                    "Tier read failed, falling through",
                    collection=self.name,
                    tier=tier.name,
                    error=str(e),
                )
                continue

            if not fetched:
                logger.info("Tier returned empty collection", collection=self.name, tier=tier.name)
                continue

            self._adopt(fetched, source=tier.name)
            self._write_cache_quietly()
            return self.items

        cached = self._read_cache()
        if cached is not None:
            self._adopt(cached, source="cache")
            return self.items

        seed = self.default_items()
        logger.info("Seeding collection on first run", collection=self.name, count=len(seed))
        self._adopt(seed, source="seed")
        self._write_cache_quietly()
        for entity in seed:
            await self._sync("seed", lambda tier, e=entity: tier.create(e), snapshot=None)
        return self.items

    async def refresh(self) -> list[ModelT]:
        """Reload from the tiers, discarding the in-memory copy."""
        return await self.load()

    async def list(self) -> list[ModelT]:
        """The collection in its natural order, loading it on first use."""
        await self._ensure_loaded()
        return self.items

    @property
    def items(self) -> list[ModelT]:
        """Copy of the last loaded collection (no I/O)."""
        return list(self._items)

    def get_by_id(self, entity_id: str) -> ModelT | None:
        """Look an entity up in the last loaded collection (no I/O)."""
        index = self._index_of(entity_id)
        return self._items[index] if index is not None else None

    def default_items(self) -> list[ModelT]:
        """Collection content used when nothing was ever cached."""
        return []

    # =========================================================================
    # Writes
    # =========================================================================

    async def add(self, payload: BaseModel | dict[str, Any]) -> ModelT:
        """Create an entity with a fresh identifier and creation timestamp.

        Raises:
            pydantic.ValidationError: If the payload is invalid (before any I/O)
            AuthenticationError: If the backend rejected the credential
            RejectedError: If the backend refused the entity (e.g. a conflict)
            PersistenceError: If neither a remote tier nor the cache could store it
        """
        data = self._validate(self._spec.create_model, payload)
        await self._ensure_loaded()

        entity = self.build_entity(data)
        snapshot = self.items
        self._items = self._spec.sort([*self._items, entity])

        cached = self._write_cache_quietly()
        synced = await self._sync("create", lambda tier: tier.create(entity), snapshot=snapshot)

        if not synced and not cached:
            self._items = snapshot
            raise PersistenceError(f"Could not persist new {self.name} entity {entity.id}")

        logger.info("Entity added", collection=self.name, id=entity.id, synced=synced)
        return entity

    async def update(self, entity_id: str, changes: BaseModel | dict[str, Any]) -> ModelT | None:
        """Merge partial fields into an entity.

        Returns:
            The updated entity, or None (no-op) if the id is unknown

        Raises:
            pydantic.ValidationError: If the changes are invalid (before any I/O)
            AuthenticationError: If the backend rejected the credential
            RejectedError: If the backend refused the change
        """
        validated = self._validate(self._spec.update_model, changes)
        fields = validated.model_dump(exclude_unset=True)
        await self._ensure_loaded()

        index = self._index_of(entity_id)
        if index is None:
            logger.info("Update of unknown entity ignored", collection=self.name, id=entity_id)
            return None

        current = self._items[index]
        merged_data = {**current.model_dump(), **fields}
        if self._spec.stamps_updates:
            merged_data["updated_at"] = utc_now()
        updated = self._spec.model.model_validate(merged_data)

        snapshot = self.items
        items = list(self._items)
        items[index] = updated
        self._items = self._spec.sort(items)

        self._write_cache_quietly()
        await self._sync("update", lambda tier: tier.update(updated), snapshot=snapshot)
        return updated

    async def delete(self, entity_id: str) -> bool:
        """Remove an entity.

        Returns:
            False if the id is unknown, the entity may not be deleted or a
            tier refused the delete

        Raises:
            AuthenticationError: If the backend rejected the credential
        """
        await self._ensure_loaded()

        entity = self.get_by_id(entity_id)
        if entity is None:
            logger.info("Delete of unknown entity ignored", collection=self.name, id=entity_id)
            return False
        if not await self.can_delete(entity):
            return False

        snapshot = self.items
        self._items = [item for item in self._items if item.id != entity_id]

        self._write_cache_quietly()
        try:
            await self._sync("delete", lambda tier: tier.delete(entity_id), snapshot=snapshot)
        except RejectedError:
            return False
        logger.info("Entity deleted", collection=self.name, id=entity_id)
        return True

    async def can_delete(self, entity: ModelT) -> bool:
        """Hook for entity-specific delete guards."""
        return True

    def build_entity(self, data: BaseModel) -> ModelT:
        """Turn a validated create payload into a stored entity."""
        return self._spec.model.model_validate(
            {**data.model_dump(), "id": self.new_id(), "created_at": utc_now()}
        )

    def new_id(self) -> str:
        """Fresh identifier, unique within the collection."""
        existing = {item.id for item in self._items}
        while True:
            candidate = f"{self._spec.id_prefix}-{uuid.uuid4().hex[:12]}"
            if candidate not in existing:
                return candidate

    # =========================================================================
    # Internals
    # =========================================================================

    async def _ensure_loaded(self) -> None:
        if not self._loaded:
            await self.load()

    def _index_of(self, entity_id: str) -> int | None:
        for index, item in enumerate(self._items):
            if item.id == entity_id:
                return index
        return None

    @staticmethod
    def _validate(model: type[BaseModel], payload: BaseModel | dict[str, Any]) -> BaseModel:
        if isinstance(payload, model):
            return payload
        if isinstance(payload, BaseModel):
            payload = payload.model_dump(exclude_unset=True)
        return model.model_validate(payload)

    def _adopt(self, items: Iterable[ModelT], source: str) -> None:
        self._items = self._spec.sort(items)
        self._loaded = True
        self._source = source
        logger.info(
            "Collection loaded",
            collection=self.name,
            source=source,
            count=len(self._items),
        )

    def _read_cache(self) -> list[ModelT] | None:
        raw = self._cache.get(self.name)
        if raw is None:
            return None
        if not isinstance(raw, list):
            logger.warning("Cached collection is not a list, ignoring", collection=self.name)
            return None

        items: list[ModelT] = []
        for entry in raw:
            try:
                items.append(self._spec.model.model_validate(entry))
            except ValueError as e:
                logger.warning("Skipping invalid cached entity", collection=self.name, error=str(e))
        return items

    def _write_cache_quietly(self) -> bool:
        try:
            self._cache.set(self.name, [item.to_json_dict() for item in self._items])
        except LocalCacheError as e:
            logger.error("Cache write-through failed", collection=self.name, error=str(e))
            return False
        return True

    async def _sync(
        self,
        operation: str,
        call: Callable[[CollectionTier[ModelT]], Awaitable[Any]],
        snapshot: list[ModelT] | None,
    ) -> bool:
        """Push a mutation to the first tier that accepts it.

        Returns:
            True if a tier stored the mutation
        """
        for tier in self._tiers:
            try:
                await call(tier)
            except AuthenticationError:
                if snapshot is None:
                    logger.warning("Tier rejected credential", collection=self.name, tier=tier.name)
                    continue
                logger.warning(
                    "Write rejected by authentication, rolling back",
                    collection=self.name,
                    tier=tier.name,
                    operation=operation,
                )
                self._items = snapshot
                self._write_cache_quietly()
                raise
            except RejectedError as e:
                if snapshot is None:
                    logger.warning(
                        "Tier refused seed entity, not pushing it elsewhere",
                        collection=self.name,
                        tier=tier.name,
                        error=str(e),
                    )
                    return False
                logger.warning(
                    "Write refused by tier, rolling back",
                    collection=self.name,
                    tier=tier.name,
                    operation=operation,
                    error=str(e),
                )
                self._items = snapshot
                self._write_cache_quietly()
                raise
            except TierError as e:
                logger.warning(
                    "Tier write failed, trying next tier",
                    collection=self.name,
                    tier=tier.name,
                    operation=operation,
                    error=str(e),
                )
                continue

            logger.debug("Mutation synced", collection=self.name, tier=tier.name, operation=operation)
            return True

        if self._tiers:
            logger.warning(
                "Mutation kept locally only",
                collection=self.name,
                operation=operation,
            )
        return False
