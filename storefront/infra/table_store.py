"""Remote Table Store - per-table async access to the storefront database.

Rows are exchanged as plain dicts keyed by column name. Used directly by
the Data Access Layer as its durability tier and by the backend services.
"""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any, TypeVar

from sqlalchemy import MetaData, Table, case, delete, func, insert, select, update
from sqlalchemy.engine import Result
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.infra.database import get_db_session
from storefront.infra.logging import get_logger
from storefront.models import Base

logger = get_logger(__name__)

T = TypeVar("T")
SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


class TableStoreError(Exception):
    """Raised when the table store cannot be reached or a statement fails."""


class RemoteTableStore:
    """Table-level CRUD over the storefront schema."""

    def __init__(
        self,
        session_factory: SessionFactory | None = None,
        metadata: MetaData | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            session_factory: Returns an async context manager yielding a session
                (defaults to get_db_session)
            metadata: Table metadata (defaults to the storefront models)
        """
        self._session_factory = session_factory or get_db_session
        self._metadata = metadata or Base.metadata

    def _table(self, name: str) -> Table:
        try:
            return self._metadata.tables[name]
        except KeyError:
            raise TableStoreError(f"Unknown table: {name}") from None

    async def _run(self, table: str, stmt: Any, consume: Callable[[Result[Any]], T]) -> T:
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return consume(result)
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Table store statement failed", table=table, error=str(e))
            raise TableStoreError(f"Statement on '{table}' failed: {e}") from e

    async def select(
        self,
        table: str,
        *,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        """Select rows matching equality filters, optionally ordered by one column."""
        tbl = self._table(table)
        stmt = select(tbl)
        for column, value in (filters or {}).items():
            stmt = stmt.where(tbl.c[column] == value)
        if order_by:
            col = tbl.c[order_by]
            stmt = stmt.order_by(col.desc() if descending else col.asc())

        return await self._run(table, stmt, lambda r: [dict(row) for row in r.mappings().all()])

    async def get(self, table: str, row_id: Any) -> dict[str, Any] | None:
        """Fetch one row by primary key `id`."""
        tbl = self._table(table)
        stmt = select(tbl).where(tbl.c.id == row_id)
        row = await self._run(table, stmt, lambda r: r.mappings().first())
        return dict(row) if row is not None else None

    async def count(self, table: str, filters: dict[str, Any] | None = None) -> int:
        """Count rows matching equality filters."""
        tbl = self._table(table)
        stmt = select(func.count()).select_from(tbl)
        for column, value in (filters or {}).items():
            stmt = stmt.where(tbl.c[column] == value)
        return await self._run(table, stmt, lambda r: int(r.scalar_one()))

    async def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        """Insert one row and return it."""
        tbl = self._table(table)
        await self._run(table, insert(tbl).values(**row), lambda r: None)
        logger.debug("Row inserted", table=table, row_id=row.get("id"))
        return row

    async def update(
        self,
        table: str,
        row_id: Any,
        values: dict[str, Any],
    ) -> dict[str, Any] | None:
        """Update one row by id. Returns the updated row, or None if missing."""
        tbl = self._table(table)
        stmt = update(tbl).where(tbl.c.id == row_id).values(**values).returning(*tbl.c)
        row = await self._run(table, stmt, lambda r: r.mappings().first())
        return dict(row) if row is not None else None

    async def delete(self, table: str, row_id: Any) -> bool:
        """Delete one row by id. Returns False if nothing was deleted."""
        tbl = self._table(table)
        stmt = delete(tbl).where(tbl.c.id == row_id)
        return await self._run(table, stmt, lambda r: (r.rowcount or 0) > 0)

    async def set_exclusive_flag(
        self,
        table: str,
        column: str,
        row_id: Any,
        extra_values: dict[str, Any] | None = None,
    ) -> int:
        """Set a boolean column on exactly one row and clear it on all others.

        Runs as a single `UPDATE ... SET column = (id = :row_id)` statement,
        so no reader ever observes zero or two flagged rows.

        Returns:
            Number of rows touched
        """
        tbl = self._table(table)
        values: dict[str, Any] = {column: tbl.c.id == row_id}
        for name, value in (extra_values or {}).items():
            # Extra values (e.g. updated_at) apply to the target row only
            values[name] = case((tbl.c.id == row_id, value), else_=tbl.c[name])
        stmt = update(tbl).values(**values)
        touched = await self._run(table, stmt, lambda r: r.rowcount or 0)
        logger.info("Exclusive flag set", table=table, column=column, row_id=row_id, rows=touched)
        return touched
