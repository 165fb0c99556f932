"""Tests for the remote table store adapter."""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError

from storefront.infra.table_store import RemoteTableStore, TableStoreError


def make_store(result: MagicMock | None = None, error: Exception | None = None):
    session = MagicMock()
    session.execute = AsyncMock(return_value=result or MagicMock(), side_effect=error)

    @asynccontextmanager
    async def session_factory():
        yield session

    return RemoteTableStore(session_factory=session_factory), session


def compiled(session: MagicMock) -> str:
    stmt = session.execute.call_args[0][0]
    return str(stmt.compile(dialect=postgresql.dialect()))


class TestRemoteTableStore:
    """Tests for RemoteTableStore."""

    @pytest.mark.asyncio
    async def test_select_with_filters_and_order(self):
        result = MagicMock()
        result.mappings.return_value.all.return_value = [{"id": "a", "is_active": True}]
        store, session = make_store(result)

        rows = await store.select(
            "products",
            filters={"is_active": True},
            order_by="created_at",
            descending=True,
        )

        assert rows == [{"id": "a", "is_active": True}]
        sql = compiled(session)
        assert "WHERE products.is_active" in sql
        assert "ORDER BY products.created_at DESC" in sql

    @pytest.mark.asyncio
    async def test_get_missing_row(self):
        result = MagicMock()
        result.mappings.return_value.first.return_value = None
        store, _ = make_store(result)

        assert await store.get("categories", "missing") is None

    @pytest.mark.asyncio
    async def test_delete_reports_rowcount(self):
        result = MagicMock()
        result.rowcount = 0
        store, _ = make_store(result)

        assert await store.delete("products", "missing") is False

    @pytest.mark.asyncio
    async def test_set_exclusive_flag_is_single_statement(self):
        result = MagicMock()
        result.rowcount = 3
        store, session = make_store(result)

        touched = await store.set_exclusive_flag(
            "products",
            "is_featured",
            "b",
            extra_values={"updated_at": datetime(2026, 2, 1, tzinfo=timezone.utc)},
        )

        assert touched == 3
        session.execute.assert_awaited_once()
        sql = compiled(session)
        assert sql.startswith("UPDATE products SET")
        assert "is_featured=(products.id = " in sql
        assert "CASE WHEN" in sql
        assert "WHERE" not in sql.split("CASE", 1)[0]

    @pytest.mark.asyncio
    async def test_unknown_table(self):
        store, _ = make_store()

        with pytest.raises(TableStoreError):
            await store.count("nope")

    @pytest.mark.asyncio
    async def test_database_error_wrapped(self):
        store, _ = make_store(error=OperationalError("SELECT 1", {}, Exception("refused")))

        with pytest.raises(TableStoreError):
            await store.select("orders")
