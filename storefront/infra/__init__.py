"""Infrastructure - Database, table store, local cache, logging."""

from storefront.infra.database import DatabaseSession, close_db_engine, get_db_session
from storefront.infra.local_cache import LocalCacheError, LocalCacheStore
from storefront.infra.logging import (
    bind_request_context,
    clear_request_context,
    get_logger,
    setup_logging,
)
from storefront.infra.table_store import RemoteTableStore, TableStoreError

__all__ = [
    "get_db_session",
    "DatabaseSession",
    "close_db_engine",
    "LocalCacheError",
    "LocalCacheStore",
    "RemoteTableStore",
    "TableStoreError",
    "setup_logging",
    "get_logger",
    "bind_request_context",
    "clear_request_context",
]
