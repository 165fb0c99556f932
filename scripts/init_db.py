#!/usr/bin/env python
"""Prepare the storefront database.

This script:
1. Creates the storefront tables that do not exist yet
2. Seeds the default categories when the categories table is empty

Usage:
    # Create tables and seed categories
    python scripts/init_db.py

    # Only create tables
    python scripts/init_db.py --no-seed

    # Show row counts per table
    python scripts/init_db.py --status
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from storefront.infra.database import close_db_engine, create_tables, verify_db_connection
from storefront.infra.logging import get_logger, setup_logging
from storefront.infra.table_store import RemoteTableStore, TableStoreError
from storefront.models import Base
from storefront.services.catalog_service import CatalogService

setup_logging()
logger = get_logger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Create storefront tables and seed default categories",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--no-seed",
        action="store_true",
        help="Do not seed default categories",
    )
    parser.add_argument(
        "--status",
        action="store_true",
        help="Only print row counts per table",
    )
    return parser.parse_args()


async def print_status(store: RemoteTableStore) -> None:
    print("\nTable row counts:")
    print("-" * 40)
    for table in sorted(Base.metadata.tables):
        count = await store.count(table)
        print(f"  {table:<16} {count}")


async def main() -> int:
    """Main entry point."""
    args = parse_args()

    if not await verify_db_connection():
        print("Error: cannot connect to the database (check DB_* settings)")
        return 1

    store = RemoteTableStore()
    try:
        if args.status:
            await print_status(store)
            return 0

        await create_tables()
        print("Tables ready.")

        if not args.no_seed:
            seeded = await CatalogService(store).ensure_default_categories()
            if seeded:
                print(f"Seeded {seeded} default categories.")
            else:
                print("Categories already present, nothing seeded.")

        await print_status(store)
        return 0

    except TableStoreError as e:
        logger.error("Database initialization failed", error=str(e))
        print(f"Error: {e}")
        return 1

    finally:
        await close_db_engine()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
