"""Catalog backup document."""

from datetime import datetime
from typing import Any

from pydantic import Field

from storefront.schemas.common import CamelModel, utc_now

BACKUP_VERSION = "1.0"


class BackupDocument(CamelModel):
    """Manual export of the whole catalog.

    Products and categories are kept in their cached JSON shape so a backup
    can be imported without re-validating every entity.
    """

    version: str = Field(default=BACKUP_VERSION, min_length=1)
    exported_at: datetime = Field(default_factory=utc_now)
    products: list[dict[str, Any]]
    categories: list[dict[str, Any]]
