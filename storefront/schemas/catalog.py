"""Catalog schemas: products and categories.

Attributes are snake_case and match the table columns; JSON on the wire and
in the local cache is camelCase.
"""

import re
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import Field, field_validator

from storefront.schemas.common import CamelModel, Money, utc_now


class Availability(str, Enum):
    """How a product is delivered."""

    IMMEDIATE_STOCK = "pronta-entrega"
    MADE_TO_ORDER = "por-encomenda"


def slugify(name: str) -> str:
    """Derive a URL-safe slug from a category name."""
    return re.sub(r"\s+", "-", name.strip().lower())


# =============================================================================
# Products
# =============================================================================


class ProductFields(CamelModel):
    """Editable product fields."""

    name: str = Field(min_length=1, max_length=200)
    price: Money
    original_price: Money | None = Field(default=None, description="Price before discount")
    image: str = Field(default="", description="Image URI or data URL")
    category: str = Field(default="", description="Category display label")
    category_id: str = Field(min_length=1)
    availability: Availability = Availability.IMMEDIATE_STOCK
    description: str | None = None
    in_stock: bool = True
    is_active: bool = True
    is_featured: bool = False

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Product name is required")
        return v.strip()


class ProductCreate(ProductFields):
    """Payload for creating a product (identifier and timestamps are assigned)."""


class ProductCreateRequest(ProductCreate):
    """Create payload accepted by the backend.

    Clients that already assigned an identifier locally send it along so that
    every tier stores the product under the same id.
    """

    id: str | None = Field(default=None, min_length=1, max_length=64)
    created_at: datetime | None = None


class ProductUpdate(CamelModel):
    """Partial product update. Only fields that are set are applied."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    price: Money | None = None
    original_price: Money | None = None
    image: str | None = None
    category: str | None = None
    category_id: str | None = Field(default=None, min_length=1)
    availability: Availability | None = None
    description: str | None = None
    in_stock: bool | None = None
    is_active: bool | None = None
    is_featured: bool | None = None

    def changes(self) -> dict[str, Any]:
        """Fields explicitly provided by the caller."""
        return self.model_dump(exclude_unset=True)


class Product(ProductFields):
    """A catalog product."""

    id: str = Field(min_length=1)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime | None = None

    def to_row(self) -> dict[str, Any]:
        """Column values for the `products` table."""
        row = self.model_dump()
        row["availability"] = self.availability.value
        return row

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Product":
        """Build from a `products` table row."""
        return cls.model_validate(dict(row))


# =============================================================================
# Categories
# =============================================================================


class CategoryCreate(CamelModel):
    """Payload for creating a category."""

    name: str = Field(max_length=200)
    slug: str | None = Field(default=None, max_length=200)
    description: str | None = None
    is_active: bool = True
    order: int | None = Field(default=None, ge=0)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Category name is required")
        return v.strip()


class CategoryCreateRequest(CategoryCreate):
    """Create payload accepted by the backend (optional client-assigned id)."""

    id: str | None = Field(default=None, min_length=1, max_length=64)
    created_at: datetime | None = None


class CategoryUpdate(CamelModel):
    """Partial category update."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    slug: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    is_active: bool | None = None
    order: int | None = Field(default=None, ge=0)

    def changes(self) -> dict[str, Any]:
        """Fields explicitly provided by the caller."""
        return self.model_dump(exclude_unset=True)


class Category(CamelModel):
    """A product category."""

    id: str = Field(min_length=1)
    name: str = Field(min_length=1, max_length=200)
    slug: str
    description: str | None = None
    order: int = 0
    is_active: bool = True
    created_at: datetime = Field(default_factory=utc_now)

    def to_row(self) -> dict[str, Any]:
        """Column values for the `categories` table (`order` is `sort_order`)."""
        row = self.model_dump()
        row["sort_order"] = row.pop("order")
        return row

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Category":
        """Build from a `categories` table row."""
        data = dict(row)
        if "sort_order" in data:
            data["order"] = data.pop("sort_order")
        return cls.model_validate(data)
