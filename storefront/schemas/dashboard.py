"""Admin dashboard schemas."""

from decimal import Decimal

from pydantic import Field

from storefront.schemas.common import CamelModel, Money


class MonthlySales(CamelModel):
    """Sales figure for one month (month names are Portuguese, lower-case)."""

    month: str
    year: int
    amount: Money = Decimal("0")
    target: Money | None = None
    notes: str | None = None


class SalesUpdate(CamelModel):
    """Update of the current month's sales figure."""

    amount: Money
    notes: str | None = None


class DashboardStats(CamelModel):
    """Aggregate numbers shown on the admin dashboard."""

    monthly_sales: MonthlySales
    pending_orders: int = Field(ge=0)
    total_orders: int = Field(ge=0)
    total_products: int = Field(ge=0)
    active_products: int = Field(ge=0)
