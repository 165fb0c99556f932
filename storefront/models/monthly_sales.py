"""MonthlySales table - manually entered sales figure per month."""

from decimal import Decimal

from sqlalchemy import Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from storefront.models.base import Base


class MonthlySales(Base):
    """Sales amount for one calendar month."""

    __tablename__ = "monthly_sales"
    __table_args__ = (UniqueConstraint("month", "year", name="uq_monthly_sales_month_year"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    month: Mapped[str] = mapped_column(String(20), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=0)
    target: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<MonthlySales(month='{self.month}', year={self.year})>"
