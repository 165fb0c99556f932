"""Order schemas: cart items, customer data, payment methods and status machine."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import Field, field_validator

from storefront.schemas.catalog import Availability, Product
from storefront.schemas.common import CamelModel, Money, utc_now


class PaymentMethod(str, Enum):
    """Payment options offered at checkout."""

    CARD = "cartao"
    BANK_REFERENCE = "multibanco"
    MOBILE_PAYMENT = "mbway"
    WIRE_TRANSFER = "transferencia"

    @property
    def label(self) -> str:
        """Customer-facing label."""
        return _PAYMENT_LABELS[self]


_PAYMENT_LABELS = {
    PaymentMethod.CARD: "Cartão",
    PaymentMethod.BANK_REFERENCE: "Multibanco",
    PaymentMethod.MOBILE_PAYMENT: "MB WAY",
    PaymentMethod.WIRE_TRANSFER: "Transferência",
}


class OrderStatus(str, Enum):
    """Order lifecycle.

    pending -> confirmed -> shipped -> delivered, and pending/confirmed ->
    cancelled. Delivered and cancelled are terminal.
    """

    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)

    def can_transition_to(self, target: "OrderStatus") -> bool:
        """Whether an order in this status may move to `target`."""
        if target == self:
            return True
        return target in _TRANSITIONS[self]


_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


class ProductSnapshot(CamelModel):
    """Copy of the product fields a cart line or order needs."""

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    price: Money
    original_price: Money | None = None
    image: str = ""
    category_id: str | None = None
    availability: Availability = Availability.IMMEDIATE_STOCK

    @classmethod
    def from_product(cls, product: Product) -> "ProductSnapshot":
        return cls(
            id=product.id,
            name=product.name,
            price=product.price,
            original_price=product.original_price,
            image=product.image,
            category_id=product.category_id,
            availability=product.availability,
        )


class CartItem(CamelModel):
    """A product snapshot and a positive quantity."""

    product: ProductSnapshot
    quantity: int = Field(ge=1)

    @property
    def line_total(self) -> Decimal:
        return self.product.price * self.quantity


class CustomerData(CamelModel):
    """Contact and delivery details entered at checkout."""

    first_name: str
    last_name: str
    company: str | None = None
    country: str = "Portugal"
    address: str
    locality: str
    district: str
    postal_code: str
    phone: str
    email: str
    nif: str | None = None
    notes: str | None = None

    @field_validator(
        "first_name",
        "last_name",
        "country",
        "address",
        "locality",
        "district",
        "postal_code",
        "phone",
        "email",
    )
    @classmethod
    def validate_required(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Field is required")
        return v.strip()


def cart_total(items: list[CartItem]) -> Decimal:
    """Sum of line totals."""
    return sum((item.line_total for item in items), Decimal("0"))


class OrderCreate(CamelModel):
    """Checkout submission."""

    id: str | None = Field(default=None, min_length=1, max_length=32)
    items: list[CartItem] = Field(min_length=1)
    customer: CustomerData
    payment_method: PaymentMethod
    notes: str | None = None


class OrderStatusUpdate(CamelModel):
    """Admin status change; notes may be updated on its own."""

    status: OrderStatus | None = None
    notes: str | None = None


class Order(CamelModel):
    """A submitted order with embedded item and customer snapshots."""

    id: str = Field(min_length=1)
    items: list[CartItem]
    customer: CustomerData
    payment_method: PaymentMethod
    status: OrderStatus = OrderStatus.PENDING
    total_amount: Money = Decimal("0")
    notes: str | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def to_row(self) -> dict[str, Any]:
        """Column values for the `orders` table."""
        return {
            "id": self.id,
            "items": [item.to_json_dict() for item in self.items],
            "customer": self.customer.to_json_dict(),
            "payment_method": self.payment_method.value,
            "status": self.status.value,
            "total_amount": self.total_amount,
            "notes": self.notes,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Order":
        """Build from an `orders` table row."""
        return cls.model_validate(dict(row))
