"""Checkout: order snapshot, WhatsApp hand-off and best-effort submission."""

from dataclasses import dataclass
from typing import Any

from storefront.config import settings
from storefront.core.cart import Cart
from storefront.core.order_formatter import OrderDetails, build_whatsapp_link
from storefront.core.order_id import generate_order_id
from storefront.infra.logging import get_logger
from storefront.schemas.order import CustomerData, Order, OrderCreate, PaymentMethod
from storefront.services.backend_client import BackendClient

logger = get_logger(__name__)


class EmptyCartError(ValueError):
    """Raised when checking out an empty cart."""


@dataclass(frozen=True)
class CheckoutResult:
    """Outcome of a checkout.

    Attributes:
        order: Order snapshot built from the cart
        whatsapp_link: Deep link the caller opens to hand the order off
        submitted: Whether the backend stored the order
    """

    order: Order
    whatsapp_link: str
    submitted: bool


async def checkout(
    cart: Cart,
    customer: CustomerData | dict[str, Any],
    payment_method: PaymentMethod | str,
    *,
    backend: BackendClient | None = None,
    notes: str | None = None,
    order_id: str | None = None,
    whatsapp_number: str | None = None,
    store_name: str | None = None,
) -> CheckoutResult:
    """Turn the cart into an order and its WhatsApp link, then empty the cart.

    Submission to the backend is best effort: when it fails the link is still
    returned so the order reaches the store through WhatsApp.

    Raises:
        pydantic.ValidationError: If customer data is incomplete
        ValueError: If the payment method is unknown
        EmptyCartError: If the cart has no items
    """
    customer_data = (
        customer if isinstance(customer, CustomerData) else CustomerData.model_validate(customer)
    )
    method = PaymentMethod(payment_method)
    notes = notes if notes is not None else customer_data.notes
    if cart.is_empty():
        raise EmptyCartError("Cannot check out an empty cart")

    items = cart.items
    total = cart.subtotal
    order = Order(
        id=order_id or generate_order_id(),
        items=items,
        customer=customer_data,
        payment_method=method,
        total_amount=total,
        notes=notes,
    )

    link = build_whatsapp_link(
        OrderDetails(
            order_id=order.id,
            customer=customer_data,
            items=items,
            total=total,
            payment_method=method.label,
            notes=notes,
        ),
        phone=whatsapp_number or settings.whatsapp_number,
        store_name=store_name or settings.store_name,
    )

    submitted = False
    if backend is not None:
        payload = OrderCreate(
            id=order.id,
            items=items,
            customer=customer_data,
            payment_method=method,
            notes=notes,
        ).to_json_dict()
        submitted = await backend.submit_order(payload) is not None

    cart.clear()
    logger.info(
        "Checkout completed",
        order_id=order.id,
        items=len(items),
        total=str(total),
        submitted=submitted,
    )
    return CheckoutResult(order=order, whatsapp_link=link, submitted=submitted)
