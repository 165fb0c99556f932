"""Order Submission Formatter - turns an order into a WhatsApp deep link.

Pure functions: no I/O, same input always yields the same link.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from urllib.parse import quote

from storefront.core.order_id import display_order_id
from storefront.schemas.order import CartItem, CustomerData

SEPARATOR = "━" * 22

# Characters JavaScript's encodeURIComponent leaves untouched
_URI_COMPONENT_SAFE = "-_.!~*'()"


@dataclass(frozen=True)
class OrderDetails:
    """Everything the order message shows."""

    order_id: str
    customer: CustomerData
    items: list[CartItem]
    total: Decimal
    payment_method: str
    # Order notes; the customer's own notes when not given
    notes: str | None = None


def format_currency(amount: Decimal) -> str:
    return f"€{Decimal(amount).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)}"


def format_order_message(details: OrderDetails, store_name: str = "Luxury Selet") -> str:
    """Render the order as the message text sent to the store."""
    customer = details.customer

    products_list = "\n".join(
        f"• {item.product.name} (x{item.quantity}) — {format_currency(item.line_total)}"
        for item in details.items
    )

    company_line = f"Empresa: {customer.company}\n" if customer.company else ""
    nif_line = f"NIF: {customer.nif}\n" if customer.nif else ""
    notes = details.notes if details.notes is not None else customer.notes
    notes_line = f"\n📝 *NOTAS:*\n{notes}" if notes else ""

    return (
        f"🛒 *NOVA ENCOMENDA {display_order_id(details.order_id)}*\n"
        f"{SEPARATOR}\n"
        "\n"
        "👤 *CLIENTE:*\n"
        f"Nome: {customer.first_name} {customer.last_name}\n"
        f"{company_line}Telefone: {customer.phone}\n"
        f"Email: {customer.email}\n"
        f"{nif_line}"
        "\n"
        "📍 *MORADA DE ENTREGA:*\n"
        f"{customer.address}\n"
        f"{customer.postal_code} {customer.locality}\n"
        f"{customer.district}, {customer.country}\n"
        "\n"
        "📦 *PRODUTOS:*\n"
        f"{products_list}\n"
        "\n"
        f"{SEPARATOR}\n"
        f"💰 *TOTAL:* {format_currency(details.total)}\n"
        f"💳 *PAGAMENTO:* {details.payment_method}\n"
        f"{SEPARATOR}{notes_line}\n"
        "\n"
        f"_Enviado via {store_name}_"
    )


def build_whatsapp_link(details: OrderDetails, phone: str, store_name: str = "Luxury Selet") -> str:
    """Deep link opening a WhatsApp chat with `phone`, pre-filled with the order message."""
    message = format_order_message(details, store_name=store_name)
    return f"https://wa.me/{phone}?text={quote(message, safe=_URI_COMPONENT_SAFE)}"
