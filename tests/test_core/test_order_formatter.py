"""Tests for the order message formatter and order identifiers."""

import re
from dataclasses import replace
from decimal import Decimal
from urllib.parse import unquote

import pytest

from storefront.core.order_formatter import (
    OrderDetails,
    build_whatsapp_link,
    format_currency,
    format_order_message,
)
from storefront.core.order_id import display_order_id, generate_order_id
from storefront.schemas.order import CartItem, CustomerData, ProductSnapshot


@pytest.fixture
def details() -> OrderDetails:
    customer = CustomerData(
        first_name="Ana",
        last_name="Silva",
        company="Beleza Lda",
        address="Rua das Flores 10",
        locality="Porto",
        district="Porto",
        postal_code="4000-123",
        phone="912345678",
        email="ana@example.pt",
        nif="123456789",
        notes="Entregar depois das 18h & tocar 2x",
    )
    items = [
        CartItem(product=ProductSnapshot(id="a", name="Malbec Gold", price=Decimal("18.90")), quantity=2),
        CartItem(product=ProductSnapshot(id="b", name="Água Micelar", price=Decimal("16.00")), quantity=1),
    ]
    return OrderDetails(
        order_id="BOT-4821",
        customer=customer,
        items=items,
        total=Decimal("53.80"),
        payment_method="Multibanco",
    )


class TestOrderMessage:
    """Tests for format_order_message()."""

    def test_message_content(self, details: OrderDetails):
        message = format_order_message(details)

        assert message.startswith("🛒 *NOVA ENCOMENDA #BOT-4821*\n")
        assert "Nome: Ana Silva\n" in message
        assert "Empresa: Beleza Lda\n" in message
        assert "NIF: 123456789\n" in message
        assert "• Malbec Gold (x2) — €37.80" in message
        assert "• Água Micelar (x1) — €16.00" in message
        assert "💰 *TOTAL:* €53.80" in message
        assert "💳 *PAGAMENTO:* Multibanco" in message
        assert "📝 *NOTAS:*\nEntregar depois das 18h & tocar 2x" in message
        assert message.endswith("_Enviado via Luxury Selet_")

    def test_optional_lines_omitted(self, details: OrderDetails):
        customer = details.customer.model_copy(update={"company": None, "nif": None, "notes": None})
        message = format_order_message(
            OrderDetails(
                order_id=details.order_id,
                customer=customer,
                items=details.items,
                total=details.total,
                payment_method=details.payment_method,
            )
        )

        assert "Empresa:" not in message
        assert "NIF:" not in message
        assert "NOTAS" not in message

    def test_order_notes_replace_customer_notes(self, details: OrderDetails):
        message = format_order_message(replace(details, notes="Deixar na portaria"))

        assert "📝 *NOTAS:*\nDeixar na portaria" in message
        assert "tocar 2x" not in message

    def test_deterministic(self, details: OrderDetails):
        assert format_order_message(details) == format_order_message(details)

    def test_currency_rounding(self):
        assert format_currency(Decimal("0")) == "€0.00"
        assert format_currency(Decimal("2.005")) == "€2.01"


class TestWhatsappLink:
    """Tests for build_whatsapp_link()."""

    def test_link_decodes_to_message(self, details: OrderDetails):
        link = build_whatsapp_link(details, phone="351961281939")

        prefix = "https://wa.me/351961281939?text="
        assert link.startswith(prefix)
        encoded = link[len(prefix):]
        assert unquote(encoded) == format_order_message(details)

    def test_encoding_matches_uri_component(self, details: OrderDetails):
        encoded = build_whatsapp_link(details, phone="1").split("?text=", 1)[1]

        assert " " not in encoded
        assert "&" not in encoded
        assert "%0A" in encoded
        assert "%20" in encoded
        assert "(x2)" in encoded


class TestOrderId:
    """Tests for order identifiers."""

    def test_suffix_is_last_four_clock_digits(self):
        assert generate_order_id(now_ms=1767225604821) == "BOT-4821"

    def test_short_clock_is_zero_padded(self):
        assert generate_order_id(now_ms=42) == "BOT-0042"

    def test_default_clock(self):
        assert re.fullmatch(r"BOT-\d{4}", generate_order_id())

    def test_display(self):
        assert display_order_id("BOT-4821") == "#BOT-4821"
        assert display_order_id("#BOT-4821") == "#BOT-4821"
