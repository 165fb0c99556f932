"""Tests for catalog and order schemas."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from storefront.schemas.catalog import Category, Product, slugify
from storefront.schemas.order import CustomerData, OrderStatus, PaymentMethod


class TestCatalogSchemas:
    """Tests for product and category models."""

    def test_slugify(self):
        assert slugify("  Cuidados de   Pele ") == "cuidados-de-pele"

    def test_product_camel_case_json(self):
        product = Product.model_validate(
            {"id": "a", "name": "Malbec", "price": 18.9, "categoryId": "perfumes-homem", "inStock": False}
        )

        data = product.to_json_dict()
        assert data["categoryId"] == "perfumes-homem"
        assert data["inStock"] is False
        assert data["availability"] == "pronta-entrega"
        assert isinstance(data["price"], float)

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            Product(id="a", name="X", price=Decimal("-1"), category_id="c")

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            Product(id="a", name="   ", price=Decimal("1"), category_id="c")

    def test_category_row_uses_sort_order(self):
        category = Category(id="c", name="Cabelos", slug="cabelos", order=5)

        row = category.to_row()
        assert row["sort_order"] == 5
        assert "order" not in row
        assert Category.from_row(row).order == 5


class TestOrderSchemas:
    """Tests for customer data, payment methods and the status lifecycle."""

    def test_customer_required_fields(self):
        with pytest.raises(ValidationError):
            CustomerData.model_validate(
                {
                    "firstName": "Ana",
                    "lastName": "",
                    "address": "Rua",
                    "locality": "Porto",
                    "district": "Porto",
                    "postalCode": "4000-123",
                    "phone": "912345678",
                    "email": "ana@example.pt",
                }
            )

    def test_payment_labels(self):
        assert PaymentMethod("mbway").label == "MB WAY"
        assert PaymentMethod.WIRE_TRANSFER.label == "Transferência"

    @pytest.mark.parametrize(
        ("current", "target", "allowed"),
        [
            (OrderStatus.PENDING, OrderStatus.CONFIRMED, True),
            (OrderStatus.PENDING, OrderStatus.CANCELLED, True),
            (OrderStatus.CONFIRMED, OrderStatus.SHIPPED, True),
            (OrderStatus.SHIPPED, OrderStatus.DELIVERED, True),
            (OrderStatus.SHIPPED, OrderStatus.CANCELLED, False),
            (OrderStatus.PENDING, OrderStatus.SHIPPED, False),
            (OrderStatus.DELIVERED, OrderStatus.PENDING, False),
            (OrderStatus.CANCELLED, OrderStatus.CONFIRMED, False),
        ],
    )
    def test_transitions(self, current: OrderStatus, target: OrderStatus, allowed: bool):
        assert current.can_transition_to(target) is allowed

    def test_terminal_statuses(self):
        assert OrderStatus.DELIVERED.is_terminal
        assert OrderStatus.CANCELLED.is_terminal
        assert not OrderStatus.SHIPPED.is_terminal
