"""Tests for the public catalog and checkout endpoints."""

import pytest
from httpx import AsyncClient

from storefront.core.categories import default_categories
from tests.fakes import FakeTableStore, make_product


@pytest.fixture
def order_body() -> dict:
    return {
        "items": [
            {"product": {"id": "a", "name": "Malbec Gold", "price": 10}, "quantity": 2},
            {"product": {"id": "b", "name": "Coffee Woman", "price": 5.5}, "quantity": 1},
        ],
        "customer": {
            "firstName": "Ana",
            "lastName": "Silva",
            "address": "Rua das Flores 10",
            "locality": "Porto",
            "district": "Porto",
            "postalCode": "4000-123",
            "phone": "912345678",
            "email": "ana@example.pt",
        },
        "paymentMethod": "multibanco",
    }


class TestCatalogEndpoints:
    """Tests for public product and category routes."""

    @pytest.mark.asyncio
    async def test_products_active_only(self, client: AsyncClient, table_store: FakeTableStore):
        await table_store.insert("products", make_product("a").to_row())
        await table_store.insert("products", make_product("b", is_active=False).to_row())

        response = await client.get("/api/products")

        assert response.status_code == 200
        data = response.json()
        assert [p["id"] for p in data] == ["a"]
        assert data[0]["categoryId"] == "perfumes-mulher"
        assert data[0]["price"] == 10.0

    @pytest.mark.asyncio
    async def test_product_not_found(self, client: AsyncClient):
        response = await client.get("/api/products/missing")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_categories_in_order(self, client: AsyncClient, table_store: FakeTableStore):
        for category in reversed(default_categories()):
            await table_store.insert("categories", category.to_row())

        response = await client.get("/api/categories")

        assert [c["order"] for c in response.json()] == [1, 2, 3, 4, 5]


class TestOrderSubmission:
    """Tests for POST /api/orders."""

    @pytest.mark.asyncio
    async def test_create_order(self, client: AsyncClient, order_body: dict, table_store: FakeTableStore):
        order_body["id"] = "BOT-4821"
        order_body["totalAmount"] = 1

        response = await client.post("/api/orders", json=order_body)

        assert response.status_code == 201
        data = response.json()
        assert data["id"] == "BOT-4821"
        assert data["status"] == "pending"
        assert data["totalAmount"] == 25.5
        assert "BOT-4821" in table_store.tables["orders"]

    @pytest.mark.asyncio
    async def test_duplicate_order_conflict(self, client: AsyncClient, order_body: dict):
        order_body["id"] = "BOT-4821"
        await client.post("/api/orders", json=order_body)

        response = await client.post("/api/orders", json=order_body)

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_empty_order_rejected(self, client: AsyncClient, order_body: dict):
        order_body["items"] = []

        response = await client.post("/api/orders", json=order_body)

        assert response.status_code == 400
        assert isinstance(response.json()["detail"], list)

    @pytest.mark.asyncio
    async def test_missing_customer_field_rejected(self, client: AsyncClient, order_body: dict):
        del order_body["customer"]["email"]

        response = await client.post("/api/orders", json=order_body)

        assert response.status_code == 400
