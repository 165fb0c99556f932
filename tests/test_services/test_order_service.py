"""Tests for the server-side order service."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from storefront.schemas.dashboard import SalesUpdate
from storefront.schemas.order import OrderCreate, OrderStatus, OrderStatusUpdate
from storefront.services.errors import EntityExistsError, InvalidStatusTransition
from storefront.services.order_service import OrderService, month_name
from tests.fakes import FakeTableStore, make_product

MARCH = datetime(2026, 3, 15, tzinfo=timezone.utc)


@pytest.fixture
def service(table_store: FakeTableStore) -> OrderService:
    return OrderService(table_store)


def order_request(order_id: str | None = "BOT-1234") -> OrderCreate:
    return OrderCreate.model_validate(
        {
            "id": order_id,
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
            "paymentMethod": "transferencia",
        }
    )


class TestOrders:
    """Tests for order creation and status changes."""

    @pytest.mark.asyncio
    async def test_create_computes_total(self, service: OrderService, table_store: FakeTableStore):
        order = await service.create_order(order_request())

        assert order.id == "BOT-1234"
        assert order.status == OrderStatus.PENDING
        assert order.total_amount == Decimal("25.5")
        assert table_store.tables["orders"]["BOT-1234"]["customer"]["firstName"] == "Ana"

    @pytest.mark.asyncio
    async def test_create_generates_id(self, service: OrderService):
        order = await service.create_order(order_request(order_id=None))

        assert order.id.startswith("BOT-")

    @pytest.mark.asyncio
    async def test_duplicate_id(self, service: OrderService):
        await service.create_order(order_request())

        with pytest.raises(EntityExistsError):
            await service.create_order(order_request())

    @pytest.mark.asyncio
    async def test_stored_order_reads_back(self, service: OrderService):
        await service.create_order(order_request())

        order = await service.get_order("BOT-1234")

        assert order.items[0].product.name == "Malbec Gold"
        assert order.customer.postal_code == "4000-123"
        assert [o.id for o in await service.list_orders()] == ["BOT-1234"]

    @pytest.mark.asyncio
    async def test_status_lifecycle(self, service: OrderService):
        await service.create_order(order_request())

        for status in (OrderStatus.CONFIRMED, OrderStatus.SHIPPED, OrderStatus.DELIVERED):
            order = await service.update_status("BOT-1234", OrderStatusUpdate(status=status))
            assert order.status == status

    @pytest.mark.asyncio
    async def test_illegal_transition(self, service: OrderService):
        await service.create_order(order_request())

        with pytest.raises(InvalidStatusTransition):
            await service.update_status("BOT-1234", OrderStatusUpdate(status=OrderStatus.DELIVERED))

    @pytest.mark.asyncio
    async def test_terminal_order_accepts_notes_only(self, service: OrderService):
        await service.create_order(order_request())
        await service.update_status("BOT-1234", OrderStatusUpdate(status=OrderStatus.CANCELLED))

        order = await service.update_status("BOT-1234", OrderStatusUpdate(notes="Cliente desistiu"))
        assert order.notes == "Cliente desistiu"
        assert order.status == OrderStatus.CANCELLED

        with pytest.raises(InvalidStatusTransition):
            await service.update_status("BOT-1234", OrderStatusUpdate(status=OrderStatus.PENDING))

    @pytest.mark.asyncio
    async def test_update_missing_order(self, service: OrderService):
        assert await service.update_status("BOT-0000", OrderStatusUpdate(notes="x")) is None


class TestDashboard:
    """Tests for dashboard statistics and monthly sales."""

    def test_month_name(self):
        assert month_name(MARCH) == "março"

    @pytest.mark.asyncio
    async def test_stats(self, service: OrderService, table_store: FakeTableStore):
        await table_store.insert("products", make_product("a").to_row())
        await table_store.insert("products", make_product("b", is_active=False).to_row())
        await service.create_order(order_request("BOT-0001"))
        await service.create_order(order_request("BOT-0002"))
        await service.update_status("BOT-0002", OrderStatusUpdate(status=OrderStatus.CONFIRMED))

        stats = await service.dashboard_stats(now=MARCH)

        assert stats.pending_orders == 1
        assert stats.total_orders == 2
        assert stats.total_products == 2
        assert stats.active_products == 1
        assert stats.monthly_sales.month == "março"
        assert stats.monthly_sales.amount == Decimal("0")

    @pytest.mark.asyncio
    async def test_update_monthly_sales_upserts(self, service: OrderService, table_store: FakeTableStore):
        await service.update_monthly_sales(SalesUpdate(amount=Decimal("1250")), now=MARCH)
        sales = await service.update_monthly_sales(
            SalesUpdate(amount=Decimal("1500"), notes="Bom mês"),
            now=MARCH,
        )

        assert sales.amount == Decimal("1500")
        assert sales.notes == "Bom mês"
        assert len(table_store.tables["monthly_sales"]) == 1

        stats = await service.dashboard_stats(now=MARCH)
        assert stats.monthly_sales.amount == Decimal("1500")
