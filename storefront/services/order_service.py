"""Order Service - checkout orders, status lifecycle and the admin dashboard."""

from datetime import datetime

from storefront.core.order_id import generate_order_id
from storefront.infra.logging import get_logger
from storefront.infra.table_store import RemoteTableStore
from storefront.schemas.common import utc_now
from storefront.schemas.dashboard import DashboardStats, MonthlySales, SalesUpdate
from storefront.schemas.order import Order, OrderCreate, OrderStatus, OrderStatusUpdate, cart_total
from storefront.services.errors import EntityExistsError, InvalidStatusTransition

logger = get_logger(__name__)

ORDERS_TABLE = "orders"
PRODUCTS_TABLE = "products"
SALES_TABLE = "monthly_sales"

# Month names as the store writes them (pt-PT, lower-case)
MONTH_NAMES = (
    "janeiro",
    "fevereiro",
    "março",
    "abril",
    "maio",
    "junho",
    "julho",
    "agosto",
    "setembro",
    "outubro",
    "novembro",
    "dezembro",
)


def month_name(moment: datetime) -> str:
    return MONTH_NAMES[moment.month - 1]


class OrderService:
    """Order and dashboard operations backing the HTTP API."""

    def __init__(self, store: RemoteTableStore) -> None:
        self.store = store

    async def create_order(self, request: OrderCreate) -> Order:
        """Store a checkout order as pending; the total is computed from the items.

        Raises:
            EntityExistsError: If the order id is already taken
        """
        order_id = request.id or generate_order_id()
        if await self.store.get(ORDERS_TABLE, order_id) is not None:
            raise EntityExistsError(f"Order {order_id} already exists")

        now = utc_now()
        order = Order(
            id=order_id,
            items=request.items,
            customer=request.customer,
            payment_method=request.payment_method,
            status=OrderStatus.PENDING,
            total_amount=cart_total(request.items),
            notes=request.notes,
            created_at=now,
            updated_at=now,
        )
        await self.store.insert(ORDERS_TABLE, order.to_row())
        logger.info(
            "Order created",
            order_id=order.id,
            items=len(order.items),
            total=str(order.total_amount),
            payment_method=order.payment_method.value,
        )
        return order

    async def list_orders(self) -> list[Order]:
        rows = await self.store.select(ORDERS_TABLE, order_by="created_at", descending=True)
        return [Order.from_row(row) for row in rows]

    async def get_order(self, order_id: str) -> Order | None:
        row = await self.store.get(ORDERS_TABLE, order_id)
        return Order.from_row(row) if row is not None else None

    async def update_status(self, order_id: str, update: OrderStatusUpdate) -> Order | None:
        """Advance an order's status and/or change its notes.

        Returns:
            The updated order, or None if it does not exist

        Raises:
            InvalidStatusTransition: If the lifecycle forbids the new status
        """
        order = await self.get_order(order_id)
        if order is None:
            return None

        values: dict = {"updated_at": utc_now()}
        if update.status is not None:
            if not order.status.can_transition_to(update.status):
                raise InvalidStatusTransition(order_id, order.status.value, update.status.value)
            values["status"] = update.status.value
        if "notes" in update.model_fields_set:
            values["notes"] = update.notes

        row = await self.store.update(ORDERS_TABLE, order_id, values)
        if row is None:
            return None

        logger.info(
            "Order updated",
            order_id=order_id,
            previous_status=order.status.value,
            status=values.get("status", order.status.value),
        )
        return Order.from_row(row)

    # =========================================================================
    # Dashboard
    # =========================================================================

    async def _sales_row(self, month: str, year: int) -> dict | None:
        rows = await self.store.select(SALES_TABLE, filters={"month": month, "year": year})
        return rows[0] if rows else None

    async def dashboard_stats(self, now: datetime | None = None) -> DashboardStats:
        now = now or utc_now()
        month, year = month_name(now), now.year

        row = await self._sales_row(month, year)
        sales = MonthlySales.model_validate(row) if row else MonthlySales(month=month, year=year)

        return DashboardStats(
            monthly_sales=sales,
            pending_orders=await self.store.count(ORDERS_TABLE, {"status": OrderStatus.PENDING.value}),
            total_orders=await self.store.count(ORDERS_TABLE),
            total_products=await self.store.count(PRODUCTS_TABLE),
            active_products=await self.store.count(PRODUCTS_TABLE, {"is_active": True}),
        )

    async def update_monthly_sales(self, update: SalesUpdate, now: datetime | None = None) -> MonthlySales:
        """Set the current month's sales figure, creating the month if needed."""
        now = now or utc_now()
        month, year = month_name(now), now.year

        row = await self._sales_row(month, year)
        if row is None:
            row = await self.store.insert(
                SALES_TABLE,
                {"month": month, "year": year, "amount": update.amount, "notes": update.notes},
            )
        else:
            row = await self.store.update(
                SALES_TABLE, row["id"], {"amount": update.amount, "notes": update.notes}
            ) or row

        logger.info("Monthly sales updated", month=month, year=year, amount=str(update.amount))
        return MonthlySales.model_validate(row)
