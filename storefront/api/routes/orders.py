"""Checkout order submission."""

from fastapi import APIRouter, status

from storefront.api.deps import Orders
from storefront.schemas.order import Order, OrderCreate

router = APIRouter()


@router.post(
    "/orders",
    response_model=Order,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a checkout order",
)
async def create_order(request: OrderCreate, orders: Orders) -> Order:
    """Store the order as pending. The total is computed from the items."""
    return await orders.create_order(request)
