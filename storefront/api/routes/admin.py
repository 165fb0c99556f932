"""Admin endpoints: login, dashboard, catalog management and orders.

Everything except login requires a bearer token (401 when missing, 403 when
invalid or expired).
"""

from fastapi import APIRouter, HTTPException, Response, status

from storefront.api.deps import Catalog, CurrentAdmin, LoginRateLimit, Orders, Tokens
from storefront.infra.logging import get_logger
from storefront.schemas.auth import LoginRequest, LoginResponse
from storefront.schemas.catalog import (
    Category,
    CategoryCreateRequest,
    CategoryUpdate,
    Product,
    ProductCreateRequest,
    ProductUpdate,
)
from storefront.schemas.dashboard import DashboardStats, MonthlySales, SalesUpdate
from storefront.schemas.order import Order, OrderStatusUpdate
from storefront.services.auth import authenticate

router = APIRouter()
logger = get_logger(__name__)


def _not_found(entity: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{entity} not found")


# =============================================================================
# Authentication and dashboard
# =============================================================================


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest, tokens: Tokens, _: LoginRateLimit) -> LoginResponse:
    if not request.username or not request.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username and password required",
        )

    user = authenticate(request.username, request.password)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    logger.info("Admin logged in", username=user.username)
    return LoginResponse(token=tokens.issue(user), user=user)


@router.get("/dashboard", response_model=DashboardStats)
async def dashboard(orders: Orders, _: CurrentAdmin) -> DashboardStats:
    return await orders.dashboard_stats()


@router.put("/sales", response_model=MonthlySales)
async def update_sales(update: SalesUpdate, orders: Orders, _: CurrentAdmin) -> MonthlySales:
    """Set the current month's sales figure."""
    return await orders.update_monthly_sales(update)


# =============================================================================
# Products
# =============================================================================


@router.get("/products", response_model=list[Product])
async def list_products(catalog: Catalog, _: CurrentAdmin) -> list[Product]:
    """All products, inactive ones included."""
    return await catalog.list_products()


@router.post("/products", response_model=Product, status_code=status.HTTP_201_CREATED)
async def create_product(request: ProductCreateRequest, catalog: Catalog, _: CurrentAdmin) -> Product:
    return await catalog.create_product(request)


@router.put("/products/{product_id}", response_model=Product)
async def update_product(
    product_id: str,
    changes: ProductUpdate,
    catalog: Catalog,
    _: CurrentAdmin,
) -> Product:
    product = await catalog.update_product(product_id, changes)
    if product is None:
        raise _not_found("Product")
    return product


@router.delete("/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(product_id: str, catalog: Catalog, _: CurrentAdmin) -> Response:
    if not await catalog.delete_product(product_id):
        raise _not_found("Product")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/products/{product_id}/feature", response_model=Product)
async def feature_product(product_id: str, catalog: Catalog, _: CurrentAdmin) -> Product:
    """Make this the only featured product."""
    product = await catalog.set_featured_product(product_id)
    if product is None:
        raise _not_found("Product")
    return product


# =============================================================================
# Categories
# =============================================================================


@router.get("/categories", response_model=list[Category])
async def list_categories(catalog: Catalog, _: CurrentAdmin) -> list[Category]:
    return await catalog.list_categories()


@router.post("/categories", response_model=Category, status_code=status.HTTP_201_CREATED)
async def create_category(
    request: CategoryCreateRequest,
    catalog: Catalog,
    _: CurrentAdmin,
) -> Category:
    return await catalog.create_category(request)


@router.put("/categories/{category_id}", response_model=Category)
async def update_category(
    category_id: str,
    changes: CategoryUpdate,
    catalog: Catalog,
    _: CurrentAdmin,
) -> Category:
    category = await catalog.update_category(category_id, changes)
    if category is None:
        raise _not_found("Category")
    return category


@router.delete("/categories/{category_id}")
async def delete_category(category_id: str, catalog: Catalog, _: CurrentAdmin) -> dict:
    """Delete a category (409 while active products reference it)."""
    if not await catalog.delete_category(category_id):
        raise _not_found("Category")
    return {"success": True}


# =============================================================================
# Orders
# =============================================================================


@router.get("/orders", response_model=list[Order])
async def list_orders(orders: Orders, _: CurrentAdmin) -> list[Order]:
    """All orders, newest first."""
    return await orders.list_orders()


@router.get("/orders/{order_id}", response_model=Order)
async def get_order(order_id: str, orders: Orders, _: CurrentAdmin) -> Order:
    order = await orders.get_order(order_id)
    if order is None:
        raise _not_found("Order")
    return order


@router.patch("/orders/{order_id}", response_model=Order)
@router.patch("/orders/{order_id}/status", response_model=Order)
async def update_order_status(
    order_id: str,
    update: OrderStatusUpdate,
    orders: Orders,
    _: CurrentAdmin,
) -> Order:
    """Advance the order status (409 on a transition the lifecycle forbids)."""
    order = await orders.update_status(order_id, update)
    if order is None:
        raise _not_found("Order")
    return order
