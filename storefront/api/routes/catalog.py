"""Public catalog endpoints: active products and categories."""

from fastapi import APIRouter, HTTPException, status

from storefront.api.deps import Catalog
from storefront.schemas.catalog import Category, Product

router = APIRouter()


@router.get("/products", response_model=list[Product])
async def list_products(catalog: Catalog) -> list[Product]:
    """Active products, newest first."""
    return await catalog.list_products(active_only=True)


@router.get("/products/{product_id}", response_model=Product)
async def get_product(product_id: str, catalog: Catalog) -> Product:
    product = await catalog.get_product(product_id)
    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return product


@router.get("/categories", response_model=list[Category])
async def list_categories(catalog: Catalog) -> list[Category]:
    """Active categories in display order."""
    return await catalog.list_categories(active_only=True)
