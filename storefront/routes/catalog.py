"""Catalog browsing"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..core.deps import get_backend_client
from ..services.backend_client import BackendClient, BackendError

router = APIRouter(tags=["Catalog"])


@router.get("/products")
async def list_products(
    category: Optional[str] = Query(None, description="Filter by category name"),
    backend: BackendClient = Depends(get_backend_client),
):
    products = await backend.get_products(category=category)
    return {"data": [p.model_dump(mode="json", by_alias=True) for p in products]}


@router.get("/products/{slug}")
async def get_product(slug: str, backend: BackendClient = Depends(get_backend_client)):
    try:
        product = await backend.get_product_by_slug(slug)
    except BackendError as e:
        if e.status_code == 404:
            raise HTTPException(status_code=404, detail="Product not found")
        raise
    return {"data": product.model_dump(mode="json", by_alias=True)}


@router.get("/categories")
async def list_categories(backend: BackendClient = Depends(get_backend_client)):
    categories = await backend.get_categories()
    return {"data": [c.name for c in categories]}
