"""Catalog API routes for the mock backend"""

from typing import Optional
from fastapi import APIRouter, HTTPException, Query, Depends

from ..models.product import (
    ProductListResponse,
    ProductResponse,
    CategoryListResponse,
)
from ..database.products import product_db
from ..security.auth import require_api_token

router = APIRouter(prefix="/api", tags=["Catalog"], dependencies=[Depends(require_api_token)])


@router.get("/products", response_model=ProductListResponse)
async def list_products(
    document_ids: Optional[list[str]] = Query(
        None, alias="documentId", description="Restrict to these document ids"
    ),
    category: Optional[str] = Query(None, description="Filter by category name"),
):
    """
    List catalog products.

    Repeating `documentId` performs a single batched lookup; ids that do not
    exist are simply absent from the result.
    """
    products = product_db.find_products(document_ids=document_ids, category=category)
    return ProductListResponse(data=products)


@router.get("/products/{slug}", response_model=ProductResponse)
async def get_product(slug: str):
    """Get a product by slug"""
    product = product_db.get_by_slug(slug)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return ProductResponse(data=product)


@router.get("/categories", response_model=CategoryListResponse)
async def list_categories():
    """List all product categories"""
    return CategoryListResponse(data=product_db.list_categories())
