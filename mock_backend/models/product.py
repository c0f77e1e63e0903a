"""Product models for the mock backend"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import BackendModel


class ProductImage(BackendModel):
    url: str
    alternative_text: Optional[str] = None
    width: int = 800
    height: int = 800


class Product(BackendModel):
    """Product in the catalog"""
    id: int
    document_id: str
    name: str
    description: str
    price: float = Field(ge=0)
    slug: str
    image: ProductImage
    categories: list[str] = []
    published_at: datetime


class Category(BackendModel):
    name: str


class ProductListResponse(BackendModel):
    data: list[Product]


class ProductResponse(BackendModel):
    data: Product


class CategoryListResponse(BackendModel):
    data: list[Category]
