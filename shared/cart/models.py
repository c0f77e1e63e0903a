"""Cart Data Models"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class PriceSnapshot(BaseModel):
    """Display-only product data cached from the catalog"""
    product_id: str = Field(alias="documentId")
    unit_price: Decimal = Field(alias="price", ge=0)
    display_name: str = Field(alias="name")
    image_ref: Optional[str] = Field(default=None, alias="image")

    class Config:
        populate_by_name = True
        frozen = True


class CartLine(BaseModel):
    """One product in the shopper's cart"""
    product_id: str = Field(alias="documentId", min_length=1)
    quantity: int = Field(ge=1)
    # Captured at first add, never refreshed afterwards
    unit_price: Decimal = Field(alias="pricePerItem", ge=0)

    class Config:
        populate_by_name = True

    @property
    def total_price(self) -> Decimal:
        return self.unit_price * self.quantity


class PricedLine(BaseModel):
    """Cart line with its extended price and display details"""
    product_id: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    display_name: Optional[str] = None
    image_ref: Optional[str] = None


class CalculatedPrice(BaseModel):
    """Derived cart totals"""
    products: list[PricedLine] = []
    total_price: Decimal = Decimal("0")
