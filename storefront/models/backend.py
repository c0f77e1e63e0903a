"""Records returned by the catalog/account backend"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from shared.cart.models import PriceSnapshot


class BackendRecord(BaseModel):
    """camelCase on the wire, unknown fields ignored"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ProductImage(BackendRecord):
    url: str
    alternative_text: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None


class ProductRecord(BackendRecord):
    """Authoritative product data"""
    id: int
    document_id: str
    name: str
    description: str
    price: Decimal
    slug: str
    image: ProductImage

    def to_snapshot(self) -> PriceSnapshot:
        return PriceSnapshot(
            product_id=self.document_id,
            unit_price=self.price,
            display_name=self.name,
            image_ref=self.image.url,
        )


class CategoryRecord(BackendRecord):
    name: str


class AccountRecord(BackendRecord):
    """Result of an account search by email"""
    document_id: str
    email: str


class UserRecord(BackendRecord):
    id: int
    document_id: str
    email: str
    username: str


class AuthenticatedUser(UserRecord):
    """User resolved from the session, with the backend token it was resolved from"""
    token: str


class AuthToken(BackendRecord):
    jwt: str


class OrderLineRecord(BackendRecord):
    id: int
    price: Decimal


class OrderHandle(BackendRecord):
    id: int
    document_id: str


class OrderLineDetail(BackendRecord):
    product: ProductRecord
    quantity: int
    price: Decimal


class OrderOwner(BackendRecord):
    document_id: str


class OrderDetail(BackendRecord):
    id: int
    document_id: str
    lines: list[OrderLineDetail]
    total_price: Decimal
    order_status: str
    created_at: datetime
    user: OrderOwner


class OrderSummary(BackendRecord):
    id: int
    document_id: str
    total_price: Decimal
    order_status: str
    created_at: datetime
