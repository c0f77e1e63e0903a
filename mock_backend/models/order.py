"""Order models for the mock backend"""

from datetime import datetime
from enum import Enum

from pydantic import Field

from .base import BackendModel
from .product import Product


class OrderStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class OrderLine(BackendModel):
    """Persisted order line; price is the extended price"""
    id: int
    product: int
    quantity: int
    price: float


class OrderLineInput(BackendModel):
    product: int
    quantity: int
    price: float


class OrderLineEnvelope(BackendModel):
    data: OrderLineInput


class OrderLineResponse(BackendModel):
    data: OrderLine


class Order(BackendModel):
    """Order header referencing its lines"""
    id: int
    document_id: str
    user: str
    lines: list[int]
    total_price: float
    order_status: OrderStatus = OrderStatus.PENDING
    created_at: datetime
    updated_at: datetime


class OrderInput(BackendModel):
    user: str
    lines: list[int] = Field(min_length=1)
    total_price: float


class OrderEnvelope(BackendModel):
    data: OrderInput


class OrderHandle(BackendModel):
    id: int
    document_id: str


class OrderHandleResponse(BackendModel):
    data: OrderHandle


class OrderLineDetail(BackendModel):
    product: Product
    quantity: int
    price: float


class OrderOwner(BackendModel):
    document_id: str


class OrderDetail(BackendModel):
    """Order with its lines and products expanded"""
    id: int
    document_id: str
    lines: list[OrderLineDetail]
    total_price: float
    order_status: OrderStatus
    created_at: datetime
    user: OrderOwner


class OrderDetailResponse(BackendModel):
    data: OrderDetail


class OrderSummary(BackendModel):
    id: int
    document_id: str
    total_price: float
    order_status: OrderStatus
    created_at: datetime


class OrderSummaryListResponse(BackendModel):
    data: list[OrderSummary]
