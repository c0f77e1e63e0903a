# Mock Backend Models

from .base import BackendModel
from .product import (
    Product,
    ProductImage,
    Category,
    ProductListResponse,
    ProductResponse,
    CategoryListResponse,
)
from .user import (
    User,
    UserLookup,
    RegisterRequest,
    LoginRequest,
    AuthResponse,
    ComparePasswordsRequest,
    ComparePasswordsResponse,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    ChangePasswordRequest,
    UpdateUserRequest,
)
from .order import (
    Order,
    OrderLine,
    OrderStatus,
    OrderLineEnvelope,
    OrderLineResponse,
    OrderEnvelope,
    OrderHandle,
    OrderHandleResponse,
    OrderDetail,
    OrderDetailResponse,
    OrderSummary,
    OrderSummaryListResponse,
)

__all__ = [
    "BackendModel",
    "Product",
    "ProductImage",
    "Category",
    "ProductListResponse",
    "ProductResponse",
    "CategoryListResponse",
    "User",
    "UserLookup",
    "RegisterRequest",
    "LoginRequest",
    "AuthResponse",
    "ComparePasswordsRequest",
    "ComparePasswordsResponse",
    "ForgotPasswordRequest",
    "ResetPasswordRequest",
    "ChangePasswordRequest",
    "UpdateUserRequest",
    "Order",
    "OrderLine",
    "OrderStatus",
    "OrderLineEnvelope",
    "OrderLineResponse",
    "OrderEnvelope",
    "OrderHandle",
    "OrderHandleResponse",
    "OrderDetail",
    "OrderDetailResponse",
    "OrderSummary",
    "OrderSummaryListResponse",
]
