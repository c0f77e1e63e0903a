# Storefront Models

from .backend import (
    ProductRecord,
    CategoryRecord,
    AccountRecord,
    UserRecord,
    AuthenticatedUser,
    AuthToken,
    OrderLineRecord,
    OrderHandle,
    OrderDetail,
    OrderSummary,
)
from .orders import OrderProduct, LoggedInOrderForm, LoggedOutOrderForm, OrderForm, order_form_adapter
from .auth import (
    LoginForm,
    RegisterForm,
    ForgotPasswordForm,
    ResetPasswordForm,
    ChangePasswordForm,
    ChangeUsernameForm,
)

__all__ = [
    "ProductRecord",
    "CategoryRecord",
    "AccountRecord",
    "UserRecord",
    "AuthenticatedUser",
    "AuthToken",
    "OrderLineRecord",
    "OrderHandle",
    "OrderDetail",
    "OrderSummary",
    "OrderProduct",
    "LoggedInOrderForm",
    "LoggedOutOrderForm",
    "OrderForm",
    "order_form_adapter",
    "LoginForm",
    "RegisterForm",
    "ForgotPasswordForm",
    "ResetPasswordForm",
    "ChangePasswordForm",
    "ChangeUsernameForm",
]
