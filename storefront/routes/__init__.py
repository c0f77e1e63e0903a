# Storefront Routes

from .cart import router as cart_router
from .auth import router as auth_router
from .account import router as account_router
from .catalog import router as catalog_router

__all__ = ["cart_router", "auth_router", "account_router", "catalog_router"]
