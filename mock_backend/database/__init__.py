# Database modules

from .products import product_db, ProductDatabase
from .users import user_db, UserDatabase, DuplicateUserError
from .orders import order_db, OrderDatabase

__all__ = [
    "product_db",
    "ProductDatabase",
    "user_db",
    "UserDatabase",
    "DuplicateUserError",
    "order_db",
    "OrderDatabase",
]
