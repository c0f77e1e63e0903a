# Cart Ledger
# Client-held quantity ledger with pluggable key-value persistence

from .ledger import CartLedger
from .models import CartLine, PriceSnapshot, PricedLine, CalculatedPrice
from .storage import KeyValueStorage, InMemoryStorage, JsonFileStorage

__all__ = [
    "CartLedger",
    "CartLine",
    "PriceSnapshot",
    "PricedLine",
    "CalculatedPrice",
    "KeyValueStorage",
    "InMemoryStorage",
    "JsonFileStorage",
]
