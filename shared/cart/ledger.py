"""
Cart Ledger

The shopper's record of what they intend to buy. Quantities and the unit
price seen at first add are persisted through a key-value adapter; totals
are always derived from the lines and never stored.
"""

import json
import logging
from decimal import Decimal
from typing import Callable, Iterable, Optional

from pydantic import ValidationError

from .models import CartLine, PriceSnapshot, PricedLine, CalculatedPrice
from .storage import KeyValueStorage

logger = logging.getLogger(__name__)

Listener = Callable[[CalculatedPrice], None]


class CartLedger:
    """
    Client-owned cart persisted as a quantity ledger.

    Usage:
        ledger = CartLedger(JsonFileStorage("~/.storefront/cart.json"))
        ledger.add_to_cart(snapshot)
        ledger.calculated_price.total_price
    """

    DEFAULT_KEY = "cart"

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = DEFAULT_KEY,
        snapshots: Optional[Iterable[PriceSnapshot]] = None,
    ):
        self._storage = storage
        self._key = key
        self._listeners: list[Listener] = []
        self._snapshots: dict[str, PriceSnapshot] = {
            s.product_id: s for s in snapshots or []
        }
        self._lines: list[CartLine] = self._load()

    # ==================== Reads ====================

    @property
    def lines(self) -> list[CartLine]:
        """Copies of the current lines, in insertion order"""
        return [line.model_copy() for line in self._lines]

    @property
    def snapshots(self) -> list[PriceSnapshot]:
        return list(self._snapshots.values())

    def quantity_of(self, product_id: str) -> int:
        line = self._find(product_id)
        return line.quantity if line else 0

    def is_empty(self) -> bool:
        return not self._lines

    @property
    def calculated_price(self) -> CalculatedPrice:
        """Per-line extended prices and their sum, recomputed on every read"""
        products = []
        for line in self._lines:
            snapshot = self._snapshots.get(line.product_id)
            products.append(
                PricedLine(
                    product_id=line.product_id,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    total_price=line.total_price,
                    display_name=snapshot.display_name if snapshot else None,
                    image_ref=snapshot.image_ref if snapshot else None,
                )
            )
        total = sum((p.total_price for p in products), Decimal("0"))
        return CalculatedPrice(products=products, total_price=total)

    def submission_products(self) -> list[dict]:
        """Product list in the shape the cart submission endpoint expects"""
        return [
            {"documentId": line.product_id, "quantity": line.quantity}
            for line in self._lines
        ]

    # ==================== Mutations ====================

    def add_to_cart(self, snapshot: PriceSnapshot) -> None:
        """Add one unit; an existing line keeps its original unit price"""
        existing = self._find(snapshot.product_id)
        if existing:
            existing.quantity += 1
        else:
            self._lines.append(
                CartLine(
                    product_id=snapshot.product_id,
                    quantity=1,
                    unit_price=snapshot.unit_price,
                )
            )
        self._commit()

    def remove_from_cart(self, snapshot: PriceSnapshot) -> None:
        """Remove one unit; the last unit deletes the line"""
        existing = self._find(snapshot.product_id)
        if existing and existing.quantity > 1:
            existing.quantity -= 1
        else:
            self._lines = [
                line for line in self._lines if line.product_id != snapshot.product_id
            ]
        self._commit()

    def clear_cart(self) -> None:
        self._lines = []
        self._commit()

    def update_snapshots(self, snapshots: Iterable[PriceSnapshot]) -> None:
        """Replace the display snapshots wholesale"""
        self._snapshots = {s.product_id: s for s in snapshots}
        self._notify()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Call listener with fresh totals after every change.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ==================== Persistence ====================

    def _find(self, product_id: str) -> Optional[CartLine]:
        return next(
            (line for line in self._lines if line.product_id == product_id),
            None,
        )

    def _load(self) -> list[CartLine]:
        raw = self._storage.get(self._key)
        if raw is None:
            return []

        try:
            items = json.loads(raw)
            loaded = [CartLine.model_validate(item) for item in items]
        except (ValueError, TypeError, ValidationError) as e:
            logger.warning(f"Discarding unreadable cart under '{self._key}': {e}")
            return []

        # Collapse duplicate product ids into a single line
        lines: list[CartLine] = []
        for line in loaded:
            existing = next((l for l in lines if l.product_id == line.product_id), None)
            if existing:
                existing.quantity += line.quantity
            else:
                lines.append(line)
        return lines

    def _save(self) -> None:
        payload = [line.model_dump(mode="json", by_alias=True) for line in self._lines]
        self._storage.set(self._key, json.dumps(payload))

    def _commit(self) -> None:
        self._save()
        self._notify()

    def _notify(self) -> None:
        if not self._listeners:
            return
        price = self.calculated_price
        for listener in list(self._listeners):
            listener(price)
