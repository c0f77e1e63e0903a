"""Display price snapshots fetched from the catalog"""

import logging
from typing import Optional

from shared.cart.models import PriceSnapshot

from .backend_client import BackendClient

logger = logging.getLogger(__name__)


class PriceSnapshotCache:
    """
    Read-only price snapshots for display.

    Each load replaces the whole set; nothing here is used to price an order.
    """

    def __init__(self, backend: BackendClient):
        self.backend = backend
        self._snapshots: dict[str, PriceSnapshot] = {}

    async def load(
        self,
        product_ids: Optional[list[str]] = None,
        category: Optional[str] = None,
    ) -> list[PriceSnapshot]:
        """Fetch snapshots in one catalog call and replace the cached set"""
        products = await self.backend.get_products(document_ids=product_ids, category=category)
        self._snapshots = {p.document_id: p.to_snapshot() for p in products}
        logger.debug(f"Loaded {len(self._snapshots)} price snapshots")
        return self.snapshots

    def get(self, product_id: str) -> Optional[PriceSnapshot]:
        return self._snapshots.get(product_id)

    @property
    def snapshots(self) -> list[PriceSnapshot]:
        return list(self._snapshots.values())
