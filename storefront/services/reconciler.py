"""
Order Reconciler

Turns a cart submission into an order. Submitted quantities are merged with
authoritative catalog prices; whatever prices the client displayed are never
consulted.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Optional

from ..core.errors import DuplicateAccountError, MissingPurchaserError, UnknownProductError
from ..core.forms import FieldErrors, parse_submission
from ..models.backend import AuthenticatedUser, OrderHandle, ProductRecord
from ..models.orders import order_form_adapter
from .backend_client import BackendClient
from .identity import ACCOUNT_EXISTS, IdentityResolver, ResolvedPurchaser

logger = logging.getLogger(__name__)

ORDER_STATUSES = ("logged-in", "logged-out")


@dataclass
class OrderLineDraft:
    """Line priced from the catalog, not yet persisted"""
    product: ProductRecord
    quantity: int

    @property
    def unit_price(self) -> Decimal:
        return self.product.price

    @property
    def extended_price(self) -> Decimal:
        return self.product.price * self.quantity


@dataclass
class ReconciliationResult:
    """Outcome of a submission: either field errors or a placed order"""
    errors: FieldErrors = field(default_factory=FieldErrors)
    order: Optional[OrderHandle] = None
    purchaser: Optional[ResolvedPurchaser] = None
    total_price: Optional[Decimal] = None

    @property
    def ok(self) -> bool:
        return self.order is not None


class OrderReconciler:
    """Validates, reprices and persists cart submissions"""

    def __init__(self, backend: BackendClient, identity: IdentityResolver):
        self.backend = backend
        self.identity = identity

    async def submit(
        self,
        payload: Any,
        user: Optional[AuthenticatedUser],
    ) -> ReconciliationResult:
        """
        Place an order from a cart submission.

        Validation failures come back as field errors with nothing changed.
        Integrity and backend failures are raised after compensation.
        """
        form, errors = parse_submission(order_form_adapter, payload, tags=ORDER_STATUSES)
        if errors:
            return ReconciliationResult(errors=errors)

        errors = await self.identity.validate(form, user)
        if errors:
            return ReconciliationResult(errors=errors)

        drafts = await self.price_lines(form.products)

        try:
            purchaser = await self.identity.resolve(form, user)
        except DuplicateAccountError:
            errors = FieldErrors()
            errors.add("email", ACCOUNT_EXISTS)
            return ReconciliationResult(errors=errors)

        order, total = await self.persist(purchaser, drafts)
        return ReconciliationResult(order=order, purchaser=purchaser, total_price=total)

    async def price_lines(self, products: list) -> list[OrderLineDraft]:
        """
        Merge submitted quantities with catalog prices.

        Raises:
            UnknownProductError: Any submitted id is missing from the catalog
        """
        requested = list(dict.fromkeys(p.document_id for p in products))
        catalog = {
            record.document_id: record
            for record in await self.backend.get_products(document_ids=requested)
        }

        missing = [document_id for document_id in requested if document_id not in catalog]
        if missing:
            logger.error(f"Rejecting order with unknown products: {missing}")
            raise UnknownProductError(missing)

        return [OrderLineDraft(product=catalog[p.document_id], quantity=p.quantity) for p in products]

    async def persist(
        self,
        purchaser: ResolvedPurchaser,
        drafts: list[OrderLineDraft],
    ) -> tuple[OrderHandle, Decimal]:
        """
        Create the line items, then the order that references them.

        Line items created before a failure are deleted again, newest first.
        """
        account = await self.backend.find_user(purchaser.email)
        if account is None:
            raise MissingPurchaserError("This account does not exist")

        created: list[int] = []
        try:
            for draft in drafts:
                line = await self.backend.create_order_line(
                    product_id=draft.product.id,
                    quantity=draft.quantity,
                    price=draft.extended_price,
                )
                created.append(line.id)

            total = sum((draft.extended_price for draft in drafts), Decimal("0"))
            order = await self.backend.create_order(
                user_document_id=account.document_id,
                line_ids=created,
                total_price=total,
            )
        except Exception as e:
            logger.error(f"Order creation failed after {len(created)} line(s): {e}")
            await self._compensate(created)
            raise

        logger.info(f"Order {order.document_id} placed for {account.document_id}: {total}")
        return order, total

    async def _compensate(self, line_ids: list[int]) -> None:
        orphaned = []
        for line_id in reversed(line_ids):
            try:
                await self.backend.delete_order_line(line_id)
            except Exception as e:
                logger.error(f"Could not delete order line {line_id}: {e}")
                orphaned.append(line_id)

        if orphaned:
            logger.error(f"Orphaned order lines left in backend: {orphaned}")
