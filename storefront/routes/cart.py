"""Cart routes: display prices and order placement"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import RedirectResponse

from ..core.config import settings
from ..core.deps import get_optional_user, get_order_reconciler, get_price_cache, get_session_issuer
from ..core.forms import reply_with_errors
from ..core.session import SessionIssuer
from ..models.backend import AuthenticatedUser
from ..services.price_cache import PriceSnapshotCache
from ..services.reconciler import OrderReconciler

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cart", tags=["Cart"])


@router.get("/prices")
async def get_prices(
    document_ids: Optional[list[str]] = Query(None, alias="documentId"),
    category: Optional[str] = Query(None),
    cache: PriceSnapshotCache = Depends(get_price_cache),
):
    """
    Display snapshots for the cart.

    These prices are for rendering only; orders are always repriced from the
    catalog when placed.
    """
    snapshots = await cache.load(product_ids=document_ids, category=category)
    return {"data": [s.model_dump(mode="json", by_alias=True) for s in snapshots]}


@router.post("")
async def place_order(
    payload: Any = Body(None),
    user: Optional[AuthenticatedUser] = Depends(get_optional_user),
    reconciler: OrderReconciler = Depends(get_order_reconciler),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    """
    Place an order from the cart form.

    Guests who just got an account are signed in on the way out.
    """
    result = await reconciler.submit(payload, user)
    if not result.ok:
        return reply_with_errors(payload, result.errors)

    purchaser = result.purchaser
    if purchaser.session_token and user is None:
        return issuer.create_user_session(purchaser.session_token, redirect_to=settings.checkout_redirect)

    return RedirectResponse(url=settings.checkout_redirect, status_code=303)
