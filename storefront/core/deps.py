"""FastAPI dependencies shared by the storefront routes"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request

from ..models.backend import AuthenticatedUser
from ..services.backend_client import BackendClient, BackendError
from ..services.identity import IdentityResolver
from ..services.price_cache import PriceSnapshotCache
from ..services.reconciler import OrderReconciler
from .config import settings
from .session import SessionIssuer, session_issuer

logger = logging.getLogger(__name__)

backend_client = BackendClient(
    base_url=settings.backend_base_url,
    api_token=settings.backend_api_token,
    timeout=settings.backend_timeout,
)


def get_backend_client() -> BackendClient:
    return backend_client


def get_session_issuer() -> SessionIssuer:
    return session_issuer


def get_price_cache(backend: BackendClient = Depends(get_backend_client)) -> PriceSnapshotCache:
    return PriceSnapshotCache(backend)


def get_identity_resolver(backend: BackendClient = Depends(get_backend_client)) -> IdentityResolver:
    return IdentityResolver(backend)


def get_order_reconciler(
    backend: BackendClient = Depends(get_backend_client),
    identity: IdentityResolver = Depends(get_identity_resolver),
) -> OrderReconciler:
    return OrderReconciler(backend, identity)


async def get_user(
    request: Request,
    issuer: SessionIssuer,
    backend: BackendClient,
) -> Optional[AuthenticatedUser]:
    """
    Resolve the shopper behind the session cookie.

    A token the backend no longer accepts means nobody is signed in.
    """
    token = issuer.get_user_token(request)
    if not token:
        return None

    try:
        user = await backend.get_me(token)
    except BackendError as e:
        if e.status_code in (401, 403):
            logger.info(f"Backend rejected session token: {e.status_code}")
            return None
        raise

    return AuthenticatedUser(**user.model_dump(), token=token)


async def get_optional_user(
    request: Request,
    issuer: SessionIssuer = Depends(get_session_issuer),
    backend: BackendClient = Depends(get_backend_client),
) -> Optional[AuthenticatedUser]:
    return await get_user(request, issuer, backend)


async def require_user(
    user: Optional[AuthenticatedUser] = Depends(get_optional_user),
) -> AuthenticatedUser:
    """Signed-in shopper, or a redirect to the sign-in page"""
    if user is None:
        raise HTTPException(status_code=303, headers={"Location": "/signin"})
    return user


async def close_backend_client() -> None:
    await backend_client.close()
