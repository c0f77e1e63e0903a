"""Signed-in shopper: session, profile and order history"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException

from ..core.config import settings
from ..core.deps import get_backend_client, get_optional_user, get_session_issuer, require_user
from ..core.forms import parse_submission, reply_with_errors
from ..core.session import SessionIssuer
from ..models.auth import ChangePasswordForm, ChangeUsernameForm
from ..models.backend import AuthenticatedUser
from ..services.backend_client import BackendClient, BackendError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Account"])


def _public_user(user: AuthenticatedUser) -> dict:
    return user.model_dump(mode="json", by_alias=True, exclude={"token"})


@router.get("/session")
async def get_session(user: Optional[AuthenticatedUser] = Depends(get_optional_user)):
    """
    Current shopper, plus what the client needs to open the checkout channel.

    Anonymous shoppers get no channel.
    """
    if user is None:
        return {"user": None, "notifier": None}

    return {
        "user": _public_user(user),
        "notifier": {"url": settings.notifier_url, "token": user.token},
    }


@router.get("/profile")
async def get_profile(user: AuthenticatedUser = Depends(require_user)):
    return {"data": _public_user(user)}


@router.post("/profile/username")
async def change_username(
    payload: Any = Body(None),
    user: AuthenticatedUser = Depends(require_user),
    backend: BackendClient = Depends(get_backend_client),
):
    """Change the shopper's username"""
    form, errors = parse_submission(ChangeUsernameForm, payload)
    if errors:
        return reply_with_errors(payload, errors)

    try:
        updated = await backend.update_username(user.id, form.username)
    except BackendError as e:
        if e.status_code != 400:
            raise
        errors.add("username", e.detail)
        return reply_with_errors(payload, errors)

    return {
        "status": "success",
        "message": "You have successfully changed your username !",
        "data": updated.model_dump(mode="json", by_alias=True),
    }


@router.post("/profile/password")
async def change_password(
    payload: Any = Body(None),
    user: AuthenticatedUser = Depends(require_user),
    backend: BackendClient = Depends(get_backend_client),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    """
    Change the shopper's password.

    The backend answers with a new user token, which replaces the session.
    """
    form, errors = parse_submission(ChangePasswordForm, payload)
    if errors:
        return reply_with_errors(payload, errors)

    if form.password != form.password_confirmation:
        errors.add("passwordConfirmation", "Passwords do not match")
    elif not await backend.compare_password(user.email, form.current_password):
        errors.add("currentPassword", "Current password is invalid.")
    elif form.password == form.current_password:
        errors.add("password", "Your new password should not be equal to your old password")
    if errors:
        return reply_with_errors(payload, errors)

    token = await backend.change_password(
        token=user.token,
        current_password=form.current_password,
        password=form.password,
        password_confirmation=form.password_confirmation,
    )
    return issuer.create_user_session(token.jwt, redirect_to="/profile")


@router.get("/orders")
async def list_orders(
    user: AuthenticatedUser = Depends(require_user),
    backend: BackendClient = Depends(get_backend_client),
):
    """Order history, newest first"""
    orders = await backend.get_orders_for_user(user.document_id)
    return {"data": [o.model_dump(mode="json", by_alias=True) for o in orders]}


@router.get("/orders/{document_id}")
async def get_order(
    document_id: str,
    user: AuthenticatedUser = Depends(require_user),
    backend: BackendClient = Depends(get_backend_client),
):
    """Order detail; other shoppers' orders do not exist as far as this route is concerned"""
    try:
        order = await backend.get_order(document_id)
    except BackendError as e:
        if e.status_code == 404:
            raise HTTPException(status_code=404, detail="Order not found")
        raise

    if order.user.document_id != user.document_id:
        logger.warning(f"User {user.document_id} requested order {document_id} they do not own")
        raise HTTPException(status_code=404, detail="Order not found")

    return {"data": order.model_dump(mode="json", by_alias=True)}
