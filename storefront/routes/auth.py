"""Sign-in, registration and password recovery"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import RedirectResponse

from ..core.deps import get_backend_client, get_optional_user, get_session_issuer
from ..core.forms import parse_submission, reply_with_errors
from ..core.session import SessionIssuer, safe_redirect
from ..models.auth import ForgotPasswordForm, LoginForm, RegisterForm, ResetPasswordForm
from ..models.backend import AuthenticatedUser
from ..services.backend_client import BackendClient, BackendError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])

RESET_SENT = "If you have an account in our database, we have sent you an email."


@router.post("/signin")
async def signin(
    payload: Any = Body(None),
    redirect_to: Optional[str] = Query(None, alias="redirectTo"),
    backend: BackendClient = Depends(get_backend_client),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    """Sign in with email and password"""
    form, errors = parse_submission(LoginForm, payload)
    if errors:
        return reply_with_errors(payload, errors)

    if not await backend.user_exists(form.email):
        errors.add("email", "User does not exist.")
        return reply_with_errors(payload, errors)

    if not await backend.compare_password(form.email, form.password):
        errors.add("password", "Your password is not valid.")
        return reply_with_errors(payload, errors)

    token = await backend.login(identifier=form.email, password=form.password)
    return issuer.create_user_session(token.jwt, redirect_to=safe_redirect(redirect_to))


@router.post("/register")
async def register(
    payload: Any = Body(None),
    backend: BackendClient = Depends(get_backend_client),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    """Create an account and sign in"""
    form, errors = parse_submission(RegisterForm, payload)
    if errors:
        return reply_with_errors(payload, errors)

    if await backend.user_exists(form.email):
        errors.add("email", "User already exists")
        return reply_with_errors(payload, errors)

    try:
        token = await backend.register_user(
            username=form.username,
            email=form.email,
            password=form.password,
        )
    except BackendError as e:
        if e.status_code != 400:
            raise
        errors.add("email", "User already exists")
        return reply_with_errors(payload, errors)

    logger.info(f"Registered account for {form.email}")
    return issuer.create_user_session(token.jwt)


@router.post("/logout")
async def logout(
    redirect_to: Optional[str] = Query(None, alias="redirectTo"),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    """Drop the session"""
    return issuer.logout(redirect_to=safe_redirect(redirect_to))


@router.post("/forgot-password")
async def forgot_password(
    payload: Any = Body(None),
    user: Optional[AuthenticatedUser] = Depends(get_optional_user),
    backend: BackendClient = Depends(get_backend_client),
):
    """
    Ask the backend to send a reset code.

    The answer is the same whether or not the email has an account.
    """
    if user is not None:
        return RedirectResponse(url="/", status_code=303)

    form, errors = parse_submission(ForgotPasswordForm, payload)
    if errors:
        return reply_with_errors(payload, errors)

    await backend.forgot_password(form.email)
    return {"status": "success", "message": RESET_SENT}


@router.post("/reset-password")
async def reset_password(
    payload: Any = Body(None),
    code: Optional[str] = Query(None),
    user: Optional[AuthenticatedUser] = Depends(get_optional_user),
    backend: BackendClient = Depends(get_backend_client),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    """Set a new password with the emailed code and sign in"""
    if user is not None or not code:
        return RedirectResponse(url="/", status_code=303)

    submission = {**payload, "code": code} if isinstance(payload, dict) else payload
    form, errors = parse_submission(ResetPasswordForm, submission)
    if errors:
        return reply_with_errors(payload, errors)

    if form.password != form.password_confirmation:
        errors.add("passwordConfirmation", "Passwords do not match")
        return reply_with_errors(payload, errors)

    try:
        token = await backend.reset_password(
            code=form.code,
            password=form.password,
            password_confirmation=form.password_confirmation,
        )
    except BackendError as e:
        if e.status_code != 400:
            raise
        errors.add("code", e.detail)
        return reply_with_errors(payload, errors)

    return issuer.create_user_session(token.jwt)
