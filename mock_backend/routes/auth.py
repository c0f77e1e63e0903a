"""Authentication API routes for the mock backend"""

import logging
from fastapi import APIRouter, HTTPException, Depends

from ..models.user import (
    User,
    RegisterRequest,
    LoginRequest,
    AuthResponse,
    ComparePasswordsRequest,
    ComparePasswordsResponse,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    ChangePasswordRequest,
)
from ..database.users import user_db, check_password, DuplicateUserError
from ..security.auth import create_user_token, require_api_token, require_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/local/register", response_model=AuthResponse)
async def register(
    request: RegisterRequest,
    _: None = Depends(require_api_token),
):
    """Create an account and log it in"""
    try:
        user = user_db.create_user(
            username=request.username,
            email=request.email,
            password=request.password,
        )
    except DuplicateUserError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"Registered user {user.document_id}")
    return AuthResponse(jwt=create_user_token(user), user=user)


@router.post("/local", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    _: None = Depends(require_api_token),
):
    """Log in with email or username"""
    user = user_db.authenticate(request.identifier, request.password)
    if not user:
        raise HTTPException(status_code=400, detail="Invalid identifier or password")
    return AuthResponse(jwt=create_user_token(user), user=user)


@router.post("/compare-passwords", response_model=ComparePasswordsResponse)
async def compare_passwords(
    request: ComparePasswordsRequest,
    _: None = Depends(require_api_token),
):
    """Check a password against an account without logging in"""
    user = user_db.find_by_email(request.email)
    is_valid = bool(user and check_password(request.current_password, user.password_hash))
    return ComparePasswordsResponse(is_password_valid=is_valid)


@router.post("/forgot-password")
async def forgot_password(
    request: ForgotPasswordRequest,
    _: None = Depends(require_api_token),
):
    """
    Start a password reset.

    The reset code would normally be emailed; the mock backend logs it.
    The response is the same whether or not the account exists.
    """
    user = user_db.find_by_email(request.email)
    if user:
        code = user_db.issue_reset_code(user)
        logger.info(f"Password reset code for {user.email}: {code}")
    return {"ok": True}


@router.post("/reset-password", response_model=AuthResponse)
async def reset_password(
    request: ResetPasswordRequest,
    _: None = Depends(require_api_token),
):
    """Set a new password using a reset code"""
    if request.password != request.password_confirmation:
        raise HTTPException(status_code=400, detail="Passwords do not match")

    user = user_db.find_by_reset_code(request.code)
    if not user:
        raise HTTPException(status_code=400, detail="Incorrect code provided")

    user_db.set_password(user, request.password)
    return AuthResponse(jwt=create_user_token(user), user=user)


@router.post("/change-password", response_model=AuthResponse)
async def change_password(
    request: ChangePasswordRequest,
    user: User = Depends(require_user),
):
    """Change the password of the token's owner"""
    if not check_password(request.current_password, user.password_hash):
        raise HTTPException(status_code=400, detail="The provided current password is invalid")
    if request.password != request.password_confirmation:
        raise HTTPException(status_code=400, detail="Passwords do not match")

    user_db.set_password(user, request.password)
    return AuthResponse(jwt=create_user_token(user), user=user)
