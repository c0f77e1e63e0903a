"""Account and authentication models for the mock backend"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import BackendModel


class User(BackendModel):
    """Registered account"""
    id: int
    document_id: str
    username: str
    email: str
    created_at: datetime
    password_hash: str = Field(exclude=True)
    reset_code: Optional[str] = Field(default=None, exclude=True)


class UserLookup(BackendModel):
    """Projection returned by the account search"""
    document_id: str
    email: str


class RegisterRequest(BackendModel):
    username: str = Field(min_length=1)
    email: str = Field(min_length=3)
    password: str = Field(min_length=1)


class LoginRequest(BackendModel):
    identifier: str
    password: str


class AuthResponse(BackendModel):
    jwt: str
    user: User


class ComparePasswordsRequest(BackendModel):
    current_password: str
    email: str


class ComparePasswordsResponse(BackendModel):
    is_password_valid: bool


class ForgotPasswordRequest(BackendModel):
    email: str


class ResetPasswordRequest(BackendModel):
    code: str
    password: str
    password_confirmation: str


class ChangePasswordRequest(BackendModel):
    current_password: str
    password: str
    password_confirmation: str


class UpdateUserRequest(BackendModel):
    username: str = Field(min_length=1)
