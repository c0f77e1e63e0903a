"""
Backend request authentication

Service calls from the storefront carry the shared API token; shopper
calls carry a user token issued at login or registration.
"""

import hmac
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Header, HTTPException

from ..config import settings
from ..database.users import user_db
from ..models.user import User

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


def create_user_token(user: User) -> str:
    """Issue a signed user token"""
    payload = {
        "id": user.id,
        "iat": datetime.now(timezone.utc),
        "exp": datetime.now(timezone.utc) + timedelta(days=settings.user_token_expire_days),
    }
    return jwt.encode(payload, settings.backend_jwt_secret, algorithm=ALGORITHM)


def resolve_user_token(token: Optional[str]) -> Optional[User]:
    """Return the user a token belongs to, or None if it is invalid"""
    if not token:
        return None
    try:
        payload = jwt.decode(token, settings.backend_jwt_secret, algorithms=[ALGORITHM])
    except jwt.PyJWTError as e:
        logger.debug(f"Rejected user token: {e}")
        return None
    return user_db.get_user(payload.get("id"))


def _bearer(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, value = authorization.partition(" ")
    if scheme.lower() != "bearer" or not value:
        return None
    return value.strip()


class ApiTokenDependency:
    """
    FastAPI dependency checking the storefront's service token.

    When no token is configured the check is skipped, so the backend can
    run standalone in development.
    """

    async def __call__(self, authorization: Optional[str] = Header(None)) -> None:
        expected = settings.backend_api_token
        if not expected:
            return

        presented = _bearer(authorization)
        if not presented or not hmac.compare_digest(presented, expected):
            logger.warning("Rejected request with missing or invalid API token")
            raise HTTPException(status_code=401, detail="Invalid API token")


class UserTokenDependency:
    """FastAPI dependency resolving the shopper behind a user token"""

    async def __call__(self, authorization: Optional[str] = Header(None)) -> User:
        user = resolve_user_token(_bearer(authorization))
        if not user:
            raise HTTPException(status_code=401, detail="Invalid user token")
        return user


# Dependency instances
require_api_token = ApiTokenDependency()
require_user = UserTokenDependency()
