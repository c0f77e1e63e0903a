"""Session cookie carrying the shopper's backend user token"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Request
from fastapi.responses import RedirectResponse

from .config import settings

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
TOKEN_KEY = "backend_user_token"


def safe_redirect(target: Optional[str], default: str = "/") -> str:
    """Only same-site relative paths are followed"""
    if not target or not target.startswith("/") or target.startswith("//"):
        return default
    if "\\" in target:
        return default
    return target


class SessionIssuer:
    """
    Issues, reads and clears the session cookie.

    The cookie value is an HS256 token whose only claim of interest is the
    backend user token. A missing, expired or tampered cookie reads as an
    empty session.
    """

    def __init__(
        self,
        secret: str,
        cookie_name: str = "__session",
        secure: bool = False,
        max_age_days: int = 30,
    ):
        self.secret = secret
        self.cookie_name = cookie_name
        self.secure = secure
        self.max_age = timedelta(days=max_age_days)

    def read_session(self, request: Request) -> dict:
        raw = request.cookies.get(self.cookie_name)
        if not raw:
            return {}
        try:
            return jwt.decode(raw, self.secret, algorithms=[ALGORITHM])
        except jwt.PyJWTError as e:
            logger.info(f"Ignoring unreadable session cookie: {e}")
            return {}

    def get_user_token(self, request: Request) -> Optional[str]:
        token = self.read_session(request).get(TOKEN_KEY)
        return token if isinstance(token, str) and token else None

    def encode(self, user_token: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {TOKEN_KEY: user_token, "iat": now, "exp": now + self.max_age}
        return jwt.encode(payload, self.secret, algorithm=ALGORITHM)

    def create_user_session(self, user_token: str, redirect_to: str = "/") -> RedirectResponse:
        """Redirect with a fresh session cookie"""
        response = RedirectResponse(url=safe_redirect(redirect_to), status_code=303)
        response.set_cookie(
            key=self.cookie_name,
            value=self.encode(user_token),
            max_age=int(self.max_age.total_seconds()),
            path="/",
            httponly=True,
            samesite="lax",
            secure=self.secure,
        )
        return response

    def logout(self, redirect_to: str = "/") -> RedirectResponse:
        """Redirect and drop the session cookie"""
        response = RedirectResponse(url=safe_redirect(redirect_to), status_code=303)
        response.delete_cookie(
            key=self.cookie_name,
            path="/",
            httponly=True,
            samesite="lax",
            secure=self.secure,
        )
        return response


# Singleton instance
session_issuer = SessionIssuer(
    secret=settings.jwt_secret,
    cookie_name=settings.session_cookie_name,
    secure=settings.is_production,
)
