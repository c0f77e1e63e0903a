"""
Purchaser resolution

Decides who owns an order: the signed-in shopper, or a guest account created
just in time from the email on the cart form.
"""

import logging
import secrets
from dataclasses import dataclass
from typing import Callable, Optional, Union

from ..core.errors import DuplicateAccountError, MissingPurchaserError
from ..core.forms import FieldErrors
from ..models.backend import AuthenticatedUser
from ..models.orders import LoggedInOrderForm, LoggedOutOrderForm
from .backend_client import BackendClient, BackendError

logger = logging.getLogger(__name__)

LOGIN_REQUIRED = "Please log in before placing your order"
ACCOUNT_EXISTS = "User already exists. Please log in to order with this email."


def generate_password() -> str:
    """Opaque password for guest accounts; never shown to anyone"""
    return secrets.token_urlsafe(24)


@dataclass
class ResolvedPurchaser:
    """Who the order belongs to"""
    email: str
    session_token: Optional[str] = None
    is_new_account: bool = False


class IdentityResolver:
    """Resolves the purchaser of a cart submission"""

    def __init__(
        self,
        backend: BackendClient,
        password_factory: Callable[[], str] = generate_password,
    ):
        self.backend = backend
        self.password_factory = password_factory

    async def validate(
        self,
        form: Union[LoggedInOrderForm, LoggedOutOrderForm],
        user: Optional[AuthenticatedUser],
    ) -> FieldErrors:
        errors = FieldErrors()

        if isinstance(form, LoggedInOrderForm):
            if user is None:
                errors.add("email", LOGIN_REQUIRED)
            return errors

        if await self.backend.user_exists(form.email):
            errors.add("email", ACCOUNT_EXISTS)
        return errors

    async def resolve(
        self,
        form: Union[LoggedInOrderForm, LoggedOutOrderForm],
        user: Optional[AuthenticatedUser],
    ) -> ResolvedPurchaser:
        """
        Resolve the purchaser.

        Signed-in shoppers are used as they are. Guests get an account with
        username equal to their email and a generated password; the backend
        token from registration becomes their session.

        Raises:
            MissingPurchaserError: A signed-in form arrived without a user
            DuplicateAccountError: The backend refused the guest's email
        """
        if isinstance(form, LoggedInOrderForm):
            if user is None:
                raise MissingPurchaserError("Signed-in order submitted without a session")
            return ResolvedPurchaser(email=user.email)

        email = str(form.email)
        try:
            token = await self.backend.register_user(
                username=email,
                email=email,
                password=self.password_factory(),
            )
        except BackendError as e:
            if e.status_code == 400:
                raise DuplicateAccountError(email) from e
            raise

        logger.info(f"Created guest account for {email}")
        return ResolvedPurchaser(email=email, session_token=token.jwt, is_new_account=True)
