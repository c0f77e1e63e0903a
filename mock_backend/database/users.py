"""Account storage for the mock backend"""

import hashlib
import hmac
import secrets
import uuid
from datetime import datetime
from typing import Optional

from ..models.user import User


class DuplicateUserError(Exception):
    """Email or username already registered"""
    pass


def hash_password(password: str, salt: Optional[str] = None) -> str:
    """PBKDF2-SHA256 hash in the form `salt$hex`"""
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), 100_000)
    return f"{salt}${digest.hex()}"


def check_password(password: str, password_hash: str) -> bool:
    salt, _, _ = password_hash.partition("$")
    return hmac.compare_digest(hash_password(password, salt), password_hash)


class UserDatabase:
    """In-memory account storage"""

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self.users: dict[int, User] = {}
        self._next_id = 1

    def create_user(self, username: str, email: str, password: str) -> User:
        """
        Register an account.

        The uniqueness check and the insert run without yielding to the
        event loop, so concurrent registrations for one email cannot both
        succeed.

        Raises:
            DuplicateUserError: email or username already taken
        """
        if self.find_by_email(email) or self.find_by_username(username):
            raise DuplicateUserError("Email or Username are already taken")

        user = User(
            id=self._next_id,
            document_id=uuid.uuid4().hex[:24],
            username=username,
            email=email.lower(),
            created_at=datetime.utcnow(),
            password_hash=hash_password(password),
        )
        self.users[user.id] = user
        self._next_id += 1
        return user

    def get_user(self, user_id: int) -> Optional[User]:
        return self.users.get(user_id)

    def get_by_document_id(self, document_id: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.document_id == document_id), None)

    def find_by_email(self, email: str) -> Optional[User]:
        email_lower = email.lower()
        return next((u for u in self.users.values() if u.email == email_lower), None)

    def find_by_username(self, username: str) -> Optional[User]:
        username_lower = username.lower()
        return next(
            (u for u in self.users.values() if u.username.lower() == username_lower),
            None,
        )

    def authenticate(self, identifier: str, password: str) -> Optional[User]:
        """Match by email or username, then check the password"""
        user = self.find_by_email(identifier) or self.find_by_username(identifier)
        if user and check_password(password, user.password_hash):
            return user
        return None

    def set_password(self, user: User, password: str) -> None:
        user.password_hash = hash_password(password)
        user.reset_code = None

    def issue_reset_code(self, user: User) -> str:
        user.reset_code = secrets.token_urlsafe(32)
        return user.reset_code

    def find_by_reset_code(self, code: str) -> Optional[User]:
        return next(
            (u for u in self.users.values() if u.reset_code and hmac.compare_digest(u.reset_code, code)),
            None,
        )

    def update_username(self, user: User, username: str) -> User:
        other = self.find_by_username(username)
        if other and other.id != user.id:
            raise DuplicateUserError("Username already taken")
        user.username = username
        return user


# Singleton instance
user_db = UserDatabase()
