# Request authentication

from .auth import (
    create_user_token,
    resolve_user_token,
    require_api_token,
    require_user,
)

__all__ = ["create_user_token", "resolve_user_token", "require_api_token", "require_user"]
