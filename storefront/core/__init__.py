# Core modules

from .config import settings
from .session import SessionIssuer, session_issuer

__all__ = ["settings", "SessionIssuer", "session_issuer"]
