"""Mock Backend Configuration"""

from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Backend settings loaded from environment"""

    # Application
    app_name: str = "Mock Catalog Backend"
    debug: bool = True
    host: str = "0.0.0.0"
    port: int = 8001

    # Service token the storefront must present; unset disables the check
    backend_api_token: Optional[str] = None

    # Signing secret for user tokens
    backend_jwt_secret: str = "mock-backend-development-signing-secret"
    user_token_expire_days: int = 30

    # Where checkout notifications send the shopper
    storefront_base_url: str = "http://localhost:8000"

    # Complete new orders immediately (stands in for payment confirmation)
    auto_complete_orders: bool = True

    class Config:
        env_file = "config/.env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
