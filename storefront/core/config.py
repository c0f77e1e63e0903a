"""Storefront Configuration"""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    # Application
    app_name: str = "Storefront"
    debug: bool = True
    environment: str = "development"
    host: str = "0.0.0.0"
    port: int = 8000

    # Catalog/account backend
    backend_base_url: str = "http://localhost:8001"
    backend_api_token: Optional[str] = None
    backend_timeout: float = 30.0

    # Checkout notification channel exposed to signed-in clients
    notifier_url: str = "ws://localhost:8001/socket"

    # Session cookie
    jwt_secret: str = Field(default="change-me-in-config-env-with-a-random-value", min_length=4)
    session_cookie_name: str = "__session"

    # Where a placed order sends the shopper
    checkout_redirect: str = "/cart"

    class Config:
        env_file = "config/.env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
