"""
Mock Catalog Backend

Stands in for the storefront's catalog and account backend: products,
accounts, order lines, orders and the checkout push channel.
"""

import os
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from .config import settings
from .realtime.hub import checkout_hub
from .routes import (
    products_router,
    auth_router,
    users_router,
    orders_router,
    socket_router,
)

# Load environment variables
load_dotenv(os.path.join(os.path.dirname(__file__), "..", "config", ".env"))

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Mock backend starting up...")
    logger.info(f"API token check: {'enabled' if settings.backend_api_token else 'disabled'}")
    logger.info(f"Auto-complete orders: {settings.auto_complete_orders}")
    yield
    logger.info("Mock backend shutting down...")
    await checkout_hub.disconnect_all()


# Create FastAPI app
app = FastAPI(
    title="Mock Catalog Backend",
    description="Catalog, account and order backend for storefront development",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.storefront_base_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(products_router)
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(orders_router)
app.include_router(socket_router)


@app.get("/")
async def home():
    """Backend index"""
    return {
        "message": "Mock Catalog Backend API",
        "docs": "/docs",
        "endpoints": {
            "products": "/api/products",
            "users": "/api/users",
            "auth": "/api/auth",
            "orders": "/api/orders",
            "socket": "/socket",
        },
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "mock-backend"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "mock_backend.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
