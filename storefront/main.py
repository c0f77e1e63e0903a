"""
Storefront Application

Catalog browsing, accounts and cart checkout in front of the catalog backend.
"""

import os
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from .core.config import settings
from .core.deps import close_backend_client
from .routes import cart_router, auth_router, account_router, catalog_router

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
    logger.info("Storefront starting up...")
    logger.info(f"Backend URL: {settings.backend_base_url}")
    logger.info(f"Checkout channel: {settings.notifier_url}")

    yield

    logger.info("Storefront shutting down...")
    await close_backend_client()


# Create FastAPI app
app = FastAPI(
    title="Storefront",
    description="Storefront with cart-to-order reconciliation",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[] if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(catalog_router)
app.include_router(cart_router)
app.include_router(auth_router)
app.include_router(account_router)


@app.get("/")
async def home():
    """Storefront index"""
    return {
        "message": "Storefront API",
        "docs": "/docs",
        "endpoints": {
            "products": "/products",
            "cart": "/cart",
            "session": "/session",
            "orders": "/orders",
        },
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "storefront",
        "backend_configured": bool(settings.backend_base_url),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "storefront.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
