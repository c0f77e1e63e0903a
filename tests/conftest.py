"""Shared fixtures: a fresh in-process backend and a storefront wired to it."""

import asyncio

import httpx
import pytest
from fastapi.testclient import TestClient

from mock_backend.config import settings as backend_settings
from mock_backend.database import order_db, product_db, user_db
from mock_backend.main import app as backend_app
from storefront.core.deps import get_backend_client
from storefront.main import app as storefront_app
from storefront.services.backend_client import BackendClient


@pytest.fixture(autouse=True)
def reset_backend():
    product_db.reset()
    user_db.reset()
    order_db.reset()
    yield


@pytest.fixture()
def backend():
    """Storefront backend client talking to the mock backend in-process"""
    client = BackendClient(
        base_url="http://backend",
        api_token=backend_settings.backend_api_token,
        transport=httpx.ASGITransport(app=backend_app),
    )
    yield client
    asyncio.run(client.close())


@pytest.fixture()
def storefront_factory(backend):
    storefront_app.dependency_overrides[get_backend_client] = lambda: backend

    def make(**kwargs):
        kwargs.setdefault("follow_redirects", False)
        return TestClient(storefront_app, **kwargs)

    yield make
    storefront_app.dependency_overrides.clear()


@pytest.fixture()
def storefront(storefront_factory):
    return storefront_factory()


@pytest.fixture()
def backend_api():
    headers = {}
    if backend_settings.backend_api_token:
        headers["Authorization"] = f"Bearer {backend_settings.backend_api_token}"
    return TestClient(backend_app, headers=headers)
