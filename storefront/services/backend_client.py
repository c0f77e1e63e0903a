"""
Backend API Client

HTTP client for the catalog/account backend. Service calls carry the
storefront's API token; calls made on a shopper's behalf carry their user token.
"""

import logging
from decimal import Decimal
from typing import Any, Optional

import httpx

from ..core.errors import StorefrontError
from ..models.backend import (
    AccountRecord,
    AuthToken,
    CategoryRecord,
    OrderDetail,
    OrderHandle,
    OrderLineRecord,
    OrderSummary,
    ProductRecord,
    UserRecord,
)

logger = logging.getLogger(__name__)


class BackendError(StorefrontError):
    """Non-2xx response from the backend"""

    def __init__(self, status_code: int, detail: str):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Backend returned {status_code}: {detail}")


class BackendClient:
    """
    Client for the catalog/account backend.

    Content bodies are wrapped as {"data": {...}}; auth bodies are sent bare.
    """

    def __init__(
        self,
        base_url: str,
        api_token: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize backend client.

        Args:
            base_url: Base URL of the backend
            api_token: Service token sent on every call not made with a user token
            timeout: Request timeout in seconds
            transport: Alternative httpx transport (in-process apps in tests)
        """
        self.base_url = base_url.rstrip("/")
        self._api_token = api_token
        self._http_client = httpx.AsyncClient(timeout=timeout, transport=transport)

        if not api_token:
            logger.warning("No backend API token configured - service calls are unauthenticated")

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    def _headers(self, token: Optional[str] = None) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        bearer = token or self._api_token
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Any] = None,
        body: Optional[dict] = None,
        token: Optional[str] = None,
    ) -> Any:
        """Make an HTTP request and return the decoded JSON body"""
        url = f"{self.base_url}{path}"

        response = await self._http_client.request(
            method=method,
            url=url,
            params=params,
            json=body,
            headers=self._headers(token),
        )

        if response.status_code >= 400:
            logger.error(f"Request failed: {method} {path} {response.status_code} - {response.text}")
            raise BackendError(response.status_code, _error_detail(response))

        if not response.content:
            return None
        return response.json()

    # ==================== Catalog APIs ====================

    async def get_products(
        self,
        document_ids: Optional[list[str]] = None,
        category: Optional[str] = None,
    ) -> list[ProductRecord]:
        """
        Fetch products in a single call.

        Ids missing from the catalog are absent from the result.
        """
        if document_ids is not None and not document_ids:
            return []

        params = [("documentId", document_id) for document_id in document_ids or []]
        if category:
            params.append(("category", category))

        payload = await self._request("GET", "/api/products", params=params)
        return [ProductRecord.model_validate(item) for item in payload["data"]]

    async def get_product_by_slug(self, slug: str) -> ProductRecord:
        payload = await self._request("GET", f"/api/products/{slug}")
        return ProductRecord.model_validate(payload["data"])

    async def get_categories(self) -> list[CategoryRecord]:
        payload = await self._request("GET", "/api/categories")
        return [CategoryRecord.model_validate(item) for item in payload["data"]]

    # ==================== Account APIs ====================

    async def find_user(self, email: str) -> Optional[AccountRecord]:
        """Look up the account that owns an email (case-insensitive)"""
        payload = await self._request("GET", "/api/users", params={"email": email})
        if not payload:
            return None
        return AccountRecord.model_validate(payload[0])

    async def user_exists(self, email: str) -> bool:
        return await self.find_user(email) is not None

    async def get_me(self, token: str) -> UserRecord:
        payload = await self._request("GET", "/api/users/me", token=token)
        return UserRecord.model_validate(payload)

    async def update_username(self, user_id: int, username: str) -> UserRecord:
        payload = await self._request("PUT", f"/api/users/{user_id}", body={"username": username})
        return UserRecord.model_validate(payload)

    async def register_user(self, username: str, email: str, password: str) -> AuthToken:
        payload = await self._request(
            "POST",
            "/api/auth/local/register",
            body={"username": username, "email": email, "password": password},
        )
        return AuthToken.model_validate(payload)

    async def login(self, identifier: str, password: str) -> AuthToken:
        payload = await self._request(
            "POST",
            "/api/auth/local",
            body={"identifier": identifier, "password": password},
        )
        return AuthToken.model_validate(payload)

    async def compare_password(self, email: str, current_password: str) -> bool:
        payload = await self._request(
            "POST",
            "/api/auth/compare-passwords",
            body={"currentPassword": current_password, "email": email},
        )
        return bool(payload.get("isPasswordValid"))

    async def forgot_password(self, email: str) -> None:
        await self._request("POST", "/api/auth/forgot-password", body={"email": email})

    async def reset_password(self, code: str, password: str, password_confirmation: str) -> AuthToken:
        payload = await self._request(
            "POST",
            "/api/auth/reset-password",
            body={
                "code": code,
                "password": password,
                "passwordConfirmation": password_confirmation,
            },
        )
        return AuthToken.model_validate(payload)

    async def change_password(
        self,
        token: str,
        current_password: str,
        password: str,
        password_confirmation: str,
    ) -> AuthToken:
        payload = await self._request(
            "POST",
            "/api/auth/change-password",
            body={
                "currentPassword": current_password,
                "password": password,
                "passwordConfirmation": password_confirmation,
            },
            token=token,
        )
        return AuthToken.model_validate(payload)

    # ==================== Order APIs ====================

    async def create_order_line(self, product_id: int, quantity: int, price: Decimal) -> OrderLineRecord:
        """Create a line item; price is the extended price"""
        payload = await self._request(
            "POST",
            "/api/order-lines",
            body={"data": {"product": product_id, "quantity": quantity, "price": float(price)}},
        )
        return OrderLineRecord.model_validate(payload["data"])

    async def delete_order_line(self, line_id: int) -> None:
        await self._request("DELETE", f"/api/order-lines/{line_id}")

    async def create_order(
        self,
        user_document_id: str,
        line_ids: list[int],
        total_price: Decimal,
    ) -> OrderHandle:
        payload = await self._request(
            "POST",
            "/api/orders",
            body={
                "data": {
                    "user": user_document_id,
                    "lines": line_ids,
                    "totalPrice": float(total_price),
                }
            },
        )
        return OrderHandle.model_validate(payload["data"])

    async def get_order(self, document_id: str) -> OrderDetail:
        payload = await self._request("GET", f"/api/orders/{document_id}")
        return OrderDetail.model_validate(payload["data"])

    async def get_orders_for_user(self, user_document_id: str) -> list[OrderSummary]:
        payload = await self._request("GET", "/api/orders", params={"user": user_document_id})
        return [OrderSummary.model_validate(item) for item in payload["data"]]


def _error_detail(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text
    if isinstance(payload, dict) and "detail" in payload:
        return str(payload["detail"])
    return response.text
