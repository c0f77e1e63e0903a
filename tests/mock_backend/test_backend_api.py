"""Tests for the mock backend HTTP API."""

import pytest

from mock_backend.config import settings
from mock_backend.database import order_db, product_db, user_db

OVERSHIRT = "h3k2m9x0c1v8b7n6"
TOTE = "a1s2d3f4g5h6j7k8"


def _register(client, email="shopper@example.com", username="shopper", password="correct-horse"):
    response = client.post(
        "/api/auth/local/register",
        json={"username": username, "email": email, "password": password},
    )
    assert response.status_code == 200
    return response.json()


def _line(client, product_id=3, quantity=2, price=71.0):
    response = client.post(
        "/api/order-lines",
        json={"data": {"product": product_id, "quantity": quantity, "price": price}},
    )
    assert response.status_code == 200
    return response.json()["data"]


class TestCatalog:
    def test_batched_lookup_skips_unknown_ids(self, backend_api):
        response = backend_api.get("/api/products", params=[("documentId", OVERSHIRT), ("documentId", TOTE), ("documentId", "nope")])

        data = response.json()["data"]
        assert {p["documentId"] for p in data} == {OVERSHIRT, TOTE}
        assert data[0]["image"]["url"].startswith("/uploads/")

    def test_product_by_slug(self, backend_api):
        assert backend_api.get("/api/products/canvas-tote").json()["data"]["price"] == 35.5
        assert backend_api.get("/api/products/missing").status_code == 404

    def test_api_token_enforced_when_configured(self, backend_api, monkeypatch):
        monkeypatch.setattr(settings, "backend_api_token", "service-token")

        assert backend_api.get("/api/products", headers={"Authorization": ""}).status_code == 401
        assert backend_api.get("/api/products", headers={"Authorization": "Bearer wrong"}).status_code == 401
        assert backend_api.get("/api/products", headers={"Authorization": "Bearer service-token"}).status_code == 200


class TestAccounts:
    def test_register_returns_token_without_password(self, backend_api):
        body = _register(backend_api)

        assert body["jwt"]
        assert body["user"]["email"] == "shopper@example.com"
        assert "passwordHash" not in body["user"]

    def test_duplicate_email_case_insensitive(self, backend_api):
        _register(backend_api)

        response = backend_api.post(
            "/api/auth/local/register",
            json={"username": "other", "email": "SHOPPER@example.com", "password": "x"},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Email or Username are already taken"

    def test_lookup_by_email(self, backend_api):
        registered = _register(backend_api)["user"]

        found = backend_api.get("/api/users", params={"email": "Shopper@Example.com"}).json()

        assert found == [{"documentId": registered["documentId"], "email": "shopper@example.com"}]
        assert backend_api.get("/api/users", params={"email": "nobody@example.com"}).json() == []

    def test_login_and_me(self, backend_api):
        _register(backend_api)

        token = backend_api.post("/api/auth/local", json={"identifier": "shopper", "password": "correct-horse"}).json()["jwt"]
        me = backend_api.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})

        assert me.json()["username"] == "shopper"
        assert backend_api.get("/api/users/me", headers={"Authorization": "Bearer bogus"}).status_code == 401

    def test_login_rejects_bad_password(self, backend_api):
        _register(backend_api)

        response = backend_api.post("/api/auth/local", json={"identifier": "shopper", "password": "nope"})

        assert response.status_code == 400

    def test_compare_passwords(self, backend_api):
        _register(backend_api)

        def compare(password):
            return backend_api.post(
                "/api/auth/compare-passwords",
                json={"currentPassword": password, "email": "shopper@example.com"},
            ).json()["isPasswordValid"]

        assert compare("correct-horse") is True
        assert compare("wrong") is False


class TestOrders:
    def test_create_order_and_detail(self, backend_api, monkeypatch):
        monkeypatch.setattr(settings, "auto_complete_orders", False)
        user = _register(backend_api)["user"]
        line = _line(backend_api)

        response = backend_api.post(
            "/api/orders",
            json={"data": {"user": user["documentId"], "lines": [line["id"]], "totalPrice": 71.0}},
        )
        handle = response.json()["data"]

        detail = backend_api.get(f"/api/orders/{handle['documentId']}").json()["data"]
        assert detail["orderStatus"] == "pending"
        assert detail["totalPrice"] == 71.0
        assert detail["user"]["documentId"] == user["documentId"]
        assert detail["lines"][0]["product"]["documentId"] == TOTE

        summaries = backend_api.get("/api/orders", params={"user": user["documentId"]}).json()["data"]
        assert [s["documentId"] for s in summaries] == [handle["documentId"]]

    def test_auto_complete(self, backend_api):
        user = _register(backend_api)["user"]
        line = _line(backend_api)

        handle = backend_api.post(
            "/api/orders",
            json={"data": {"user": user["documentId"], "lines": [line["id"]], "totalPrice": 71.0}},
        ).json()["data"]

        assert order_db.get_order(handle["documentId"]).order_status.value == "completed"

    def test_complete_only_once(self, backend_api, monkeypatch):
        monkeypatch.setattr(settings, "auto_complete_orders", False)
        user = _register(backend_api)["user"]
        line = _line(backend_api)
        handle = backend_api.post(
            "/api/orders",
            json={"data": {"user": user["documentId"], "lines": [line["id"]], "totalPrice": 71.0}},
        ).json()["data"]

        first = backend_api.post(f"/api/orders/{handle['documentId']}/complete")
        second = backend_api.post(f"/api/orders/{handle['documentId']}/complete")

        assert first.json() == {"ok": True, "status": "completed"}
        assert second.status_code == 409

    def test_order_rejects_unknown_user_and_lines(self, backend_api):
        line = _line(backend_api)
        user = _register(backend_api)["user"]

        unknown_user = backend_api.post("/api/orders", json={"data": {"user": "nobody", "lines": [line["id"]], "totalPrice": 1}})
        unknown_line = backend_api.post("/api/orders", json={"data": {"user": user["documentId"], "lines": [999], "totalPrice": 1}})

        assert unknown_user.status_code == 400
        assert unknown_line.status_code == 400
        assert order_db.orders == {}

    def test_line_for_unknown_product(self, backend_api):
        response = backend_api.post("/api/order-lines", json={"data": {"product": 999, "quantity": 1, "price": 1}})

        assert response.status_code == 400

    def test_delete_line(self, backend_api):
        line = _line(backend_api)

        assert backend_api.delete(f"/api/order-lines/{line['id']}").status_code == 200
        assert backend_api.delete(f"/api/order-lines/{line['id']}").status_code == 404

    def test_attached_line_cannot_be_deleted(self, backend_api):
        user = _register(backend_api)["user"]
        line = _line(backend_api)
        backend_api.post("/api/orders", json={"data": {"user": user["documentId"], "lines": [line["id"]], "totalPrice": 71.0}})

        assert backend_api.delete(f"/api/order-lines/{line['id']}").status_code == 409

    def test_missing_order(self, backend_api):
        assert backend_api.get("/api/orders/nope").status_code == 404
        assert backend_api.post("/api/orders/nope/complete").status_code == 404
