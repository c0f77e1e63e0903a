"""Cart checkout through the storefront routes against the in-process backend."""

from decimal import Decimal

import pytest

from mock_backend.database import order_db, product_db, user_db
from storefront.core.config import settings

OVERSHIRT = "h3k2m9x0c1v8b7n6"  # 89.0
TOTE = "a1s2d3f4g5h6j7k8"  # 35.5


def _register(client, email="shopper@example.com", username="shopper", password="correct-horse"):
    return client.post("/register", json={"username": username, "email": email, "password": password})


class TestGuestCheckout:
    def test_creates_account_session_and_order(self, storefront):
        response = storefront.post(
            "/cart",
            json={
                "status": "logged-out",
                "email": "guest@example.com",
                "products": [{"documentId": OVERSHIRT, "quantity": 2}],
            },
        )

        assert response.status_code == 303
        assert response.headers["location"] == settings.checkout_redirect
        assert settings.session_cookie_name in response.cookies

        guest = user_db.find_by_email("guest@example.com")
        assert guest is not None
        assert guest.username == "guest@example.com"

        orders = order_db.list_for_user(guest.document_id)
        assert len(orders) == 1
        assert orders[0].total_price == pytest.approx(178.0)

        session = storefront.get("/session").json()
        assert session["user"]["email"] == "guest@example.com"
        assert session["notifier"]["url"] == settings.notifier_url
        assert session["notifier"]["token"]

    def test_client_prices_are_ignored(self, storefront):
        product_db.update_price(TOTE, 40.0)

        storefront.post(
            "/cart",
            json={
                "status": "logged-out",
                "email": "guest@example.com",
                "products": [{"documentId": TOTE, "quantity": 3, "pricePerItem": 35.5}],
            },
        )

        (order,) = order_db.orders.values()
        assert order.total_price == pytest.approx(120.0)
        assert [order_db.get_line(i).price for i in order.lines] == [pytest.approx(120.0)]

    def test_registered_email_must_sign_in(self, storefront):
        _register(storefront, email="taken@example.com")
        storefront.cookies.clear()

        payload = {
            "status": "logged-out",
            "email": "taken@example.com",
            "products": [{"documentId": OVERSHIRT, "quantity": 1}],
        }
        response = storefront.post("/cart", json=payload)

        assert response.status_code == 400
        body = response.json()
        assert body["status"] == "error"
        assert body["error"] == {"email": ["User already exists. Please log in to order with this email."]}
        assert body["initialValue"] == payload
        assert len(user_db.users) == 1
        assert order_db.orders == {}

    def test_unknown_product_places_nothing(self, storefront_factory):
        client = storefront_factory(raise_server_exceptions=False)

        response = client.post(
            "/cart",
            json={
                "status": "logged-out",
                "email": "guest@example.com",
                "products": [{"documentId": OVERSHIRT, "quantity": 1}, {"documentId": "missing", "quantity": 1}],
            },
        )

        assert response.status_code == 500
        assert user_db.users == {}
        assert order_db.lines == {}
        assert order_db.orders == {}


class TestSignedInCheckout:
    def test_order_attached_to_session_user(self, storefront):
        _register(storefront)

        response = storefront.post(
            "/cart",
            json={"status": "logged-in", "products": [{"documentId": TOTE, "quantity": 2}]},
        )

        assert response.status_code == 303
        assert response.headers["location"] == settings.checkout_redirect
        assert "set-cookie" not in response.headers

        shopper = user_db.find_by_email("shopper@example.com")
        (order,) = order_db.list_for_user(shopper.document_id)
        assert order.total_price == pytest.approx(71.0)

        history = storefront.get("/orders").json()["data"]
        assert [o["documentId"] for o in history] == [order.document_id]
        assert Decimal(str(history[0]["totalPrice"])) == Decimal("71")

    def test_logged_in_claim_without_session(self, storefront):
        response = storefront.post(
            "/cart",
            json={"status": "logged-in", "products": [{"documentId": TOTE, "quantity": 1}]},
        )

        assert response.status_code == 400
        assert response.json()["error"] == {"email": ["Please log in before placing your order"]}
        assert order_db.lines == {}


class TestSubmissionErrors:
    @pytest.mark.parametrize(
        "payload, field",
        [
            ({"status": "logged-out", "email": "nope", "products": [{"documentId": TOTE, "quantity": 1}]}, "email"),
            ({"status": "logged-out", "email": "a@example.com", "products": []}, "products"),
            ({"status": "logged-in", "products": [{"documentId": "", "quantity": 1}]}, "products[0].documentId"),
            ({"status": "logged-in", "products": [{"documentId": TOTE, "quantity": "two"}]}, "products[0].quantity"),
            ({"status": "someone", "products": [{"documentId": TOTE, "quantity": 1}]}, "status"),
            ({"products": [{"documentId": TOTE, "quantity": 1}]}, "status"),
        ],
    )
    def test_field_errors(self, storefront, payload, field):
        response = storefront.post("/cart", json=payload)

        assert response.status_code == 400
        assert field in response.json()["error"]
        assert order_db.lines == {}
        assert user_db.users == {}


def test_display_prices(storefront):
    response = storefront.get("/cart/prices", params=[("documentId", OVERSHIRT), ("documentId", TOTE)])

    assert response.status_code == 200
    snapshots = {s["documentId"]: s for s in response.json()["data"]}
    assert set(snapshots) == {OVERSHIRT, TOTE}
    assert Decimal(str(snapshots[TOTE]["price"])) == Decimal("35.5")
    assert snapshots[TOTE]["name"] == "Canvas Tote"


def test_catalog_browsing(storefront):
    products = storefront.get("/products", params={"category": "accessories"}).json()["data"]
    assert {p["documentId"] for p in products} == {TOTE, "z9x8c7v6b5n4m3l2"}

    assert storefront.get("/products/canvas-tote").json()["data"]["name"] == "Canvas Tote"
    assert storefront.get("/products/nothing-here").status_code == 404
    assert "Home" in storefront.get("/categories").json()["data"]
