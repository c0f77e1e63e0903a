"""Tests for the checkout channel server."""

import asyncio

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from mock_backend.config import settings
from mock_backend.main import app
from mock_backend.realtime.hub import CheckoutHub, checkout_hub
from mock_backend.routes.socket import POLICY_UNAUTHORIZED
from shared.notifier import ChannelEvent, ChannelMessage


def _frame(event, data=None):
    return ChannelMessage(event=event, data=data).encode()


class FakeWebSocket:
    def __init__(self):
        self.inbox = asyncio.Queue()
        self.sent = []
        self.accepted = False
        self.closed = False

    async def accept(self):
        self.accepted = True

    async def receive_text(self):
        return await self.inbox.get()

    async def send_text(self, data):
        self.sent.append(ChannelMessage.decode(data))

    async def close(self, code=1000):
        self.closed = True


class FakeUser:
    def __init__(self, document_id):
        self.document_id = document_id


def test_rejects_invalid_token(backend_api):
    with pytest.raises(WebSocketDisconnect) as excinfo:
        with backend_api.websocket_connect("/socket?token=bogus"):
            pass

    assert excinfo.value.code == POLICY_UNAUTHORIZED


def test_rejects_missing_token(backend_api):
    with pytest.raises(WebSocketDisconnect) as excinfo:
        with backend_api.websocket_connect("/socket"):
            pass

    assert excinfo.value.code == POLICY_UNAUTHORIZED


def test_confirmation_and_checkout_push():
    with TestClient(app) as client:
        registered = client.post(
            "/api/auth/local/register",
            json={"username": "shopper", "email": "shopper@example.com", "password": "correct-horse"},
        ).json()
        user_id = registered["user"]["documentId"]

        with client.websocket_connect(f"/socket?token={registered['jwt']}") as websocket:
            websocket.send_text(_frame(ChannelEvent.CONNECTION))
            assert ChannelMessage.decode(websocket.receive_text()).event == ChannelEvent.CONFIRMATION
            assert checkout_hub.connection_count(user_id) == 1

            line = client.post(
                "/api/order-lines",
                json={"data": {"product": 3, "quantity": 1, "price": 35.5}},
            ).json()["data"]
            order = client.post(
                "/api/orders",
                json={"data": {"user": user_id, "lines": [line["id"]], "totalPrice": 35.5}},
            ).json()["data"]
            if not settings.auto_complete_orders:
                client.post(f"/api/orders/{order['documentId']}/complete")

            message = ChannelMessage.decode(websocket.receive_text())
            assert message.event == ChannelEvent.CHECKOUT
            assert message.data == f"{settings.storefront_base_url.rstrip('/')}/orders/{order['documentId']}"

            websocket.send_text(_frame(ChannelEvent.DISCONNECT))

    assert checkout_hub.connection_count(user_id) == 0


def test_publish_reaches_every_socket_of_a_user():
    hub = CheckoutHub()

    async def scenario():
        first, second, stranger = FakeWebSocket(), FakeWebSocket(), FakeWebSocket()
        tasks = [
            asyncio.create_task(hub.serve(first, FakeUser("u1"))),
            asyncio.create_task(hub.serve(second, FakeUser("u1"))),
            asyncio.create_task(hub.serve(stranger, FakeUser("u2"))),
        ]
        await asyncio.sleep(0)

        delivered = await hub.publish("u1", ChannelEvent.CHECKOUT, "/orders/1")

        for websocket in (first, second, stranger):
            websocket.inbox.put_nowait(_frame(ChannelEvent.DISCONNECT))
        await asyncio.gather(*tasks)
        return delivered, first, second, stranger

    delivered, first, second, stranger = asyncio.run(scenario())

    assert delivered == 2
    assert [m.event for m in first.sent] == [ChannelEvent.CHECKOUT]
    assert [m.data for m in second.sent] == ["/orders/1"]
    assert stranger.sent == []
    assert hub.connection_count() == 0


def test_unrecognised_frames_are_ignored():
    hub = CheckoutHub()

    async def scenario():
        websocket = FakeWebSocket()
        task = asyncio.create_task(hub.serve(websocket, FakeUser("u1")))
        websocket.inbox.put_nowait("garbage")
        websocket.inbox.put_nowait(_frame(ChannelEvent.CONNECTION))
        websocket.inbox.put_nowait(_frame(ChannelEvent.DISCONNECT))
        await task
        return websocket

    websocket = asyncio.run(scenario())

    assert [m.event for m in websocket.sent] == [ChannelEvent.CONFIRMATION]


def test_disconnect_all():
    hub = CheckoutHub()

    async def scenario():
        websocket = FakeWebSocket()
        task = asyncio.create_task(hub.serve(websocket, FakeUser("u1")))
        await asyncio.sleep(0)

        await hub.disconnect_all()
        websocket.inbox.put_nowait(_frame(ChannelEvent.DISCONNECT))
        await task
        return websocket

    websocket = asyncio.run(scenario())

    assert [m.event for m in websocket.sent] == [ChannelEvent.DISCONNECT]
    assert websocket.closed
    assert hub.connection_count() == 0


def test_publish_without_listeners():
    assert asyncio.run(CheckoutHub().publish("nobody", ChannelEvent.CHECKOUT, "/orders/1")) == 0
