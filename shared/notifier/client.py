"""
Checkout Channel Client

Long-lived WebSocket subscription for an authenticated shopper. When the
backend reports a completed checkout, the local cart ledger is cleared and
the shopper is sent to the completion page.
"""

import asyncio
import inspect
import logging
from contextlib import suppress
from typing import Any, Awaitable, Callable, Optional, Union
from urllib.parse import urlencode

import websockets
from pydantic import ValidationError
from websockets.exceptions import WebSocketException

from shared.cart.ledger import CartLedger

from .models import ChannelEvent, ChannelMessage

logger = logging.getLogger(__name__)

Navigate = Callable[[str], Union[None, Awaitable[None]]]


class CheckoutChannel:
    """
    Per-user checkout notification channel.

    Reconnects forever while open. The retry delay starts at
    `reconnection_delay`, doubles after each failed attempt and is capped at
    `reconnection_delay_max`; a confirmed connection resets it.

    Usage:
        channel = CheckoutChannel(url, token, ledger, navigate=open_page)
        channel.start()
        ...
        await channel.close()
    """

    def __init__(
        self,
        url: str,
        token: str,
        ledger: CartLedger,
        navigate: Navigate,
        reconnection_delay: float = 0.15,
        reconnection_delay_max: float = 5.0,
        connect: Optional[Callable[[str], Any]] = None,
    ):
        """
        Args:
            url: WebSocket URL of the backend channel endpoint
            token: Backend user token, sent as the `token` query parameter
            ledger: Cart ledger to clear on checkout
            navigate: Called with the redirect URL after the cart is cleared
            reconnection_delay: First retry delay in seconds
            reconnection_delay_max: Upper bound for the retry delay
            connect: WebSocket connect factory (defaults to websockets.connect)
        """
        if not token:
            raise ValueError("A session token is required to open a checkout channel")

        self.url = url
        self.ledger = ledger
        self.reconnection_delay = reconnection_delay
        self.reconnection_delay_max = reconnection_delay_max
        self.connected = False
        self.checkout_handled = False

        self._token = token
        self._navigate = navigate
        self._connect = connect or websockets.connect
        self._retry_delay = reconnection_delay
        self._closed = False
        self._websocket = None
        self._task: Optional[asyncio.Task] = None

    @property
    def endpoint(self) -> str:
        separator = "&" if "?" in self.url else "?"
        return f"{self.url}{separator}{urlencode({'token': self._token})}"

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self) -> asyncio.Task:
        """Run the channel in the background of the current event loop"""
        if self._task is None:
            self._task = asyncio.create_task(self.run())
        return self._task

    async def run(self) -> None:
        """Connect, listen and reconnect until closed"""
        while not self._closed:
            try:
                async with self._connect(self.endpoint) as websocket:
                    self._websocket = websocket
                    await websocket.send(
                        ChannelMessage(event=ChannelEvent.CONNECTION).encode()
                    )
                    async for raw in websocket:
                        event = await self._dispatch(raw)
                        if event == ChannelEvent.DISCONNECT or self._closed:
                            break
            except (OSError, asyncio.TimeoutError, WebSocketException) as e:
                logger.warning(f"Checkout channel dropped: {e}")
            finally:
                self._websocket = None
                self.connected = False

            if self._closed:
                break

            logger.debug(f"Reconnecting checkout channel in {self._retry_delay:.2f}s")
            await asyncio.sleep(self._retry_delay)
            self._retry_delay = min(self._retry_delay * 2, self.reconnection_delay_max)

    async def close(self) -> None:
        """Unsubscribe: stop reconnecting and drop the socket"""
        self._closed = True
        websocket = self._websocket
        if websocket is not None:
            with suppress(WebSocketException, OSError):
                await websocket.close()

        task = self._task
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task

    async def _dispatch(self, raw: Union[str, bytes]) -> Optional[ChannelEvent]:
        try:
            message = ChannelMessage.decode(raw)
        except ValidationError:
            logger.debug(f"Ignoring unrecognised channel frame: {raw!r}")
            return None

        if message.event == ChannelEvent.CONFIRMATION:
            self.connected = True
            self._retry_delay = self.reconnection_delay
            logger.info("Checkout channel confirmed")
        elif message.event == ChannelEvent.DISCONNECT:
            self.connected = False
            logger.info("Checkout channel disconnected by server")
        elif message.event == ChannelEvent.CHECKOUT:
            await self._handle_checkout(message.data)

        return message.event

    async def _handle_checkout(self, redirect_url: Any) -> None:
        if self.checkout_handled:
            return
        if not isinstance(redirect_url, str) or not redirect_url:
            logger.warning(f"Checkout event without a redirect URL: {redirect_url!r}")
            return

        self.checkout_handled = True
        # Cart must be empty before the shopper lands on the completion page
        self.ledger.clear_cart()
        logger.info(f"Checkout completed, navigating to {redirect_url}")

        result = self._navigate(redirect_url)
        if inspect.isawaitable(result):
            await result

        # Navigating away ends the subscription
        self._closed = True


def open_checkout_channel(
    url: str,
    token: Optional[str],
    ledger: CartLedger,
    navigate: Navigate,
    **options: Any,
) -> Optional[CheckoutChannel]:
    """
    Start a checkout channel for a signed-in shopper.

    Must be called from a running event loop. Anonymous shoppers (no token)
    get no channel and None is returned.
    """
    if not token:
        return None

    channel = CheckoutChannel(url, token, ledger, navigate, **options)
    channel.start()
    return channel
