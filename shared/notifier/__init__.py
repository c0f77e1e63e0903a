# Checkout Notifier
# Push channel that clears the cart when the backend reports a completed checkout

from .models import ChannelEvent, ChannelMessage
from .client import CheckoutChannel, open_checkout_channel

__all__ = ["ChannelEvent", "ChannelMessage", "CheckoutChannel", "open_checkout_channel"]
