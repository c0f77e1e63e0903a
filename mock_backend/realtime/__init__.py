# Checkout push channel

from .hub import CheckoutHub, checkout_hub

__all__ = ["CheckoutHub", "checkout_hub"]
