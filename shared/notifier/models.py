"""Checkout Notifier wire models"""

from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel


class ChannelEvent(str, Enum):
    """Events exchanged over the checkout channel"""
    CONNECTION = "connection"
    CONFIRMATION = "confirmation"
    DISCONNECT = "disconnect"
    CHECKOUT = "checkout"


class ChannelMessage(BaseModel):
    """One JSON text frame: {"event": ..., "data": ...}"""
    event: ChannelEvent
    data: Optional[Any] = None

    def encode(self) -> str:
        return self.model_dump_json()

    @classmethod
    def decode(cls, raw: Union[str, bytes]) -> "ChannelMessage":
        return cls.model_validate_json(raw)
