"""Checkout channel WebSocket endpoint"""

from typing import Optional
from fastapi import APIRouter, Query, WebSocket

from ..realtime.hub import checkout_hub
from ..security.auth import resolve_user_token

router = APIRouter(tags=["Realtime"])

# Application-defined close code for a missing or invalid token
POLICY_UNAUTHORIZED = 4401


@router.websocket("/socket")
async def checkout_socket(
    websocket: WebSocket,
    token: Optional[str] = Query(None),
):
    """
    Per-user checkout channel.

    The user token travels as a query parameter. Anonymous connections
    are refused.
    """
    user = resolve_user_token(token)
    if not user:
        await websocket.close(code=POLICY_UNAUTHORIZED)
        return

    await checkout_hub.serve(websocket, user)
