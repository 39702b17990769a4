"""WebSocket helpers for the Pushover push endpoint."""

from __future__ import annotations

import asyncio

import websockets
from websockets.asyncio.client import ClientConnection
from websockets.exceptions import (
    InvalidHandshake,
    InvalidURI,
    WebSocketException,
)
from websockets.typing import Origin

from .errors import (
    PushoverConnectionError,
    PushoverHandshakeError,
    PushoverTimeout,
)
from .protocol import ORIGIN, PUSH_URL


async def connect_websocket(
    url: str = PUSH_URL,
    *,
    origin: str = ORIGIN,
    ping_interval: int | None = None,
    timeout: float = 15.0,
) -> ClientConnection:
    """Connect to the Pushover push WebSocket endpoint.

    The server keeps the connection alive with its own ``#`` heartbeats,
    so client pings are disabled by default.

    Args:
        url: WebSocket URL (default: the public push endpoint)
        origin: Origin header value
        ping_interval: Interval for ping frames
        timeout: Connection timeout
    """
    try:
        return await asyncio.wait_for(
            websockets.connect(
                url,
                origin=Origin(origin),
                ping_interval=ping_interval,
                close_timeout=5,
                max_size=None,
            ),
            timeout=timeout,
        )
    except TimeoutError as err:
        raise PushoverTimeout("WebSocket connection timed out") from err
    except (InvalidHandshake, InvalidURI) as err:
        raise PushoverHandshakeError("WebSocket handshake failed") from err
    except (OSError, WebSocketException) as err:
        raise PushoverConnectionError("WebSocket connection failed") from err
