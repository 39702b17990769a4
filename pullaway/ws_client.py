"""WebSocket client wrapper for the Pushover push stream."""

from __future__ import annotations

from typing import TYPE_CHECKING

from websockets.asyncio.client import ClientConnection
from websockets.exceptions import ConnectionClosed, WebSocketException

from .errors import PushoverConnectionError, PushoverLoginError, PushoverReadError
from .protocol import (
    ORIGIN,
    PUSH_URL,
    READ_CHUNK_SIZE,
    Credentials,
    build_login_message,
    iter_chunks,
)
from .ws import connect_websocket

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


class PushoverWsClient:
    """Wrapper around the websockets library for one push connection.

    Iterating the client yields raw read chunks of at most
    ``READ_CHUNK_SIZE`` bytes. Iteration ends when the server closes the
    connection cleanly and raises ``PushoverReadError`` when it breaks.
    """

    def __init__(self, *, chunk_size: int = READ_CHUNK_SIZE) -> None:
        self._ws: ClientConnection | None = None
        self._chunk_size = chunk_size
        self._closed = False

    @property
    def closed(self) -> bool:
        """Return True once close() has been called on an open connection."""
        return self._closed

    async def connect(
        self,
        url: str = PUSH_URL,
        *,
        origin: str = ORIGIN,
        timeout: float = 15.0,
    ) -> None:
        """Connect to the push websocket."""
        self._ws = await connect_websocket(url, origin=origin, timeout=timeout)

    async def login(self, credentials: Credentials) -> None:
        """Send the login line as a single write.

        Raises:
            PushoverConnectionError: If not connected
            PushoverLoginError: If the write fails
        """
        if self._ws is None:
            raise PushoverConnectionError("WebSocket is not connected")
        try:
            await self._ws.send(build_login_message(credentials))
        except (OSError, WebSocketException) as err:
            raise PushoverLoginError("Sending login message failed") from err

    async def close(self) -> None:
        """Close the websocket connection. Later calls are no-ops."""
        if self._ws is None or self._closed:
            return
        self._closed = True
        await self._ws.close()

    def __aiter__(self) -> AsyncIterator[bytes]:
        if self._ws is None:
            raise PushoverConnectionError("WebSocket is not connected")
        return self._iter_chunks()

    async def _iter_chunks(self) -> AsyncIterator[bytes]:
        if self._ws is None:
            raise PushoverConnectionError("WebSocket is not connected")

        try:
            async for frame in self._ws:
                for chunk in iter_chunks(frame, self._chunk_size):
                    yield chunk
        except ConnectionClosed as err:
            raise PushoverReadError("WebSocket connection closed") from err
        except (OSError, WebSocketException) as err:
            raise PushoverReadError("Reading from WebSocket failed") from err
