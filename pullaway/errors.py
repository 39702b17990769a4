"""Client error types for Pushover Open Client interactions."""

from __future__ import annotations


class PushoverError(Exception):
    """Base error for Pushover client failures."""


class PushoverConnectionError(PushoverError):
    """Establishing the push connection failed."""


class PushoverTimeout(PushoverConnectionError):
    """Timeout while communicating with Pushover."""


class PushoverHandshakeError(PushoverConnectionError):
    """WebSocket handshake failed."""


class PushoverLoginError(PushoverConnectionError):
    """Sending the login line over the push connection failed."""


class PushoverReadError(PushoverError):
    """Reading from an established push connection failed."""


class PushoverReconnectRequested(PushoverError):
    """The server asked the client to reconnect."""


class PushoverFatalError(PushoverError):
    """The server declared the session unrecoverable."""


class PushoverPermanentError(PushoverFatalError):
    """Permanent error, the device must log in again."""


class PushoverSessionClosedError(PushoverFatalError):
    """Session closed by the server, usually logged in from elsewhere."""


class PushoverResponseError(PushoverError):
    """Error response from the Pushover REST API."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status
