"""Pushover Open Client push listener."""

import logging

__version__ = "0.1.0"

from .errors import (
    PushoverConnectionError,
    PushoverError,
    PushoverFatalError,
    PushoverHandshakeError,
    PushoverLoginError,
    PushoverPermanentError,
    PushoverReadError,
    PushoverReconnectRequested,
    PushoverResponseError,
    PushoverSessionClosedError,
    PushoverTimeout,
)
from .http import AuthorizedClient, PushoverHttpClient
from .listener import (
    AuthorizedListener,
    ListenerState,
    MessageCallback,
    Outcome,
    OutcomeKind,
    PushoverListener,
)
from .models import (
    DeleteResponse,
    Device,
    DownloadResponse,
    LoginResponse,
    Message,
    RegistrationResponse,
    User,
)
from .protocol import (
    ControlSignal,
    Credentials,
    DecodedSignal,
    build_login_message,
    decode,
    decode_byte,
)
from .ws import connect_websocket
from .ws_client import PushoverWsClient

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AuthorizedClient",
    "AuthorizedListener",
    "ControlSignal",
    "Credentials",
    "DecodedSignal",
    "DeleteResponse",
    "Device",
    "DownloadResponse",
    "ListenerState",
    "LoginResponse",
    "Message",
    "MessageCallback",
    "Outcome",
    "OutcomeKind",
    "PushoverConnectionError",
    "PushoverError",
    "PushoverFatalError",
    "PushoverHandshakeError",
    "PushoverHttpClient",
    "PushoverListener",
    "PushoverLoginError",
    "PushoverPermanentError",
    "PushoverReadError",
    "PushoverReconnectRequested",
    "PushoverResponseError",
    "PushoverSessionClosedError",
    "PushoverTimeout",
    "PushoverWsClient",
    "RegistrationResponse",
    "User",
    "__version__",
    "build_login_message",
    "connect_websocket",
    "decode",
    "decode_byte",
]
