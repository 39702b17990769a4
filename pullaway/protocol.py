"""Protocol helpers for the Pushover Open Client push stream.

The push socket never carries message bodies. The server writes single
control bytes and every byte is meaningful on its own, so decoding keeps
no state between bytes or between reads.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Final

PUSH_URL: Final = "wss://client.pushover.net/push"
ORIGIN: Final = "http://localhost/"
API_URL: Final = "https://api.pushover.net/1"

READ_CHUNK_SIZE: Final = 512

RECONNECT_DELAY: Final = 5.0
RETRY_DELAY: Final = 15.0


class ControlSignal(Enum):
    """Control signals sent by the push server."""

    HEARTBEAT = "#"
    MESSAGE_AVAILABLE = "!"
    RECONNECT = "R"
    PERMANENT_ERROR = "E"
    SESSION_CLOSED = "A"
    UNKNOWN = "unknown"


_SIGNALS_BY_BYTE: Final[dict[int, ControlSignal]] = {
    ord(signal.value): signal
    for signal in ControlSignal
    if signal is not ControlSignal.UNKNOWN
}


@dataclass(frozen=True)
class Credentials:
    """Device credentials issued by the Pushover registration flow."""

    device_id: str
    secret: str


@dataclass(frozen=True)
class DecodedSignal:
    """One control byte and its classification."""

    signal: ControlSignal
    byte: int

    @property
    def is_terminal(self) -> bool:
        """Return True when this signal ends the current session."""
        return self.signal in (
            ControlSignal.RECONNECT,
            ControlSignal.PERMANENT_ERROR,
            ControlSignal.SESSION_CLOSED,
        )


def build_login_message(credentials: Credentials) -> str:
    """Build the login line sent once right after connecting."""
    return f"login:{credentials.device_id}:{credentials.secret}\n"


def decode_byte(value: int) -> DecodedSignal:
    """Classify a single byte read off the push socket."""
    return DecodedSignal(_SIGNALS_BY_BYTE.get(value, ControlSignal.UNKNOWN), value)


def decode(chunk: bytes) -> Iterator[DecodedSignal]:
    """Decode every byte of a read chunk, in receipt order."""
    for value in chunk:
        yield decode_byte(value)


def iter_chunks(data: bytes | str, size: int = READ_CHUNK_SIZE) -> Iterator[bytes]:
    """Split a received frame into bounded read chunks.

    Text frames are encoded as UTF-8 first.
    """
    if isinstance(data, str):
        data = data.encode()
    for start in range(0, len(data), size):
        yield data[start : start + size]
