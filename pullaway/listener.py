"""Push listener for the Pushover Open Client API.

This module drives the push connection. It handles:
- Connecting and logging in to the push endpoint
- Decoding control bytes and dispatching them in order
- Reconnect policy for transient failures
- Stopping on server-declared fatal conditions

The listener never downloads messages itself. It calls the supplied
callback on every message-available signal and the callback talks to the
REST API.
"""

from __future__ import annotations

import asyncio
import contextlib
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from .errors import (
    PushoverConnectionError,
    PushoverPermanentError,
    PushoverReadError,
    PushoverReconnectRequested,
    PushoverSessionClosedError,
)
from .protocol import (
    ORIGIN,
    PUSH_URL,
    RECONNECT_DELAY,
    RETRY_DELAY,
    ControlSignal,
    Credentials,
    DecodedSignal,
    decode,
)
from .ws_client import PushoverWsClient

if TYPE_CHECKING:
    from .http import AuthorizedClient

_LOGGER = logging.getLogger(__name__)

MessageCallback = Callable[[], Awaitable[None] | None]


class OutcomeKind(Enum):
    """How a single push session ended."""

    CONNECT_FAILED = "connect_failed"
    READ_FAILED = "read_failed"
    RECONNECT = "reconnect"
    PERMANENT_ERROR = "permanent_error"
    SESSION_CLOSED = "session_closed"
    CALLBACK_FAILED = "callback_failed"

    @property
    def is_fatal(self) -> bool:
        """Return True when the server declared the session unrecoverable."""
        return self in (OutcomeKind.PERMANENT_ERROR, OutcomeKind.SESSION_CLOSED)


@dataclass(frozen=True)
class Outcome:
    """Result of one push session."""

    kind: OutcomeKind
    error: Exception


class ListenerState(Enum):
    """Supervisor states."""

    IDLE = "idle"
    RUNNING = "running"
    RETRYING = "retrying"
    STOPPED = "stopped"


class PushoverListener:
    """Listen for push notifications with automatic reconnects.

    Usage:
        listener = PushoverListener()
        await listener.listen_with_reconnect(credentials, fetch_messages)

    ``listen_with_reconnect`` returns normally after ``stop()`` and raises
    on a permanent error, a closed session or a failing callback.
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        *,
        url: str = PUSH_URL,
        origin: str = ORIGIN,
        reconnect_delay: float = RECONNECT_DELAY,
        retry_delay: float = RETRY_DELAY,
        connect_timeout: float = 15.0,
        initial_check: bool = True,
    ) -> None:
        """Initialize listener.

        Args:
            logger: Logger to report to (default: module logger)
            url: Push WebSocket URL
            origin: Origin header sent when connecting
            reconnect_delay: Delay before reconnecting on server request (seconds)
            retry_delay: Delay before retrying after a failure (seconds)
            connect_timeout: WebSocket connection timeout (seconds)
            initial_check: Call the callback once before the first connection
        """
        self._log = logger or _LOGGER
        self._url = url
        self._origin = origin
        self._reconnect_delay = reconnect_delay
        self._retry_delay = retry_delay
        self._connect_timeout = connect_timeout
        self._initial_check = initial_check

        self._state = ListenerState.IDLE
        self._ws: PushoverWsClient | None = None
        self._stop_event = asyncio.Event()

    @property
    def state(self) -> ListenerState:
        """Get current supervisor state."""
        return self._state

    @property
    def stop_requested(self) -> bool:
        """Return True once stop() has been called."""
        return self._stop_event.is_set()

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    async def listen_with_reconnect(
        self, credentials: Credentials, callback: MessageCallback
    ) -> None:
        """Listen until stopped or until a fatal outcome.

        Raises:
            PushoverPermanentError: Server reported a permanent error
            PushoverSessionClosedError: Server closed the session
            Exception: Whatever the callback raised, unmodified
        """
        self._stop_event.clear()
        self._set_state(credentials.device_id, ListenerState.RUNNING)

        try:
            if self._initial_check:
                await self._check_for_messages(credentials, callback)

            while not self._stop_event.is_set():
                self._set_state(credentials.device_id, ListenerState.RUNNING)
                outcome = await self.listen(credentials, callback)
                if self._stop_event.is_set():
                    break

                delay = self._handle_outcome(credentials, outcome)
                self._set_state(credentials.device_id, ListenerState.RETRYING)
                await self._sleep(delay)
        finally:
            self._set_state(credentials.device_id, ListenerState.STOPPED)

        self._log.debug("[%s] Listener stopped", credentials.device_id)

    async def listen(
        self, credentials: Credentials, callback: MessageCallback
    ) -> Outcome:
        """Run a single push session and report how it ended.

        The connection is closed before this returns, whatever the outcome.
        """
        ws = PushoverWsClient()
        self._ws = ws

        try:
            try:
                await ws.connect(
                    self._url, origin=self._origin, timeout=self._connect_timeout
                )
                self._log.debug(
                    "[%s] Connected to %s", credentials.device_id, self._url
                )
                if self._stop_event.is_set():
                    return Outcome(
                        OutcomeKind.READ_FAILED, PushoverReadError("Listener stopped")
                    )
                await ws.login(credentials)
            except PushoverConnectionError as err:
                return Outcome(OutcomeKind.CONNECT_FAILED, err)

            try:
                async for chunk in ws:
                    self._log.debug(
                        "[%s] Received message: %r", credentials.device_id, chunk
                    )
                    for decoded in decode(chunk):
                        outcome = await self._dispatch(credentials, decoded, callback)
                        if outcome is not None:
                            return outcome
            except PushoverReadError as err:
                return Outcome(OutcomeKind.READ_FAILED, err)

            return Outcome(
                OutcomeKind.READ_FAILED,
                PushoverReadError("WebSocket closed by server"),
            )
        finally:
            await ws.close()
            self._ws = None

    async def stop(self) -> None:
        """Stop listening and close the live connection, if any."""
        self._stop_event.set()
        if self._ws is not None:
            await self._ws.close()

    # -------------------------------------------------------------------------
    # Internal: Session
    # -------------------------------------------------------------------------

    async def _dispatch(
        self,
        credentials: Credentials,
        decoded: DecodedSignal,
        callback: MessageCallback,
    ) -> Outcome | None:
        """Handle one control signal, returning an outcome if it ends the session."""
        signal = decoded.signal

        if signal is ControlSignal.HEARTBEAT:
            self._log.debug("[%s] Heartbeat", credentials.device_id)
            return None

        if signal is ControlSignal.MESSAGE_AVAILABLE:
            try:
                await _invoke(callback)
            except Exception as err:  # noqa: BLE001
                return Outcome(OutcomeKind.CALLBACK_FAILED, err)
            return None

        if signal is ControlSignal.RECONNECT:
            return Outcome(
                OutcomeKind.RECONNECT,
                PushoverReconnectRequested("Server requested a reconnect"),
            )

        if signal is ControlSignal.PERMANENT_ERROR:
            return Outcome(
                OutcomeKind.PERMANENT_ERROR,
                PushoverPermanentError("Permanent error, log in again"),
            )

        if signal is ControlSignal.SESSION_CLOSED:
            return Outcome(
                OutcomeKind.SESSION_CLOSED,
                PushoverSessionClosedError("Session closed by server"),
            )

        self._log.warning(
            "[%s] Unknown message: %r", credentials.device_id, chr(decoded.byte)
        )
        return None

    async def _check_for_messages(
        self, credentials: Credentials, callback: MessageCallback
    ) -> None:
        """Best-effort initial check, errors are ignored."""
        try:
            await _invoke(callback)
        except Exception as err:  # noqa: BLE001
            self._log.debug(
                "[%s] Initial message check failed: %s", credentials.device_id, err
            )

    # -------------------------------------------------------------------------
    # Internal: Reconnect Policy
    # -------------------------------------------------------------------------

    def _handle_outcome(self, credentials: Credentials, outcome: Outcome) -> float:
        """Raise for terminal outcomes, otherwise return the retry delay."""
        if outcome.kind.is_fatal:
            self._log.error(
                "[%s] Listening stopped: %s", credentials.device_id, outcome.error
            )
            raise outcome.error

        if outcome.kind is OutcomeKind.CALLBACK_FAILED:
            raise outcome.error

        if outcome.kind is OutcomeKind.RECONNECT:
            self._log.info(
                "[%s] Reconnecting on request in %ss",
                credentials.device_id,
                self._reconnect_delay,
            )
            return self._reconnect_delay

        self._log.error(
            "[%s] Error listening to WebSocket, retrying in %ss: %s",
            credentials.device_id,
            self._retry_delay,
            outcome.error,
        )
        return self._retry_delay

    async def _sleep(self, delay: float) -> None:
        """Wait for the retry delay, returning early when stopped."""
        with contextlib.suppress(TimeoutError):
            await asyncio.wait_for(self._stop_event.wait(), timeout=delay)

    def _set_state(self, device_id: str, state: ListenerState) -> None:
        if self._state is not state:
            self._log.debug(
                "[%s] State: %s → %s", device_id, self._state.value, state.value
            )
            self._state = state


class AuthorizedListener:
    """Listener bound to the credentials of an authorized client."""

    def __init__(
        self, client: AuthorizedClient, listener: PushoverListener | None = None
    ) -> None:
        self.client = client
        self.listener = listener or PushoverListener()

    async def listen_with_reconnect(self, callback: MessageCallback) -> None:
        """Listen with reconnects using the client's credentials."""
        await self.listener.listen_with_reconnect(self.client.credentials, callback)

    async def listen(self, callback: MessageCallback) -> Outcome:
        """Run a single push session using the client's credentials."""
        return await self.listener.listen(self.client.credentials, callback)

    async def stop(self) -> None:
        """Stop the underlying listener."""
        await self.listener.stop()


async def _invoke(callback: MessageCallback) -> None:
    result = callback()
    if inspect.isawaitable(result):
        await result
