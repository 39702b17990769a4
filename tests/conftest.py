"""Pytest configuration and fixtures for pullaway tests."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from pullaway.protocol import Credentials


@pytest.fixture
def credentials() -> Credentials:
    """Credentials used across listener tests."""
    return Credentials(device_id="device123", secret="secretXYZ")


@pytest.fixture
def mock_session() -> MagicMock:
    """Create a mock aiohttp ClientSession."""
    import aiohttp

    return MagicMock(spec=aiohttp.ClientSession)


def create_mock_response(
    status: int = 200,
    json_data: dict[str, Any] | None = None,
    text_data: str | None = None,
) -> AsyncMock:
    """Create a configured mock response.

    Args:
        status: HTTP status code
        json_data: Data to return from json() call
        text_data: Data to return from text() call

    Returns:
        Configured AsyncMock response
    """
    response = AsyncMock()
    response.status = status

    if json_data is not None:
        response.json.return_value = json_data
    if text_data is not None:
        response.text.return_value = text_data

    response.__aenter__.return_value = response
    response.__aexit__.return_value = None

    return response


class FakeWsClient:
    """Stand-in for PushoverWsClient driven by a scripted list of chunks.

    After the chunks are exhausted the iterator raises ``read_error`` when
    given, blocks until close() when ``block`` is set, and otherwise ends
    as if the server closed the connection.
    """

    def __init__(
        self,
        chunks: Iterable[bytes] = (),
        *,
        connect_error: Exception | None = None,
        login_error: Exception | None = None,
        read_error: Exception | None = None,
        block: bool = False,
    ) -> None:
        self.chunks = list(chunks)
        self.read_error = read_error
        self.block = block
        self.chunks_read = 0
        self._closed = asyncio.Event()

        self.connect = AsyncMock(side_effect=connect_error)
        self.login = AsyncMock(side_effect=login_error)
        self.close = AsyncMock(side_effect=self._on_close)

    def _on_close(self) -> None:
        self._closed.set()

    def __aiter__(self):
        return self._iter()

    async def _iter(self):
        for chunk in self.chunks:
            self.chunks_read += 1
            yield chunk
        if self.read_error is not None:
            raise self.read_error
        if self.block:
            await self._closed.wait()
