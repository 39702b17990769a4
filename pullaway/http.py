"""HTTP client for the Pushover Open Client REST API."""

from __future__ import annotations

import logging
import time
from typing import Any

import aiohttp

from .errors import (
    PushoverConnectionError,
    PushoverResponseError,
    PushoverTimeout,
)
from .models import (
    DeleteResponse,
    DownloadResponse,
    LoginResponse,
    RegistrationResponse,
)
from .protocol import API_URL, Credentials

_LOGGER = logging.getLogger(__name__)


class PushoverHttpClient:
    """HTTP client wrapper for the Pushover Open Client endpoints."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        *,
        api_url: str = API_URL,
        timeout: float = 20.0,
    ) -> None:
        self._session = session
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout

    def _url(self, path: str) -> str:
        return f"{self._api_url}{path}"

    async def _request(
        self,
        method: str,
        path: str,
        *,
        action: str,
        params: dict[str, str] | None = None,
        data: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Send a request and return the decoded JSON body.

        Raises:
            PushoverResponseError: If the API returns a non-200 status
            PushoverTimeout: If the request times out
            PushoverConnectionError: If the network request fails
        """
        url = self._url(path)
        request = getattr(self._session, method)
        try:
            async with request(
                url,
                params=params,
                data=data,
                timeout=aiohttp.ClientTimeout(total=self._timeout),
            ) as resp:
                if resp.status != 200:
                    body = await resp.text()
                    raise PushoverResponseError(
                        resp.status, f"{action} failed: {resp.status} - {body}"
                    )
                payload: dict[str, Any] = await resp.json(content_type=None)
                return payload
        except TimeoutError as err:
            raise PushoverTimeout(f"{action} request timed out") from err
        except aiohttp.ClientError as err:
            raise PushoverConnectionError(f"{action} request failed") from err

    async def login(
        self, email: str, password: str, twofa: str | None = None
    ) -> LoginResponse:
        """Log in with account credentials and obtain the user secret."""
        data = {"email": email, "password": password}
        if twofa:
            data["twofa"] = twofa

        payload = await self._request(
            "post", "/users/login.json", action="Login", data=data
        )
        response = LoginResponse.from_dict(payload)
        if not response.is_valid:
            raise PushoverResponseError(
                response.status, f"Error logging in: {response.describe()}"
            )
        return response

    async def register(
        self, secret: str, name: str | None = None
    ) -> RegistrationResponse:
        """Register this client as an Open Client device."""
        data = {
            "secret": secret,
            "name": name or f"pullaway-{int(time.time())}",
            "os": "O",
        }
        payload = await self._request(
            "post", "/devices.json", action="Registration", data=data
        )
        response = RegistrationResponse.from_dict(payload)
        if not response.is_valid:
            raise PushoverResponseError(
                response.status, f"Error registering: {response.describe()}"
            )
        return response

    async def download_messages(self, secret: str, device_id: str) -> DownloadResponse:
        """Download all pending messages for a device."""
        payload = await self._request(
            "get",
            "/messages.json",
            action="Download",
            params={"secret": secret, "device_id": device_id},
        )
        response = DownloadResponse.from_dict(payload)
        if not response.is_valid:
            raise PushoverResponseError(
                response.status, f"Error downloading: {response.describe()}"
            )
        return response

    async def delete_messages(
        self, secret: str, device_id: str, message_id: int
    ) -> DeleteResponse:
        """Delete all messages up to and including message_id."""
        payload = await self._request(
            "post",
            f"/devices/{device_id}/update_highest_message.json",
            action="Delete",
            data={"secret": secret, "message": str(message_id)},
        )
        response = DeleteResponse.from_dict(payload)
        if not response.is_valid:
            raise PushoverResponseError(
                response.status, f"Error deleting: {response.describe()}"
            )
        return response

    async def download_and_delete_messages(
        self, secret: str, device_id: str
    ) -> DownloadResponse:
        """Download pending messages, then acknowledge them up to the watermark."""
        response = await self.download_messages(secret, device_id)
        if response.messages:
            _LOGGER.debug(
                "[%s] Deleting %d messages up to %d",
                device_id,
                len(response.messages),
                response.max_id,
            )
            await self.delete_messages(secret, device_id, response.max_id)
        return response


class AuthorizedClient:
    """REST client bound to registered device credentials."""

    def __init__(self, http: PushoverHttpClient, credentials: Credentials) -> None:
        self.http = http
        self.credentials = credentials

    async def download(self) -> DownloadResponse:
        return await self.http.download_messages(
            self.credentials.secret, self.credentials.device_id
        )

    async def delete_messages(self, message_id: int) -> DeleteResponse:
        return await self.http.delete_messages(
            self.credentials.secret, self.credentials.device_id, message_id
        )

    async def download_and_delete_messages(self) -> DownloadResponse:
        return await self.http.download_and_delete_messages(
            self.credentials.secret, self.credentials.device_id
        )
