"""Command line entry point for pullaway."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from collections.abc import Callable, Sequence

import aiohttp

from .errors import PushoverError, PushoverFatalError
from .http import AuthorizedClient, PushoverHttpClient
from .listener import AuthorizedListener
from .models import Message
from .protocol import Credentials

_LOGGER = logging.getLogger(__name__)

ENV_SECRET = "PULLAWAY_SECRET"
ENV_DEVICE_ID = "PULLAWAY_DEVICE_ID"


def display_json(message: Message) -> None:
    print(json.dumps(message.to_dict()), flush=True)


def display_text(message: Message) -> None:
    line = f"From {message.app}: {message.title} - {message.message}"
    if message.url:
        line += f" - URL: {message.url}"
    print(line, flush=True)


DISPLAY_FORMATS: dict[str, Callable[[Message], None]] = {
    "json": display_json,
    "text": display_text,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pullaway", description="Pushover Open Client push listener"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="enable debug logging"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    login = sub.add_parser(
        "login", help="sign in and register this client as a device"
    )
    login.add_argument("--email", required=True)
    login.add_argument("--password", required=True)
    login.add_argument("--twofa", default=None, help="two factor code, if enabled")
    login.add_argument("--name", default=None, help="device short name (max 25)")

    listen = sub.add_parser("listen", help="listen for incoming messages")
    listen.add_argument(
        "--format",
        choices=sorted(DISPLAY_FORMATS),
        default="json",
        help="output format (default: json)",
    )
    listen.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS,
        help="enable debug logging",
    )
    return parser


def credentials_from_env() -> Credentials | None:
    """Read device credentials from the environment."""
    secret = os.environ.get(ENV_SECRET, "")
    device_id = os.environ.get(ENV_DEVICE_ID, "")
    if not secret or not device_id:
        return None
    return Credentials(device_id=device_id, secret=secret)


async def run_login(args: argparse.Namespace) -> int:
    async with aiohttp.ClientSession() as session:
        http = PushoverHttpClient(session)
        try:
            login = await http.login(args.email, args.password, args.twofa)
            name = args.name[:25] if args.name else None
            registration = await http.register(login.secret, name)
        except PushoverError as err:
            _LOGGER.error("Login failed: %s", err)
            return 1

    print(f"{ENV_SECRET}={login.secret}")
    print(f"{ENV_DEVICE_ID}={registration.id}")
    return 0


async def run_listen(args: argparse.Namespace) -> int:
    credentials = credentials_from_env()
    if credentials is None:
        _LOGGER.error(
            "No credentials found, set %s and %s (see 'pullaway login')",
            ENV_SECRET,
            ENV_DEVICE_ID,
        )
        return 1

    display = DISPLAY_FORMATS[args.format]

    async with aiohttp.ClientSession() as session:
        client = AuthorizedClient(PushoverHttpClient(session), credentials)

        async def download_and_display() -> None:
            try:
                response = await client.download_and_delete_messages()
            except PushoverError as err:
                _LOGGER.error("Error fetching messages: %s", err)
                return
            for message in response.messages:
                display(message)

        listener = AuthorizedListener(client)
        try:
            await listener.listen_with_reconnect(download_and_display)
        except PushoverFatalError as err:
            _LOGGER.error("Error listening: %s", err)
            return 1
        except Exception:
            _LOGGER.exception("Error handling messages")
            return 1

    return 0


COMMANDS = {
    "login": run_login,
    "listen": run_listen,
}


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        return asyncio.run(COMMANDS[args.command](args))
    except KeyboardInterrupt:
        return 130
