"""Response models for the Pushover Open Client REST API."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any, TypeVar

_T = TypeVar("_T")


def _known_fields(cls: type[_T], data: dict[str, Any]) -> dict[str, Any]:
    """Pick the keys of data that map to dataclass fields of cls."""
    names = {f.name for f in fields(cls)}  # type: ignore[arg-type]
    return {key: value for key, value in data.items() if key in names}


def _normalize_errors(value: Any) -> list[str]:
    """Flatten the API's list or per-field dict error payloads."""
    if not value:
        return []
    if isinstance(value, dict):
        return [
            f"{name}: {message}"
            for name, messages in value.items()
            for message in (messages if isinstance(messages, list) else [messages])
        ]
    if isinstance(value, list):
        return [str(item) for item in value]
    return [str(value)]


@dataclass
class ApiResponse:
    """Common envelope of every API response."""

    status: int = 0
    request: str = ""
    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """Return True when the API reported success."""
        return self.status == 1

    def describe(self) -> str:
        """Describe the response for error messages."""
        return f"status: {self.status}, request: {self.request}, errors: {self.errors}"

    @classmethod
    def _envelope(cls, data: dict[str, Any]) -> dict[str, Any]:
        return {
            "status": int(data.get("status", 0)),
            "request": str(data.get("request", "")),
            "errors": _normalize_errors(data.get("errors")),
        }


@dataclass
class LoginResponse(ApiResponse):
    """Response of /users/login.json."""

    id: str = ""
    secret: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LoginResponse:
        return cls(
            id=str(data.get("id", "")),
            secret=str(data.get("secret", "")),
            **cls._envelope(data),
        )


@dataclass
class RegistrationResponse(ApiResponse):
    """Response of /devices.json."""

    id: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RegistrationResponse:
        return cls(id=str(data.get("id", "")), **cls._envelope(data))


@dataclass
class Message:
    """A single message downloaded from the API."""

    id: int = 0
    id_str: str = ""
    message: str = ""
    app: str = ""
    aid: int = 0
    aid_str: str = ""
    icon: str = ""
    date: int = 0
    priority: int = 0
    acked: int = 0
    umid: int = 0
    umid_str: str = ""
    title: str = ""
    dispatched_date: int = 0
    url: str = ""
    queued_date: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Message:
        return cls(**_known_fields(cls, data))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class User:
    """Account details returned alongside downloaded messages."""

    quiet_hours: bool = False
    is_android_licensed: bool = False
    is_ios_licensed: bool = False
    is_desktop_licensed: bool = False
    email: str = ""
    created_at: int = 0
    first_email_alias: str = ""
    show_tipjar: str = ""
    show_team_ad: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> User:
        return cls(**_known_fields(cls, data))


@dataclass
class Device:
    """Device settings returned alongside downloaded messages."""

    name: str = ""
    encryption_enabled: bool = False
    default_sound: str = ""
    always_use_default_sound: bool = False
    default_high_priority_sound: str = ""
    always_use_default_high_priority_sound: bool = False
    dismissal_sync_enabled: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Device:
        return cls(**_known_fields(cls, data))


@dataclass
class DownloadResponse(ApiResponse):
    """Response of /messages.json."""

    messages: list[Message] = field(default_factory=list)
    user: User = field(default_factory=User)
    device: Device = field(default_factory=Device)

    @property
    def max_id(self) -> int:
        """Highest message id, the watermark used to acknowledge messages."""
        return max((message.id for message in self.messages), default=0)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DownloadResponse:
        return cls(
            messages=[Message.from_dict(item) for item in data.get("messages") or []],
            user=User.from_dict(data.get("user") or {}),
            device=Device.from_dict(data.get("device") or {}),
            **cls._envelope(data),
        )


@dataclass
class DeleteResponse(ApiResponse):
    """Response of /devices/<id>/update_highest_message.json."""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DeleteResponse:
        return cls(**cls._envelope(data))
