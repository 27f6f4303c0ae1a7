"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

This module defines the provider-agnostic types shared by the gateway layers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal, TypeAlias, get_args

if TYPE_CHECKING:
    from .errors import GatewayError


JSONPrimitive: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]
JSONObject: TypeAlias = dict[str, JSONValue]

Role = Literal["user", "assistant", "system"]

ContentType = Literal[
    "event",
    "dialogue",
    "family",
    "character",
    "note",
    "mail",
    "relationship",
    "asset-skills",
    "history",
    "explore",
]
CONTENT_TYPES: tuple[str, ...] = get_args(ContentType)

ConnectionState = Literal["unknown", "testing", "connected", "disconnected"]

ResultSource = Literal["provider", "cache", "fallback", "none"]


@dataclass(frozen=True, slots=True)
class Message:
    """Normalized chat message payload."""
    role: Role
    content: str


@dataclass(frozen=True, slots=True)
class ChatRequest:
    """
    Fully resolved provider call: where to POST, with which headers and body.

    Built by a request shape; the transport sends it unchanged.
    """

    url: str
    headers: dict[str, str]
    body: JSONObject
    timeout_s: float
    provider_id: str
    model: str


@dataclass(frozen=True, slots=True)
class ChatResponse:
    """Normalized successful provider reply."""
    text: str
    status_code: int
    latency_ms: int
    raw: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ErrorInfo:
    """Classified failure as exposed through `ConnectionStatus.last_error`."""
    error_class: str
    message: str
    remediation: str

    @classmethod
    def from_error(cls, error: "GatewayError") -> "ErrorInfo":
        return cls(
            error_class=error.error_class,
            message=str(error),
            remediation=error.remediation,
        )

    def to_dict(self) -> JSONObject:
        return {
            "error_class": self.error_class,
            "message": self.message,
            "remediation": self.remediation,
        }

    @classmethod
    def from_dict(cls, row: Any) -> "ErrorInfo | None":
        if not isinstance(row, dict):
            return None
        return cls(
            error_class=str(row.get("error_class", "")),
            message=str(row.get("message", "")),
            remediation=str(row.get("remediation", "")),
        )


@dataclass(frozen=True, slots=True)
class ConnectionStatus:
    """Read-only snapshot of the verifier state machine."""
    state: ConnectionState = "unknown"
    last_latency_ms: int | None = None
    last_checked_at: float | None = None
    last_error: ErrorInfo | None = None
    provider: str | None = None

    @property
    def connected(self) -> bool:
        return self.state == "connected"

    def to_dict(self) -> JSONObject:
        return {
            "state": self.state,
            "last_latency_ms": self.last_latency_ms,
            "last_checked_at": self.last_checked_at,
            "last_error": self.last_error.to_dict() if self.last_error else None,
            "provider": self.provider,
        }

    @classmethod
    def from_dict(cls, row: Any) -> "ConnectionStatus":
        if not isinstance(row, dict):
            return cls()
        state = row.get("state")
        # A probe cannot survive a restart, so a persisted `testing` is unknown.
        if state not in ("connected", "disconnected"):
            state = "unknown"
        latency = row.get("last_latency_ms")
        checked = row.get("last_checked_at")
        provider = row.get("provider")
        return cls(
            state=state,
            last_latency_ms=int(latency) if isinstance(latency, (int, float)) else None,
            last_checked_at=float(checked) if isinstance(checked, (int, float)) else None,
            last_error=ErrorInfo.from_dict(row.get("last_error")),
            provider=provider if isinstance(provider, str) else None,
        )


@dataclass(frozen=True, slots=True)
class UsageStats:
    """Live provider calls: when the last one went out and how many today."""
    last_call_at: float | None = None
    day: str = ""
    today_calls: int = 0

    def to_dict(self) -> JSONObject:
        return {
            "last_call_at": self.last_call_at,
            "day": self.day,
            "today_calls": self.today_calls,
        }

    @classmethod
    def from_dict(cls, row: Any) -> "UsageStats":
        if not isinstance(row, dict):
            return cls()
        last = row.get("last_call_at")
        day = row.get("day")
        calls = row.get("today_calls")
        return cls(
            last_call_at=float(last) if isinstance(last, (int, float)) else None,
            day=day if isinstance(day, str) else "",
            today_calls=max(0, int(calls)) if isinstance(calls, int) and not isinstance(calls, bool) else 0,
        )


@dataclass(frozen=True, slots=True)
class GenerationResult:
    """
    Outcome of one `generate()` call.

    `succeeded` is true for live, cached and fallback content alike; only a
    missing credential or an unusable configuration yields `False`.
    """

    succeeded: bool
    content_type: str
    payload: JSONObject | None = None
    diagnostic_message: str = ""
    source: ResultSource = "provider"

    def to_dict(self) -> JSONObject:
        return {
            "succeeded": self.succeeded,
            "content_type": self.content_type,
            "payload": self.payload,
            "diagnostic_message": self.diagnostic_message,
            "source": self.source,
        }
