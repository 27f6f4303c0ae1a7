"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Failure classification.

A failed provider call is described by a `FailureSignal` (HTTP status,
exception, message) and matched against an ordered table of `ErrorRule`s.
The first matching rule decides the error class; the last rule always
matches and yields `NetworkError`.
"""

from __future__ import annotations

import asyncio
import json
import socket
from collections.abc import Callable, Iterable
from dataclasses import dataclass

import httpx
from pydantic import ValidationError

from ..errors import (
    AuthError,
    GatewayError,
    NetworkError,
    NotFoundError,
    ProviderTimeoutError,
    RateLimitError,
    RequestError,
    SchemaError,
    ServerError,
)

_DETAIL_LIMIT = 200


@dataclass(frozen=True, slots=True)
class FailureSignal:
    """What is known about one failure."""

    status: int | None = None
    exception: BaseException | None = None
    message: str = ""

    @property
    def text(self) -> str:
        parts = [self.message]
        if self.exception is not None:
            parts.append(str(self.exception))
        return " ".join(part for part in parts if part).lower()


@dataclass(frozen=True, slots=True)
class ErrorRule:
    """One row of the classification table."""

    name: str
    predicate: Callable[[FailureSignal], bool]
    error_type: type[GatewayError]
    remediation: str | None = None


def _status_in(*codes: int) -> Callable[[FailureSignal], bool]:
    return lambda signal: signal.status in codes


def _status_range(lo: int, hi: int) -> Callable[[FailureSignal], bool]:
    return lambda signal: signal.status is not None and lo <= signal.status <= hi


def _raised(*types: type[BaseException]) -> Callable[[FailureSignal], bool]:
    return lambda signal: isinstance(signal.exception, types)


def _mentions(*phrases: str) -> Callable[[FailureSignal], bool]:
    return lambda signal: any(phrase in signal.text for phrase in phrases)


def _always(_: FailureSignal) -> bool:
    return True


DEFAULT_RULES: tuple[ErrorRule, ...] = (
    ErrorRule(
        "timeout",
        _raised(asyncio.TimeoutError, TimeoutError, socket.timeout, httpx.TimeoutException),
        ProviderTimeoutError,
    ),
    ErrorRule("auth", _status_in(401, 403), AuthError),
    ErrorRule("not-found", _status_in(404), NotFoundError),
    ErrorRule("rate-limit", _status_in(429), RateLimitError),
    ErrorRule("server", _status_range(500, 599), ServerError),
    ErrorRule("request", _status_range(400, 499), RequestError),
    ErrorRule(
        "schema",
        _raised(json.JSONDecodeError, ValidationError, KeyError, IndexError),
        SchemaError,
    ),
    ErrorRule(
        "cors",
        _mentions("cors", "cross-origin", "failed to fetch"),
        NetworkError,
        "The provider blocked a cross-origin request; use a proxy or a provider that allows it.",
    ),
    ErrorRule(
        "connection",
        _raised(httpx.TransportError, ConnectionError, OSError),
        NetworkError,
    ),
    ErrorRule("phrase-rate-limit", _mentions("rate limit", "too many requests", "quota"), RateLimitError),
    ErrorRule("phrase-timeout", _mentions("timed out", "timeout"), ProviderTimeoutError),
    ErrorRule("phrase-auth", _mentions("unauthorized", "invalid api key", "forbidden"), AuthError),
    ErrorRule(
        "phrase-server",
        _mentions("overloaded", "service unavailable", "temporarily"),
        ServerError,
    ),
    ErrorRule("default", _always, NetworkError),
)


def _detail(signal: FailureSignal) -> str:
    detail = signal.message or (str(signal.exception) if signal.exception else "")
    if signal.status is not None:
        detail = f"HTTP {signal.status}" + (f": {detail}" if detail else "")
    detail = " ".join(detail.split())
    if len(detail) > _DETAIL_LIMIT:
        detail = detail[: _DETAIL_LIMIT - 3] + "..."
    return detail


class ErrorClassifier:
    """
    Ordered rule table; rules are evaluated top to bottom.

    `prepend()` adds rules that win over the defaults, `extend()` adds rules
    just before the final catch-all.
    """

    def __init__(self, rules: Iterable[ErrorRule] = DEFAULT_RULES) -> None:
        self._rules: list[ErrorRule] = list(rules)

    @property
    def rules(self) -> tuple[ErrorRule, ...]:
        return tuple(self._rules)

    def prepend(self, *rules: ErrorRule) -> None:
        self._rules[0:0] = rules

    def extend(self, *rules: ErrorRule) -> None:
        at = len(self._rules)
        if self._rules and self._rules[-1].predicate is _always:
            at -= 1
        self._rules[at:at] = rules

    def classify(self, signal: FailureSignal) -> GatewayError:
        if isinstance(signal.exception, GatewayError) and signal.status is None:
            return signal.exception
        for rule in self._rules:
            if rule.predicate(signal):
                return rule.error_type(_detail(signal), remediation=rule.remediation)
        return NetworkError(_detail(signal))

    def classify_error(self, error: BaseException) -> GatewayError:
        return self.classify(FailureSignal(exception=error))

    def classify_status(self, status: int, message: str = "") -> GatewayError:
        return self.classify(FailureSignal(status=status, message=message))


_DEFAULT = ErrorClassifier()


def classify_failure(signal: FailureSignal) -> GatewayError:
    """Classify with the default table."""
    return _DEFAULT.classify(signal)


def classify_error(error: BaseException) -> GatewayError:
    """Classify one exception; gateway errors pass through unchanged."""
    return _DEFAULT.classify_error(error)
