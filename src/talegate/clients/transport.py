"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

httpx transport: one POST per provider call.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from ..errors import NetworkError, ProviderTimeoutError
from ..types import ChatRequest

logger = logging.getLogger("talegate.transport")


@dataclass(frozen=True, slots=True)
class ProviderReply:
    """Raw outcome of one HTTP round trip, whatever the status code."""

    status_code: int
    body: Any
    text: str
    latency_ms: int

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class ChatTransport(Protocol):
    """Anything able to POST a `ChatRequest` and return a `ProviderReply`."""

    async def post(self, request: ChatRequest) -> ProviderReply: ...

    async def aclose(self) -> None: ...


class HttpxTransport:
    """
    `ChatTransport` backed by `httpx.AsyncClient`.

    Pass `transport=httpx.MockTransport(...)` to fake providers in tests.
    Timeouts surface as `ProviderTimeoutError`, connection failures as
    `NetworkError`; non-2xx replies are returned for the caller to classify.
    """

    def __init__(
        self,
        *,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(transport=transport)

    async def post(self, request: ChatRequest) -> ProviderReply:
        start = time.perf_counter()
        try:
            response = await self._client.post(
                request.url,
                headers=request.headers,
                json=request.body,
                timeout=request.timeout_s,
            )
        except httpx.TimeoutException as exc:
            raise ProviderTimeoutError(
                f"{request.provider_id} did not answer within {request.timeout_s:g}s"
            ) from exc
        except httpx.TransportError as exc:
            raise NetworkError(f"{request.provider_id} unreachable: {exc}") from exc

        latency_ms = int((time.perf_counter() - start) * 1000)
        text = response.text
        try:
            body: Any = response.json() if text.strip() else None
        except (json.JSONDecodeError, UnicodeDecodeError):
            body = None
        logger.debug(
            "provider=%s model=%s status=%s latency_ms=%s",
            request.provider_id,
            request.model,
            response.status_code,
            latency_ms,
        )
        return ProviderReply(
            status_code=response.status_code,
            body=body,
            text=text,
            latency_ms=latency_ms,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
