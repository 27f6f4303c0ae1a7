"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/client.py.
"""

from __future__ import annotations

from ..clients.schema import parse_chat_response
from ..clients.transport import ChatTransport
from ..types import ChatRequest, ChatResponse
from .classify import ErrorClassifier
from .contracts import RetryPolicy
from .retry import call_with_retry
from .timeouts import await_with_timeout
from .usage import CallCounter


class ProviderClient:
    """
    One provider call end to end: timeout, retry, status check, body parse.

    Any failure comes out as a classified `GatewayError` subclass.
    """

    def __init__(
        self,
        transport: ChatTransport,
        *,
        retry_policy: RetryPolicy | None = None,
        classifier: ErrorClassifier | None = None,
        usage: CallCounter | None = None,
    ) -> None:
        self.transport = transport
        self.retry_policy = retry_policy or RetryPolicy()
        self.classifier = classifier or ErrorClassifier()
        self.usage = usage

    async def _once(self, request: ChatRequest) -> ChatResponse:
        reply = await await_with_timeout(self.transport.post(request), request.timeout_s)
        if not reply.ok:
            raise self.classifier.classify_status(reply.status_code, _error_message(reply.body, reply.text))
        text = parse_chat_response(reply.body)
        raw = reply.body if isinstance(reply.body, dict) else {}
        return ChatResponse(
            text=text,
            status_code=reply.status_code,
            latency_ms=reply.latency_ms,
            raw=raw,
        )

    async def complete(
        self,
        request: ChatRequest,
        *,
        retry_policy: RetryPolicy | None = None,
    ) -> ChatResponse:
        if self.usage is not None:
            await self.usage.record()
        return await call_with_retry(
            lambda: self._once(request),
            policy=retry_policy or self.retry_policy,
            classifier=self.classifier,
        )

    async def aclose(self) -> None:
        await self.transport.aclose()


def _error_message(body: object, text: str) -> str:
    # OpenAI-compatible errors: {"error": {"message": ...}}
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
        if isinstance(error, str):
            return error
        if isinstance(body.get("message"), str):
            return body["message"]
    return text.strip()
