from __future__ import annotations

import asyncio
import json
from dataclasses import replace

import httpx

from talegate.clients import HttpxTransport
from talegate.config import GenerationConfig
from talegate.providers import DEEPSEEK, ProviderRegistry, default_registry
from talegate.runtime import ConnectionVerifier, ProviderClient
from talegate.store import InMemoryKeyValueStore
from talegate.types import ConnectionStatus


def run_async(coro):
    return asyncio.run(coro)


def _ok_body(text: str = "pong") -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": text}}]}


class _Recorder:
    """httpx mock handler that records requests and replays one canned reply."""

    def __init__(self, status: int = 200, body=None, *, delay_s: float = 0.0, exc: Exception | None = None):
        self.status = status
        self.body = _ok_body() if body is None else body
        self.delay_s = delay_s
        self.exc = exc
        self.requests: list[httpx.Request] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        if self.exc is not None:
            raise self.exc
        if isinstance(self.body, str):
            return httpx.Response(self.status, text=self.body)
        return httpx.Response(self.status, json=self.body)


def _verifier(handler: _Recorder, store=None) -> ConnectionVerifier:
    transport = HttpxTransport(transport=httpx.MockTransport(handler))
    return ConnectionVerifier(
        default_registry(),
        ProviderClient(transport),
        store=store,
        clock=lambda: 1234.0,
    )


CONFIG = GenerationConfig(provider="deepseek", model="deepseek-chat", api_key="sk-test")


def test_successful_probe_connects_and_records_latency():
    handler = _Recorder()
    verifier = _verifier(handler)

    ok = run_async(verifier.test_connection(CONFIG, "sk-test"))
    status = verifier.snapshot()

    assert ok is True
    assert status.state == "connected"
    assert status.last_error is None
    assert status.last_latency_ms is not None and status.last_latency_ms >= 0
    assert status.last_checked_at == 1234.0
    assert len(handler.requests) == 1

    sent = json.loads(handler.requests[0].content)
    assert sent["max_tokens"] == 8
    assert handler.requests[0].headers["Authorization"] == "Bearer sk-test"


def test_server_error_disconnects_with_server_error_class():
    verifier = _verifier(_Recorder(status=500, body={"error": {"message": "upstream"}}))

    ok = run_async(verifier.test_connection(CONFIG, "sk-test"))
    status = verifier.snapshot()

    assert ok is False
    assert status.state == "disconnected"
    assert status.last_error.error_class == "ServerError"
    assert "upstream" in status.last_error.message


def test_ok_status_with_empty_body_is_not_connected():
    verifier = _verifier(_Recorder(status=200, body=""))

    assert run_async(verifier.test_connection(CONFIG, "sk-test")) is False
    assert verifier.snapshot().state == "disconnected"
    assert verifier.snapshot().last_error.error_class == "SchemaError"


def test_blank_content_is_schema_error():
    verifier = _verifier(_Recorder(body=_ok_body("   ")))
    assert run_async(verifier.test_connection(CONFIG, "sk-test")) is False
    assert verifier.snapshot().last_error.error_class == "SchemaError"


def test_auth_rejection_maps_to_auth_error():
    verifier = _verifier(_Recorder(status=401, body={"error": {"message": "invalid key"}}))
    run_async(verifier.test_connection(CONFIG, "sk-test"))
    assert verifier.snapshot().last_error.error_class == "AuthError"


def test_connection_failure_maps_to_network_error():
    verifier = _verifier(_Recorder(exc=httpx.ConnectError("refused")))
    run_async(verifier.test_connection(CONFIG, "sk-test"))
    assert verifier.snapshot().last_error.error_class == "NetworkError"


def test_missing_secret_fails_without_network_call():
    handler = _Recorder()
    verifier = _verifier(handler)

    assert run_async(verifier.test_connection(CONFIG, "")) is False
    status = verifier.snapshot()
    assert status.state == "disconnected"
    assert status.last_error.error_class == "ConfigError"
    assert status.last_latency_ms is None
    assert handler.requests == []


def test_custom_provider_without_endpoint_fails_without_network_call():
    handler = _Recorder()
    verifier = _verifier(handler)
    config = GenerationConfig(provider="custom", model="llama3", api_key="k")

    assert run_async(verifier.test_connection(config, "k")) is False
    assert verifier.snapshot().last_error.error_class == "ConfigError"
    assert handler.requests == []


def test_concurrent_tests_issue_single_network_call():
    handler = _Recorder(delay_s=0.05)
    verifier = _verifier(handler)

    async def scenario():
        return await asyncio.gather(
            verifier.test_connection(CONFIG, "sk-test"),
            verifier.test_connection(CONFIG, "sk-test"),
        )

    results = run_async(scenario())
    assert sorted(results) == [False, True]
    assert len(handler.requests) == 1
    assert verifier.snapshot().state == "connected"


def test_timeout_disconnects_with_timeout_error():
    registry = ProviderRegistry([replace(DEEPSEEK, timeout_ms=20)])
    handler = _Recorder(delay_s=0.5)
    verifier = ConnectionVerifier(
        registry,
        ProviderClient(HttpxTransport(transport=httpx.MockTransport(handler))),
    )

    assert run_async(verifier.test_connection(CONFIG, "sk-test")) is False
    assert verifier.snapshot().last_error.error_class == "TimeoutError"


def test_status_is_persisted_and_restored():
    store = InMemoryKeyValueStore()
    verifier = _verifier(_Recorder(), store=store)
    run_async(verifier.test_connection(CONFIG, "sk-test"))

    fresh = _verifier(_Recorder(), store=store)
    restored = run_async(fresh.restore())
    assert restored.state == "connected"
    assert restored.provider == "deepseek"


def test_persisted_testing_state_restores_as_unknown():
    store = InMemoryKeyValueStore()
    run_async(store.set("connection_status", json.dumps({"state": "testing", "provider": "deepseek"})))

    restored = run_async(_verifier(_Recorder(), store=store).restore())
    assert restored.state == "unknown"
    assert ConnectionStatus.from_dict({"state": "bogus"}).state == "unknown"


def test_invalidate_resets_to_unknown():
    verifier = _verifier(_Recorder())
    run_async(verifier.test_connection(CONFIG, "sk-test"))
    run_async(verifier.invalidate())
    assert verifier.snapshot().state == "unknown"
