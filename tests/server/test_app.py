from __future__ import annotations

import httpx
import pytest

from talegate import ContentGateway, GatewaySettings
from talegate.clients import HttpxTransport
from talegate.store import InMemoryKeyValueStore


async def _provider(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"choices": [{"message": {"content": "春风拂面，家宅安宁。"}}]})


def _app():
    pytest.importorskip("fastapi")
    from talegate.server import create_app

    gateway = ContentGateway(
        GatewaySettings(),
        store=InMemoryKeyValueStore(),
        transport=HttpxTransport(transport=httpx.MockTransport(_provider)),
    )
    return create_app(gateway), gateway


def test_health_and_initial_status():
    pytest.importorskip("fastapi")
    from fastapi.testclient import TestClient

    app, _ = _app()
    with TestClient(app) as client:
        health = client.get("/health")
        assert health.status_code == 200
        assert "deepseek" in health.json()["providers"]

        status = client.get("/status").json()
        assert status["state"] == "unknown"
        assert status["usage"]["today_calls"] == 0


def test_config_patch_hides_plaintext_key():
    pytest.importorskip("fastapi")
    from fastapi.testclient import TestClient

    app, _ = _app()
    with TestClient(app) as client:
        patched = client.patch("/config", json={"provider": "volcano", "temperature": 3, "apiKey": "sk-hidden"})
        assert patched.status_code == 200
        body = patched.json()
        assert body["provider"] == "volcano"
        assert body["temperature"] == 1.0
        assert body["has_secret"] is True
        assert "sk-hidden" not in patched.text

        bad = client.patch("/config", json={"provider": "mystery"})
        assert bad.status_code == 400
        assert bad.json()["error_class"] == "ConfigError"


def test_generate_and_connection_endpoints():
    pytest.importorskip("fastapi")
    from fastapi.testclient import TestClient

    app, _ = _app()
    with TestClient(app) as client:
        missing = client.post("/generate/event", json={"context": {}})
        assert missing.status_code == 200
        assert missing.json()["succeeded"] is False
        assert missing.json()["diagnostic_message"] == "missing credential"

        client.patch("/config", json={"apiKey": "sk-test"})
        ok = client.post("/generate/explore", json={"context": {"area": "后花园"}})
        assert ok.json()["payload"] == {"summary": "春风拂面，家宅安宁。"}
        assert ok.json()["source"] == "provider"

        tested = client.post("/connection/test")
        assert tested.json()["connected"] is True
        status = client.get("/status").json()
        assert status["state"] == "connected"
        assert status["usage"]["today_calls"] == 2


def test_credential_endpoints_map_errors():
    pytest.importorskip("fastapi")
    from fastapi.testclient import TestClient

    app, gateway = _app()
    with TestClient(app) as client:
        assert client.post("/credential/unlock", json={"password": "pw"}).status_code == 400

        stored = client.post("/credential", json={"password": "pw", "api_key": "sk-store"})
        assert stored.status_code == 200

        wrong = client.post("/credential/unlock", json={"password": "nope"})
        assert wrong.status_code == 401
        assert wrong.json()["error_class"] == "DecryptionError"

        assert client.post("/credential/unlock", json={"password": "pw"}).json() == {"unlocked": True}
        assert gateway.get_config().api_key == "sk-store"

        assert client.delete("/credential").json() == {"stored": False}
        assert gateway.get_config().encrypted_secret is None
