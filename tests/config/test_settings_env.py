from __future__ import annotations

from pathlib import Path

from talegate.settings import GatewaySettings


def test_defaults_match_documented_bounds():
    settings = GatewaySettings()
    assert settings.cache_capacity == 100
    assert settings.cache_ttl_s == 7 * 24 * 60 * 60
    assert settings.kdf_iterations == 100_000
    assert settings.max_retries == 0
    assert settings.lazy_verify is False


def test_from_env_reads_prefixed_variables(monkeypatch):
    monkeypatch.setenv("TALEGATE_PROVIDER", "volcano")
    monkeypatch.setenv("TALEGATE_STORE", "file")
    monkeypatch.setenv("TALEGATE_STORE_PATH", "/tmp/tg.json")
    monkeypatch.setenv("TALEGATE_CACHE_CAPACITY", "5")
    monkeypatch.setenv("TALEGATE_MAX_RETRIES", "2")
    monkeypatch.setenv("TALEGATE_LAZY_VERIFY", "yes")
    monkeypatch.setenv("TALEGATE_PORT", "9000")

    settings = GatewaySettings.from_env()

    assert settings.default_provider == "volcano"
    assert settings.store_backend == "file"
    assert settings.store_path == Path("/tmp/tg.json")
    assert settings.cache_capacity == 5
    assert settings.lazy_verify is True
    assert settings.port == 9000
    assert settings.retry_policy().max_retries == 2
    assert settings.cache_policy().capacity == 5
