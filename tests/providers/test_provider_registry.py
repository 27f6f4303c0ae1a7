from __future__ import annotations

import math

import pytest

from talegate.clients import build_chat_request
from talegate.config import GenerationConfig, merge_config
from talegate.errors import ConfigError
from talegate.providers import (
    CUSTOM,
    DEEPSEEK,
    VOLCANO,
    ProviderProfile,
    ProviderRegistry,
    clamp_max_tokens,
    clamp_temperature,
    default_registry,
    resolve_endpoint,
    resolve_model,
)


def test_default_registry_lists_builtin_providers():
    registry = default_registry()
    assert registry.list_ids() == ["custom", "deepseek", "openai", "siliconflow", "volcano"]
    assert "DeepSeek" in registry
    assert registry.get(" DEEPSEEK ") is DEEPSEEK


def test_unknown_provider_is_config_error():
    with pytest.raises(ConfigError):
        default_registry().get("nope")


def test_register_rejects_duplicates_unless_overwrite():
    registry = default_registry()
    extra = ProviderProfile(
        provider_id="deepseek",
        name="Mirror",
        endpoint="https://mirror.example/v1/chat/completions",
        models=("m1",),
        default_model="m1",
    )
    with pytest.raises(ConfigError):
        registry.register(extra)
    registry.register(extra, overwrite=True)
    assert registry.get("deepseek").name == "Mirror"


def test_registries_are_independent():
    first = default_registry()
    second = default_registry()
    first.register(
        ProviderProfile(provider_id="local", name="Local", endpoint="http://127.0.0.1:9/x", models=("a",), default_model="a")
    )
    assert "local" in first
    assert "local" not in second


def test_clamp_temperature_bounds_to_profile_range():
    assert clamp_temperature(VOLCANO, 1.7) == 1.0
    assert clamp_temperature(VOLCANO, -3) == 0.0
    assert clamp_temperature(DEEPSEEK, 1.3) == 1.3
    assert clamp_temperature(DEEPSEEK, math.nan) == 0.0


def test_clamp_max_tokens():
    assert clamp_max_tokens(VOLCANO, 0) == 1
    assert clamp_max_tokens(VOLCANO, 10**6) == VOLCANO.max_output_tokens


def test_custom_endpoint_required_and_normalised():
    config = GenerationConfig(provider="custom", model="llama3")
    with pytest.raises(ConfigError):
        resolve_endpoint(CUSTOM, config)

    url = resolve_endpoint(CUSTOM, GenerationConfig(provider="custom", model="x", endpoint="http://localhost:11434/v1/"))
    assert url == "http://localhost:11434/v1/chat/completions"

    full = "https://proxy.example/v1/chat/completions"
    assert resolve_endpoint(CUSTOM, GenerationConfig(provider="custom", endpoint=full)) == full


def test_custom_endpoint_must_be_http_url():
    with pytest.raises(ConfigError):
        resolve_endpoint(CUSTOM, GenerationConfig(provider="custom", endpoint="ftp://host/x"))


def test_resolve_model_defaults_and_rejects_unlisted():
    assert resolve_model(DEEPSEEK, GenerationConfig(model="")) == "deepseek-chat"
    with pytest.raises(ConfigError):
        resolve_model(DEEPSEEK, GenerationConfig(model="gpt-4o"))
    assert resolve_model(CUSTOM, GenerationConfig(provider="custom", model="anything")) == "anything"
    with pytest.raises(ConfigError):
        resolve_model(CUSTOM, GenerationConfig(provider="custom", model=""))


def test_merge_config_clamps_and_resets_model_on_provider_switch():
    registry = default_registry()
    base = GenerationConfig(provider="openai", model="gpt-4o", temperature=1.8)

    merged = merge_config(base, {"provider": "volcano"}, registry)
    assert merged.provider == "volcano"
    assert merged.model == VOLCANO.default_model
    assert merged.temperature == 1.0

    merged = merge_config(merged, {"maxTokens": 999999, "apiKey": "  sk-x  "}, registry)
    assert merged.max_tokens == VOLCANO.max_output_tokens
    assert merged.api_key == "sk-x"


def test_merge_config_unknown_provider_is_config_error():
    with pytest.raises(ConfigError):
        merge_config(GenerationConfig(), {"provider": "mystery"}, default_registry())


def test_persisted_config_never_holds_plaintext():
    config = GenerationConfig(provider="deepseek", model="deepseek-chat", api_key="sk-plain")
    row = config.to_persisted()
    assert "api_key" not in row
    assert "sk-plain" not in str(row)
    assert "sk-plain" not in repr(config)
    assert GenerationConfig.from_persisted(row).api_key is None


def test_standard_shape_sends_system_and_user_messages():
    config = GenerationConfig(provider="deepseek", model="deepseek-chat", top_p=0.9, system_prompt="SYS")
    request = build_chat_request(DEEPSEEK, config, "hello", "sk-123")

    assert request.url == DEEPSEEK.endpoint
    assert request.headers["Authorization"] == "Bearer sk-123"
    assert request.headers["Content-Type"] == "application/json"
    assert [m["role"] for m in request.body["messages"]] == ["system", "user"]
    assert request.body["top_p"] == 0.9
    assert request.timeout_s == DEEPSEEK.timeout_s


def test_minimal_shape_folds_system_prompt_into_user_message():
    config = GenerationConfig(provider="volcano", model="volcengine-gpt", temperature=1.9, top_p=0.5, system_prompt="SYS")
    request = build_chat_request(VOLCANO, config, "hello", "key", max_tokens=1)

    messages = request.body["messages"]
    assert len(messages) == 1
    assert messages[0]["role"] == "user"
    assert messages[0]["content"].startswith("SYS")
    assert messages[0]["content"].endswith("hello")
    assert "top_p" not in request.body
    assert request.body["temperature"] == 1.0
    assert request.body["max_tokens"] == 1


def test_build_request_requires_secret():
    with pytest.raises(ConfigError):
        build_chat_request(DEEPSEEK, GenerationConfig(), "hi", "   ")


def test_merge_config_clamps_infinite_and_rejects_nan_max_tokens():
    registry = default_registry()
    base = GenerationConfig(provider="deepseek", model=DEEPSEEK.default_model)

    merged = merge_config(base, {"max_tokens": float("inf")}, registry)
    assert merged.max_tokens == DEEPSEEK.max_output_tokens

    merged = merge_config(base, {"max_tokens": float("-inf")}, registry)
    assert merged.max_tokens == 1

    merged = merge_config(base, {"max_tokens": float("nan")}, registry)
    assert merged.max_tokens == base.max_tokens
