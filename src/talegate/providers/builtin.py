"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: providers/builtin.py.
"""

from __future__ import annotations

from .contracts import ENDPOINT_PLACEHOLDER, ProviderProfile

DEEPSEEK = ProviderProfile(
    provider_id="deepseek",
    name="DeepSeek",
    endpoint="https://api.deepseek.com/v1/chat/completions",
    models=("deepseek-chat", "deepseek-V3.2", "deepseek-reasoner"),
    default_model="deepseek-chat",
    timeout_ms=30_000,
    temperature_range=(0.0, 2.0),
    max_output_tokens=8192,
    key_prefix="sk-",
)

VOLCANO = ProviderProfile(
    provider_id="volcano",
    name="Volcano Engine",
    endpoint="https://ark.cn-beijing.volces.com/api/v3/chat/completions",
    models=("volcengine-gpt", "volcengine-4"),
    default_model="volcengine-gpt",
    timeout_ms=20_000,
    temperature_range=(0.0, 1.0),
    max_output_tokens=4096,
    request_shape="minimal",
)

OPENAI = ProviderProfile(
    provider_id="openai",
    name="OpenAI",
    endpoint="https://api.openai.com/v1/chat/completions",
    models=("gpt-4o-mini", "gpt-4o", "gpt-4", "gpt-3.5-turbo"),
    default_model="gpt-4o-mini",
    timeout_ms=30_000,
    temperature_range=(0.0, 2.0),
    max_output_tokens=16384,
    key_prefix="sk-",
)

SILICONFLOW = ProviderProfile(
    provider_id="siliconflow",
    name="SiliconFlow",
    endpoint="https://api.siliconflow.cn/v1/chat/completions",
    models=("deepseek-ai/DeepSeek-V3", "Qwen/Qwen2.5-7B-Instruct", "meta-llama/Meta-Llama-3.1-8B-Instruct"),
    default_model="deepseek-ai/DeepSeek-V3",
    timeout_ms=30_000,
    temperature_range=(0.0, 2.0),
    max_output_tokens=4096,
    key_prefix="sk-",
)

# Any OpenAI-compatible server; endpoint and model come from the user.
CUSTOM = ProviderProfile(
    provider_id="custom",
    name="Custom (OpenAI-compatible)",
    endpoint=ENDPOINT_PLACEHOLDER,
    timeout_ms=30_000,
    temperature_range=(0.0, 2.0),
    accepts_any_model=True,
)

BUILTIN_PROFILES: tuple[ProviderProfile, ...] = (
    DEEPSEEK,
    VOLCANO,
    OPENAI,
    SILICONFLOW,
    CUSTOM,
)
