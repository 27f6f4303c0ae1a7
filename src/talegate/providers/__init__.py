"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: providers/__init__.py.
"""

from .builtin import BUILTIN_PROFILES, CUSTOM, DEEPSEEK, OPENAI, SILICONFLOW, VOLCANO
from .contracts import ENDPOINT_PLACEHOLDER, ProviderProfile, RequestShapeId
from .registry import (
    ProviderRegistry,
    clamp_max_tokens,
    clamp_temperature,
    default_registry,
    resolve_endpoint,
    resolve_model,
)

__all__ = [
    "ProviderProfile",
    "RequestShapeId",
    "ENDPOINT_PLACEHOLDER",
    "ProviderRegistry",
    "default_registry",
    "clamp_temperature",
    "clamp_max_tokens",
    "resolve_endpoint",
    "resolve_model",
    "BUILTIN_PROFILES",
    "DEEPSEEK",
    "VOLCANO",
    "OPENAI",
    "SILICONFLOW",
    "CUSTOM",
]
