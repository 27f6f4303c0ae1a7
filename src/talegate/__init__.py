"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: __init__.py.
"""

from __future__ import annotations

from .cache import CacheEntry, ResponseCache, cache_key
from .clients import HttpxTransport, build_chat_request, parse_chat_response
from .config import GenerationConfig, merge_config
from .content import PromptLibrary, extract_payload, fallback_payload
from .errors import (
    AuthError,
    ConfigError,
    DecryptionError,
    GatewayError,
    NetworkError,
    NotFoundError,
    ProviderTimeoutError,
    RateLimitError,
    RequestError,
    SchemaError,
    ServerError,
    TransportError,
)
from .factory import create_gateway
from .providers import ProviderProfile, ProviderRegistry, default_registry
from .runtime import ConnectionVerifier, ContentGateway, RetryPolicy
from .settings import GatewaySettings
from .store import create_store
from .types import (
    CONTENT_TYPES,
    ConnectionStatus,
    ContentType,
    ErrorInfo,
    GenerationResult,
    UsageStats,
)
from .vault import CredentialVault, EncryptedSecret, decrypt, derive_key, encrypt

__all__ = [
    "create_gateway",
    "ContentGateway",
    "ConnectionVerifier",
    "GatewaySettings",
    "GenerationConfig",
    "merge_config",
    "RetryPolicy",
    "ProviderProfile",
    "ProviderRegistry",
    "default_registry",
    "HttpxTransport",
    "build_chat_request",
    "parse_chat_response",
    "ResponseCache",
    "CacheEntry",
    "cache_key",
    "create_store",
    "PromptLibrary",
    "extract_payload",
    "fallback_payload",
    "CredentialVault",
    "EncryptedSecret",
    "derive_key",
    "encrypt",
    "decrypt",
    "CONTENT_TYPES",
    "ContentType",
    "ConnectionStatus",
    "UsageStats",
    "ErrorInfo",
    "GenerationResult",
    "GatewayError",
    "ConfigError",
    "DecryptionError",
    "TransportError",
    "ProviderTimeoutError",
    "NetworkError",
    "AuthError",
    "NotFoundError",
    "RateLimitError",
    "ServerError",
    "RequestError",
    "SchemaError",
]
