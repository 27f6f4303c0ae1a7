"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Content gateway: the single entry point the game talks to.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import replace
from typing import Any

from ..cache.base import cache_key
from ..cache.response import ResponseCache
from ..clients.shapes import build_chat_request
from ..clients.transport import ChatTransport, HttpxTransport
from ..config import GenerationConfig, merge_config
from ..content.extract import extract_payload
from ..content.fallback import fallback_payload
from ..content.templates import PromptLibrary
from ..errors import ConfigError, GatewayError
from ..providers.registry import ProviderRegistry, default_registry
from ..settings import GatewaySettings
from ..store.base import KeyValueStore
from ..store.memory import InMemoryKeyValueStore
from ..types import ConnectionStatus, GenerationResult, JSONObject, UsageStats
from ..vault import CredentialVault, EncryptedSecret
from .classify import ErrorClassifier, classify_error
from .client import ProviderClient
from .usage import CallCounter
from .verifier import ConnectionVerifier

logger = logging.getLogger("talegate.gateway")

CONFIG_STORE_KEY = "config"
MISSING_CREDENTIAL = "missing credential"

# Fields whose change invalidates the last connection verdict.
_CONNECTION_FIELDS = ("provider", "model", "endpoint", "api_key")


class ContentGateway:
    """
    Generation pipeline plus config, credential and status management.

    `generate()` and `test_connection()` never raise; credential operations
    raise `ConfigError` / `DecryptionError` for the caller to surface.
    """

    def __init__(
        self,
        settings: GatewaySettings | None = None,
        *,
        registry: ProviderRegistry | None = None,
        store: KeyValueStore | None = None,
        transport: ChatTransport | None = None,
        prompts: PromptLibrary | None = None,
        classifier: ErrorClassifier | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.settings = settings or GatewaySettings()
        self.registry = registry or default_registry()
        self.store = store if store is not None else InMemoryKeyValueStore()
        self.prompts = prompts or PromptLibrary()
        self.vault = CredentialVault(iterations=self.settings.kdf_iterations)

        cache_policy = self.settings.cache_policy()
        self.cache = ResponseCache(
            capacity=cache_policy.capacity,
            ttl_s=cache_policy.ttl_s,
            store=self.store,
            clock=clock,
        )
        self.usage = CallCounter(store=self.store, clock=clock)
        self.client = ProviderClient(
            transport or HttpxTransport(),
            retry_policy=self.settings.retry_policy(),
            classifier=classifier,
            usage=self.usage,
        )
        self.verifier = ConnectionVerifier(
            self.registry,
            self.client,
            store=self.store,
            probe_max_tokens=self.settings.probe_max_tokens,
            clock=clock,
        )
        self._config = self._initial_config()

    def _initial_config(self) -> GenerationConfig:
        provider = self.settings.default_provider.strip().lower()
        model = ""
        if provider in self.registry:
            model = self.registry.get(provider).default_model
        return GenerationConfig(provider=provider, model=model)

    # --- generation ---

    async def generate(
        self,
        content_type: str,
        context: Mapping[str, Any] | None = None,
    ) -> GenerationResult:
        """Produce content for `content_type`. Never raises."""
        kind = str(content_type or "").strip().lower()
        config = self._config

        try:
            context = dict(context or {})
            prompt = self.prompts.render(kind, context)
        except Exception as exc:
            logger.warning("Could not build the prompt for %s: %s", kind, exc)
            return GenerationResult(False, kind, None, str(exc), "none")

        key = cache_key(self._model_for(config), prompt)
        hit = self.cache.get(key)
        if hit is not None:
            logger.debug("Cache hit for %s", kind)
            return GenerationResult(True, kind, hit.get("payload"), "", "cache")

        secret = (config.api_key or "").strip()
        if not secret:
            return GenerationResult(False, kind, None, MISSING_CREDENTIAL, "none")

        try:
            profile = self.registry.get(config.provider)
            request = build_chat_request(profile, config, prompt, secret)
        except ConfigError as exc:
            return GenerationResult(False, kind, None, str(exc), "none")

        if self.settings.lazy_verify and self.verifier.snapshot().state == "unknown":
            if not await self.verifier.test_connection(config, secret):
                status = self.verifier.snapshot()
                if status.state == "disconnected" and status.last_error is not None:
                    detail = status.last_error
                    return self._fallback(kind, prompt, context, detail.error_class, detail.message)

        try:
            response = await self.client.complete(request)
        except Exception as exc:
            error = exc if isinstance(exc, GatewayError) else classify_error(exc)
            return self._fallback(kind, prompt, context, error.error_class, str(error))

        payload = extract_payload(kind, response.text)
        await self.cache.put(key, {"content_type": kind, "payload": payload})
        return GenerationResult(True, kind, payload, "", "provider")

    def _fallback(
        self,
        kind: str,
        prompt: str,
        context: Mapping[str, Any],
        error_class: str,
        detail: str,
    ) -> GenerationResult:
        logger.warning("Provider call for %s failed (%s); using fallback content", kind, error_class)
        return GenerationResult(
            True,
            kind,
            fallback_payload(kind, prompt, context),
            f"{error_class}: {detail}, fallback content used",
            "fallback",
        )

    def _model_for(self, config: GenerationConfig) -> str:
        if config.model:
            return config.model
        if config.provider in self.registry:
            return self.registry.get(config.provider).default_model
        return ""

    # --- config & credentials ---

    def get_config(self) -> GenerationConfig:
        return self._config

    async def set_config(self, partial: Mapping[str, Any]) -> GenerationConfig:
        """Merge `partial`, clamp to the provider profile and persist."""
        merged = merge_config(self._config, partial, self.registry)
        changed = any(getattr(merged, name) != getattr(self._config, name) for name in _CONNECTION_FIELDS)
        self._config = merged
        if changed:
            await self.verifier.invalidate()
        await self._persist_config()
        return merged

    async def save_credential(self, password: str, secret: str | None = None) -> EncryptedSecret:
        """Encrypt the API key under `password` and persist the sealed form."""
        plaintext = (secret if secret is not None else self._config.api_key or "").strip()
        if not plaintext:
            raise ConfigError(MISSING_CREDENTIAL)
        if not password:
            raise ConfigError("A passphrase is required to store the API key")
        sealed = await self.vault.encrypt(password, plaintext)
        previous = self._config.api_key
        self._config = replace(self._config, api_key=plaintext, encrypted_secret=sealed)
        if previous != plaintext:
            await self.verifier.invalidate()
        await self._persist_config()
        return sealed

    async def load_credential(self, password: str) -> None:
        """Unlock the stored API key into memory; raises `DecryptionError` on mismatch."""
        sealed = self._config.encrypted_secret
        if sealed is None:
            raise ConfigError("No stored credential to unlock")
        plaintext = await self.vault.decrypt(password, sealed)
        self._config = replace(self._config, api_key=plaintext)

    async def forget_credential(self) -> None:
        self._config = replace(self._config, api_key=None, encrypted_secret=None)
        await self.verifier.invalidate()
        await self._persist_config()

    async def _persist_config(self) -> None:
        try:
            await self.store.set(CONFIG_STORE_KEY, json.dumps(self._config.to_persisted(), ensure_ascii=False))
        except Exception:
            logger.warning("Failed to persist generation config", exc_info=True)

    # --- status ---

    async def test_connection(
        self,
        config: GenerationConfig | Mapping[str, Any] | None = None,
    ) -> bool:
        """Probe with the current config, or with `config` merged over it without saving."""
        if config is None:
            candidate = self._config
        elif isinstance(config, GenerationConfig):
            candidate = config
        else:
            try:
                candidate = merge_config(self._config, config, self.registry)
            except ConfigError as exc:
                provider = str(config.get("provider") or self._config.provider)
                return await self.verifier.reject(exc, provider=provider)
        return await self.verifier.test_connection(candidate, candidate.api_key)

    def get_status(self) -> ConnectionStatus:
        return self.verifier.snapshot()

    def get_usage(self) -> UsageStats:
        return self.usage.snapshot()

    # --- lifecycle ---

    async def restore(self) -> None:
        """Load config, cached responses, last status and call usage from the store."""
        try:
            blob = await self.store.get(CONFIG_STORE_KEY)
        except Exception:
            logger.warning("Failed to read persisted generation config", exc_info=True)
            blob = None
        if blob:
            try:
                row: JSONObject = json.loads(blob)
            except json.JSONDecodeError:
                logger.warning("Persisted generation config is corrupt; keeping defaults")
            else:
                restored = GenerationConfig.from_persisted(row)
                self._config = replace(restored, api_key=self._config.api_key)
        await self.cache.load()
        await self.verifier.restore()
        await self.usage.restore()

    async def clear_cache(self) -> None:
        await self.cache.clear()

    async def aclose(self) -> None:
        await self.client.aclose()
