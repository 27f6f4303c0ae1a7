"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Connection verifier.

State machine `unknown -> testing -> {connected, disconnected}`. The only
way into `connected` is a real round trip that returned 2xx with non-empty
text; every other outcome is `disconnected` with a classified error. No
state is terminal: a later test may move the status anywhere.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from dataclasses import replace

from ..clients.shapes import build_chat_request
from ..config import GenerationConfig
from ..errors import GatewayError
from ..providers.registry import ProviderRegistry
from ..store.base import KeyValueStore
from ..types import ConnectionStatus, ErrorInfo
from .classify import classify_error
from .client import ProviderClient
from .contracts import RetryPolicy

logger = logging.getLogger("talegate.verifier")

PROBE_PROMPT = "ping"
STATUS_STORE_KEY = "connection_status"
_NO_RETRY = RetryPolicy(max_retries=0)


class ConnectionVerifier:
    """Owns the `ConnectionStatus` and runs connection probes."""

    def __init__(
        self,
        registry: ProviderRegistry,
        client: ProviderClient,
        *,
        store: KeyValueStore | None = None,
        probe_max_tokens: int = 8,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._registry = registry
        self._client = client
        self._store = store
        self._probe_max_tokens = probe_max_tokens
        self._clock = clock
        self._status = ConnectionStatus()

    def snapshot(self) -> ConnectionStatus:
        """Current status; the returned value is immutable."""
        return self._status

    async def test_connection(self, config: GenerationConfig, secret: str | None) -> bool:
        """
        Probe the configured provider once. Never raises.

        Returns False without any network activity while another probe is
        in flight, or when the config cannot produce a request.
        """
        if self._status.state == "testing":
            logger.debug("Connection test already in flight; skipping")
            return False

        previous = self._status
        self._status = replace(previous, state="testing", provider=config.provider)
        try:
            return await self._probe(config, secret)
        finally:
            if self._status.state == "testing":
                # Cancelled mid-probe.
                self._status = replace(previous, state="unknown")

    async def _probe(self, config: GenerationConfig, secret: str | None) -> bool:
        started = time.perf_counter()
        latency_ms: int | None = None
        try:
            profile = self._registry.get(config.provider)
            if profile.key_prefix and secret and not secret.strip().startswith(profile.key_prefix):
                logger.warning(
                    "API key for %s does not start with the usual %r prefix",
                    profile.provider_id,
                    profile.key_prefix,
                )
            request = build_chat_request(
                profile,
                replace(config, temperature=profile.temperature_range[0]),
                PROBE_PROMPT,
                secret or "",
                max_tokens=self._probe_max_tokens,
            )
            started = time.perf_counter()
            response = await self._client.complete(request, retry_policy=_NO_RETRY)
            latency_ms = response.latency_ms or int((time.perf_counter() - started) * 1000)
        except Exception as exc:
            error = exc if isinstance(exc, GatewayError) else classify_error(exc)
            if latency_ms is None and error.error_class != "ConfigError":
                latency_ms = int((time.perf_counter() - started) * 1000)
            await self._settle(
                state="disconnected",
                provider=config.provider,
                latency_ms=latency_ms,
                error=ErrorInfo.from_error(error),
            )
            logger.info("Connection test for %s failed: %s", config.provider, error.error_class)
            return False

        await self._settle(
            state="connected",
            provider=config.provider,
            latency_ms=latency_ms,
            error=None,
        )
        logger.info("Connection test for %s ok in %sms", config.provider, latency_ms)
        return True

    async def _settle(
        self,
        *,
        state: str,
        provider: str,
        latency_ms: int | None,
        error: ErrorInfo | None,
    ) -> None:
        self._status = ConnectionStatus(
            state=state,  # type: ignore[arg-type]
            last_latency_ms=latency_ms,
            last_checked_at=self._clock(),
            last_error=error,
            provider=provider,
        )
        await self._persist()

    async def reject(self, error: GatewayError, *, provider: str | None = None) -> bool:
        """Record a config problem found before any probe could start."""
        if self._status.state == "testing":
            return False
        await self._settle(
            state="disconnected",
            provider=provider or self._status.provider or "",
            latency_ms=None,
            error=ErrorInfo.from_error(error),
        )
        return False

    async def invalidate(self) -> None:
        """Forget the last verdict after a connection-relevant config change."""
        if self._status.state in ("unknown", "testing"):
            return
        self._status = ConnectionStatus(provider=self._status.provider)
        await self._persist()

    async def restore(self) -> ConnectionStatus:
        """Load the last persisted status; a persisted `testing` reads back as `unknown`."""
        if self._store is None:
            return self._status
        try:
            blob = await self._store.get(STATUS_STORE_KEY)
        except Exception:
            logger.warning("Failed to read persisted connection status", exc_info=True)
            return self._status
        if blob:
            try:
                self._status = ConnectionStatus.from_dict(json.loads(blob))
            except json.JSONDecodeError:
                logger.warning("Persisted connection status is corrupt; ignoring it")
        return self._status

    async def _persist(self) -> None:
        if self._store is None:
            return
        try:
            await self._store.set(STATUS_STORE_KEY, json.dumps(self._status.to_dict()))
        except Exception:
            logger.warning("Failed to persist connection status", exc_info=True)
