"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Generation config: merging, clamping and the persisted (secret-free) form.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from .errors import ConfigError, DecryptionError
from .providers.registry import ProviderRegistry, clamp_max_tokens, clamp_temperature
from .types import JSONObject
from .vault import EncryptedSecret

logger = logging.getLogger("talegate.config")

DEFAULT_SYSTEM_PROMPT = (
    "You write short, vivid fragments for a historical family life simulation. "
    "Stay in period, keep it concise, and answer with the requested content only."
)

# The game front-end sends camelCase keys.
_KEY_ALIASES = {
    "apiKey": "api_key",
    "maxTokens": "max_tokens",
    "topP": "top_p",
    "systemPrompt": "system_prompt",
    "baseUrl": "endpoint",
    "apiBase": "endpoint",
}
_MERGEABLE_KEYS = {
    "provider",
    "model",
    "temperature",
    "max_tokens",
    "top_p",
    "system_prompt",
    "endpoint",
    "api_key",
}


@dataclass(frozen=True, slots=True)
class GenerationConfig:
    """
    User-chosen generation settings.

    `api_key` is the plaintext secret and only ever lives in memory;
    `encrypted_secret` is what gets persisted.
    """

    provider: str = "deepseek"
    model: str = ""
    temperature: float = 0.7
    max_tokens: int = 800
    top_p: float | None = None
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    endpoint: str = ""
    api_key: str | None = field(default=None, repr=False)
    encrypted_secret: EncryptedSecret | None = field(default=None, repr=False)

    @property
    def has_secret(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    def to_persisted(self) -> JSONObject:
        """Serializable form; the plaintext key is never included."""
        return {
            "provider": self.provider,
            "model": self.model,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "top_p": self.top_p,
            "system_prompt": self.system_prompt,
            "endpoint": self.endpoint,
            "encrypted_secret": self.encrypted_secret.to_dict()
            if self.encrypted_secret
            else None,
        }

    def to_public(self) -> JSONObject:
        row = self.to_persisted()
        row.pop("encrypted_secret", None)
        row["has_secret"] = self.has_secret
        row["has_stored_secret"] = self.encrypted_secret is not None
        return row

    @classmethod
    def from_persisted(cls, row: Any) -> "GenerationConfig":
        if not isinstance(row, Mapping):
            return cls()
        secret: EncryptedSecret | None = None
        blob = row.get("encrypted_secret")
        if blob is not None:
            try:
                secret = EncryptedSecret.from_dict(blob)
            except DecryptionError:
                logger.warning("Ignoring malformed stored credential")
        top_p = row.get("top_p")
        return cls(
            provider=str(row.get("provider") or "deepseek"),
            model=str(row.get("model") or ""),
            temperature=_as_float(row.get("temperature"), 0.7),
            max_tokens=_as_int(row.get("max_tokens"), 800),
            top_p=float(top_p) if isinstance(top_p, (int, float)) else None,
            system_prompt=str(row.get("system_prompt") or DEFAULT_SYSTEM_PROMPT),
            endpoint=str(row.get("endpoint") or ""),
            encrypted_secret=secret,
        )


def _as_float(value: Any, default: float) -> float:
    if isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _as_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    try:
        return int(value)
    except OverflowError:
        # +/-inf; the caller's clamp bounds it.
        return sys.maxsize if value > 0 else -sys.maxsize
    except (TypeError, ValueError):
        return default


def normalize_partial(partial: Mapping[str, Any]) -> dict[str, Any]:
    """Map front-end aliases onto config field names and drop unknown keys."""
    out: dict[str, Any] = {}
    for key, value in partial.items():
        name = _KEY_ALIASES.get(key, key)
        if name not in _MERGEABLE_KEYS:
            logger.debug("Ignoring unknown config key %r", key)
            continue
        out[name] = value
    return out


def merge_config(
    current: GenerationConfig,
    partial: Mapping[str, Any],
    registry: ProviderRegistry,
) -> GenerationConfig:
    """
    Merge a partial update into `current` and clamp to the provider profile.

    Switching provider without naming a model falls back to the new
    provider's default model when the old model is not offered there.
    """
    row = normalize_partial(partial)
    provider = str(row.get("provider", current.provider) or "").strip().lower()
    profile = registry.get(provider)

    if "model" in row:
        model = str(row["model"] or "").strip()
    else:
        model = current.model
        if provider != current.provider and model and not profile.supports_model(model):
            model = ""
    if not model:
        model = profile.default_model

    temperature = _as_float(row.get("temperature", current.temperature), current.temperature)
    max_tokens = _as_int(row.get("max_tokens", current.max_tokens), current.max_tokens)

    top_p = row.get("top_p", current.top_p)
    if top_p is not None:
        top_p = min(max(_as_float(top_p, 1.0), 0.0), 1.0)

    api_key = current.api_key
    if "api_key" in row:
        raw = row["api_key"]
        if raw is not None and not isinstance(raw, str):
            raise ConfigError("api_key must be a string")
        api_key = raw.strip() if raw else None

    return replace(
        current,
        provider=provider,
        model=model,
        temperature=clamp_temperature(profile, temperature),
        max_tokens=clamp_max_tokens(profile, max_tokens),
        top_p=top_p,
        system_prompt=str(row.get("system_prompt", current.system_prompt) or DEFAULT_SYSTEM_PROMPT),
        endpoint=str(row.get("endpoint", current.endpoint) or "").strip(),
        api_key=api_key,
    )
