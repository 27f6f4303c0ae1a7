"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Provider registry plus the pure helpers that read profiles.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING
from urllib.parse import urlparse

from ..errors import ConfigError
from .builtin import BUILTIN_PROFILES
from .contracts import ENDPOINT_PLACEHOLDER, ProviderProfile

if TYPE_CHECKING:
    from ..config import GenerationConfig

CHAT_COMPLETIONS_PATH = "/chat/completions"


class ProviderRegistry:
    """
    Mapping from provider id to `ProviderProfile`.

    Adding a provider means registering one more profile; nothing else in the
    gateway branches on provider ids.
    """

    def __init__(self, profiles: Iterable[ProviderProfile] = ()) -> None:
        self._profiles: dict[str, ProviderProfile] = {}
        for profile in profiles:
            self.register(profile)

    def register(self, profile: ProviderProfile, *, overwrite: bool = False) -> None:
        """Register one profile under its stable id."""
        key = profile.provider_id.strip().lower()
        if not key:
            raise ConfigError("Provider id must be non-empty")
        if key in self._profiles and not overwrite:
            raise ConfigError(f"Provider already registered: {key}")
        self._profiles[key] = profile

    def get(self, provider_id: str) -> ProviderProfile:
        """Resolve one registered profile by id."""
        key = (provider_id or "").strip().lower()
        profile = self._profiles.get(key)
        if profile is None:
            raise ConfigError(f"Unknown provider '{provider_id}'")
        return profile

    def list_ids(self) -> list[str]:
        """List registered provider ids in deterministic order."""
        return sorted(self._profiles.keys())

    def profiles(self) -> list[ProviderProfile]:
        return [self._profiles[key] for key in self.list_ids()]

    def __contains__(self, provider_id: object) -> bool:
        return isinstance(provider_id, str) and provider_id.strip().lower() in self._profiles


def default_registry() -> ProviderRegistry:
    """Fresh registry holding the built-in providers."""
    return ProviderRegistry(BUILTIN_PROFILES)


def clamp_temperature(profile: ProviderProfile, requested: float) -> float:
    """Bound `requested` to the profile's allowed interval; never rejects."""
    lo, hi = profile.temperature_range
    value = float(requested)
    if value != value:  # NaN
        return lo
    return min(max(value, lo), hi)


def clamp_max_tokens(profile: ProviderProfile, requested: int) -> int:
    return min(max(1, int(requested)), profile.max_output_tokens)


def resolve_endpoint(profile: ProviderProfile, config: "GenerationConfig") -> str:
    """
    Return the URL to POST to.

    Profiles with a `{base_url}` placeholder take the user's endpoint; a bare
    base URL gets the chat-completions path appended.
    """
    if not profile.requires_endpoint:
        return profile.endpoint

    override = (config.endpoint or "").strip()
    if not override:
        raise ConfigError(f"Provider '{profile.provider_id}' needs an endpoint URL")
    parsed = urlparse(override)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigError(f"Endpoint is not an http(s) URL: {override}")

    base = override.rstrip("/")
    if not base.endswith(CHAT_COMPLETIONS_PATH):
        base = f"{base}{CHAT_COMPLETIONS_PATH}"
    return profile.endpoint.replace(ENDPOINT_PLACEHOLDER, base)


def resolve_model(profile: ProviderProfile, config: "GenerationConfig") -> str:
    """Pick the model for a call, defaulting to the profile's default model."""
    model = (config.model or "").strip() or profile.default_model
    if not model:
        raise ConfigError(f"Provider '{profile.provider_id}' needs a model name")
    if not profile.supports_model(model):
        raise ConfigError(
            f"Model '{model}' is not offered by provider '{profile.provider_id}'"
        )
    return model
