"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: factory.py.
"""

from __future__ import annotations

from pathlib import Path

from .clients.transport import ChatTransport
from .content.templates import PromptLibrary
from .providers.registry import ProviderRegistry
from .runtime.gateway import ContentGateway
from .settings import GatewaySettings
from .store.base import KeyValueStore
from .store.factory import create_store


def create_gateway(
    settings: GatewaySettings | None = None,
    *,
    store: str | KeyValueStore | None = None,
    transport: ChatTransport | None = None,
    registry: ProviderRegistry | None = None,
    prompts_dir: str | Path | None = None,
) -> ContentGateway:
    """
    Build a gateway from settings.

    `settings` defaults to `GatewaySettings.from_env()`; `store` may be a
    backend id or a ready instance and defaults to the configured backend.
    """
    settings = settings or GatewaySettings.from_env()
    prompts = PromptLibrary.from_directory(prompts_dir) if prompts_dir else None
    return ContentGateway(
        settings,
        registry=registry,
        store=create_store(store, settings),
        transport=transport,
        prompts=prompts,
    )
