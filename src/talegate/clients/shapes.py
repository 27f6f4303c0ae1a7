"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Request shapes: the per-provider body layout of one chat call.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from ..errors import ConfigError
from ..providers.contracts import ProviderProfile
from ..providers.registry import (
    clamp_max_tokens,
    clamp_temperature,
    resolve_endpoint,
    resolve_model,
)
from ..types import ChatRequest, JSONObject, Message

if TYPE_CHECKING:
    from ..config import GenerationConfig


class RequestShape(Protocol):
    """Builds the JSON body a provider expects for one prompt."""

    shape_id: str

    def build_body(
        self,
        *,
        model: str,
        system_prompt: str,
        prompt: str,
        temperature: float,
        max_tokens: int,
        top_p: float | None,
    ) -> JSONObject: ...


def _messages(rows: list[Message]) -> list[JSONObject]:
    return [{"role": row.role, "content": row.content} for row in rows]


class StandardChatShape:
    """OpenAI-compatible body with a separate system message."""

    shape_id = "standard"

    def build_body(
        self,
        *,
        model: str,
        system_prompt: str,
        prompt: str,
        temperature: float,
        max_tokens: int,
        top_p: float | None,
    ) -> JSONObject:
        rows: list[Message] = []
        if system_prompt.strip():
            rows.append(Message(role="system", content=system_prompt))
        rows.append(Message(role="user", content=prompt))
        body: JSONObject = {
            "model": model,
            "messages": _messages(rows),
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if top_p is not None:
            body["top_p"] = top_p
        return body


class MinimalChatShape:
    """
    Single user message; the system prompt is folded into it.

    Some providers reject extra fields or system messages, so this shape
    never sends `top_p`.
    """

    shape_id = "minimal"

    def build_body(
        self,
        *,
        model: str,
        system_prompt: str,
        prompt: str,
        temperature: float,
        max_tokens: int,
        top_p: float | None,
    ) -> JSONObject:
        content = prompt
        if system_prompt.strip():
            content = f"{system_prompt.strip()}\n\n{prompt}"
        return {
            "model": model,
            "messages": _messages([Message(role="user", content=content)]),
            "temperature": temperature,
            "max_tokens": max_tokens,
        }


_SHAPES: dict[str, RequestShape] = {
    StandardChatShape.shape_id: StandardChatShape(),
    MinimalChatShape.shape_id: MinimalChatShape(),
}


def get_shape(shape_id: str) -> RequestShape:
    shape = _SHAPES.get((shape_id or "").strip().lower())
    if shape is None:
        raise ConfigError(f"Unknown request shape '{shape_id}'")
    return shape


def build_chat_request(
    profile: ProviderProfile,
    config: "GenerationConfig",
    prompt: str,
    secret: str,
    *,
    max_tokens: int | None = None,
) -> ChatRequest:
    """
    Resolve one provider call from profile, config and prompt.

    Raises `ConfigError` when the secret, model or endpoint is unusable; no
    network activity happens here.
    """
    key = (secret or "").strip()
    if not key:
        raise ConfigError("missing credential")

    url = resolve_endpoint(profile, config)
    model = resolve_model(profile, config)
    shape = get_shape(profile.request_shape)
    body = shape.build_body(
        model=model,
        system_prompt=config.system_prompt or "",
        prompt=prompt,
        temperature=clamp_temperature(profile, config.temperature),
        max_tokens=clamp_max_tokens(profile, max_tokens or config.max_tokens),
        top_p=config.top_p,
    )
    headers = {
        "Content-Type": "application/json",
        profile.auth_header: f"{profile.auth_scheme}{key}",
    }
    return ChatRequest(
        url=url,
        headers=headers,
        body=body,
        timeout_s=profile.timeout_s,
        provider_id=profile.provider_id,
        model=model,
    )
