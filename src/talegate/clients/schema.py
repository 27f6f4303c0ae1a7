"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: clients/schema.py.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import SchemaError


class ChatMessageBody(BaseModel):
    model_config = ConfigDict(extra="ignore")

    role: str | None = None
    content: str | None = None


class ChatChoiceBody(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message: ChatMessageBody
    finish_reason: str | None = None


class ChatCompletionBody(BaseModel):
    """Subset of the chat-completions reply the gateway relies on."""

    model_config = ConfigDict(extra="ignore")

    choices: list[ChatChoiceBody] = Field(default_factory=list)
    model: str | None = None


def parse_chat_response(body: Any) -> str:
    """Return `choices[0].message.content`, or raise `SchemaError`."""
    if not isinstance(body, dict):
        raise SchemaError("Provider reply is not a JSON object")
    try:
        parsed = ChatCompletionBody.model_validate(body)
    except ValidationError as exc:
        raise SchemaError(f"Provider reply failed validation: {exc.error_count()} error(s)") from exc
    if not parsed.choices:
        raise SchemaError("Provider reply has no choices")
    text = (parsed.choices[0].message.content or "").strip()
    if not text:
        raise SchemaError("Provider reply has empty content")
    return text
