"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: clients/__init__.py.
"""

from .schema import ChatCompletionBody, parse_chat_response
from .shapes import (
    MinimalChatShape,
    RequestShape,
    StandardChatShape,
    build_chat_request,
    get_shape,
)
from .transport import ChatTransport, HttpxTransport, ProviderReply

__all__ = [
    "RequestShape",
    "StandardChatShape",
    "MinimalChatShape",
    "get_shape",
    "build_chat_request",
    "ChatCompletionBody",
    "parse_chat_response",
    "ChatTransport",
    "HttpxTransport",
    "ProviderReply",
]
