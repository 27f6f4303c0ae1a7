"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: content/__init__.py.
"""

from .extract import (
    extract_dialogue,
    extract_json_object,
    extract_mail,
    extract_payload,
)
from .fallback import FALLBACK_BUILDERS, fallback_payload, fallback_seed
from .templates import DEFAULT_TEMPLATES, PromptLibrary, PromptTemplateError

__all__ = [
    "PromptLibrary",
    "PromptTemplateError",
    "DEFAULT_TEMPLATES",
    "extract_payload",
    "extract_dialogue",
    "extract_mail",
    "extract_json_object",
    "fallback_payload",
    "fallback_seed",
    "FALLBACK_BUILDERS",
]
