"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/__init__.py.
"""

from .classify import (
    DEFAULT_RULES,
    ErrorClassifier,
    ErrorRule,
    FailureSignal,
    classify_error,
    classify_failure,
)
from .client import ProviderClient
from .contracts import CachePolicy, RetryPolicy
from .gateway import ContentGateway
from .retry import call_with_retry
from .timeouts import await_with_timeout
from .usage import CallCounter
from .verifier import ConnectionVerifier

__all__ = [
    "ContentGateway",
    "ConnectionVerifier",
    "ProviderClient",
    "CallCounter",
    "RetryPolicy",
    "CachePolicy",
    "ErrorClassifier",
    "ErrorRule",
    "FailureSignal",
    "DEFAULT_RULES",
    "classify_error",
    "classify_failure",
    "call_with_retry",
    "await_with_timeout",
]
