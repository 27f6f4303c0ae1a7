"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: runtime/retry.py.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from ..errors import GatewayError
from ..utils import backoff_delay
from .classify import ErrorClassifier, classify_error
from .contracts import RetryPolicy

T = TypeVar("T")

logger = logging.getLogger("talegate.retry")


async def call_with_retry(
    fn: Callable[[], Awaitable[T]],
    *,
    policy: RetryPolicy,
    classifier: ErrorClassifier | None = None,
) -> T:
    """
    Execute callable under bounded retry policy.

    Every failure is re-raised as a classified `GatewayError`; only errors
    flagged `retryable` are attempted again.
    """
    classify = classifier.classify_error if classifier is not None else classify_error
    retries = max(0, policy.max_retries)
    last: GatewayError | None = None
    for attempt in range(retries + 1):
        try:
            return await fn()
        except Exception as error:
            classified = classify(error)
            last = classified
            if classified.retryable and attempt < retries:
                delay = backoff_delay(attempt, policy.backoff_base_s, policy.backoff_jitter_s)
                logger.info(
                    "retrying after %s (attempt %s/%s, sleep %.2fs)",
                    classified.error_class,
                    attempt + 1,
                    retries,
                    delay,
                )
                await asyncio.sleep(delay)
                continue
            if classified is error:
                raise
            raise classified from error
    raise GatewayError("Retry loop exhausted") from last
