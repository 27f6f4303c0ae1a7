from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from talegate.errors import (
    AuthError,
    GatewayError,
    NetworkError,
    NotFoundError,
    ProviderTimeoutError,
    RateLimitError,
    RequestError,
    SchemaError,
    ServerError,
)
from talegate.runtime import (
    ErrorClassifier,
    ErrorRule,
    FailureSignal,
    RetryPolicy,
    call_with_retry,
    classify_error,
    classify_failure,
)


def run_async(coro):
    return asyncio.run(coro)


@pytest.mark.parametrize(
    ("status", "expected"),
    [
        (401, AuthError),
        (403, AuthError),
        (404, NotFoundError),
        (429, RateLimitError),
        (500, ServerError),
        (503, ServerError),
        (400, RequestError),
        (422, RequestError),
    ],
)
def test_status_codes_map_to_error_classes(status, expected):
    error = classify_failure(FailureSignal(status=status, message="boom"))
    assert type(error) is expected
    assert str(error).startswith(f"HTTP {status}")


@pytest.mark.parametrize(
    ("exc", "expected"),
    [
        (asyncio.TimeoutError(), ProviderTimeoutError),
        (httpx.ReadTimeout("slow"), ProviderTimeoutError),
        (json.JSONDecodeError("bad", "x", 0), SchemaError),
        (httpx.ConnectError("refused"), NetworkError),
        (ConnectionResetError("reset"), NetworkError),
        (RuntimeError("Failed to fetch: CORS policy"), NetworkError),
        (RuntimeError("Rate limit reached"), RateLimitError),
        (RuntimeError("request timed out upstream"), ProviderTimeoutError),
        (RuntimeError("something odd"), NetworkError),
    ],
)
def test_exceptions_map_to_error_classes(exc, expected):
    assert type(classify_error(exc)) is expected


def test_cors_rule_carries_specific_remediation():
    error = classify_error(RuntimeError("blocked by CORS"))
    assert "cross-origin" in error.remediation


def test_gateway_errors_pass_through_unchanged():
    error = AuthError("nope")
    assert classify_error(error) is error


def test_status_wins_over_message_phrases():
    error = classify_failure(FailureSignal(status=500, message="rate limit"))
    assert isinstance(error, ServerError)


def test_prepended_rules_take_priority_and_extend_stays_before_default():
    class QuotaError(GatewayError):
        error_class = "QuotaError"

    classifier = ErrorClassifier()
    classifier.prepend(ErrorRule("quota", lambda s: "quota" in s.text, QuotaError))
    assert isinstance(classifier.classify_status(429, "quota exhausted"), QuotaError)

    classifier.extend(ErrorRule("teapot", lambda s: "teapot" in s.text, RequestError))
    assert classifier.rules[-1].name == "default"
    assert isinstance(classifier.classify_error(RuntimeError("teapot")), RequestError)


def test_retry_only_retries_retryable_errors():
    calls = {"n": 0}

    async def flaky():
        calls["n"] += 1
        if calls["n"] < 3:
            raise httpx.ConnectError("refused")
        return "ok"

    async def auth_fail():
        calls["n"] += 1
        raise AuthError("bad key")

    policy = RetryPolicy(max_retries=2, backoff_base_s=0.0, backoff_jitter_s=0.0)

    assert run_async(call_with_retry(flaky, policy=policy)) == "ok"
    assert calls["n"] == 3

    calls["n"] = 0
    with pytest.raises(AuthError):
        run_async(call_with_retry(auth_fail, policy=policy))
    assert calls["n"] == 1


def test_default_policy_is_single_shot():
    calls = {"n": 0}

    async def always_down():
        calls["n"] += 1
        raise httpx.ConnectError("refused")

    with pytest.raises(NetworkError):
        run_async(call_with_retry(always_down, policy=RetryPolicy()))
    assert calls["n"] == 1
