"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Error taxonomy for credential, configuration and provider failures.

Every error carries a stable `error_class` label (what the status surface
shows) and a short human remediation hint.
"""

from __future__ import annotations


class GatewayError(RuntimeError):
    """Base error for all gateway failures."""

    error_class = "GatewayError"
    remediation = "Check the provider configuration and try again."
    retryable = False

    def __init__(self, message: str = "", *, remediation: str | None = None) -> None:
        super().__init__(message or self.error_class)
        if remediation is not None:
            self.remediation = remediation


class ConfigError(GatewayError):
    """A required configuration field is missing or invalid."""

    error_class = "ConfigError"
    remediation = "Fill in the API key, provider, model and endpoint settings."


class DecryptionError(GatewayError):
    """Stored credential could not be decrypted (wrong password or corrupt blob)."""

    error_class = "DecryptionError"
    remediation = "Re-enter the passphrase, or save the API key again."


class TransportError(GatewayError):
    """Base class for failures of one provider round trip."""

    error_class = "TransportError"


class ProviderTimeoutError(TransportError):
    """Provider call exceeded its configured timeout and was aborted."""

    error_class = "TimeoutError"
    remediation = "The provider is slow to answer; try again or pick a faster model."
    retryable = True


class NetworkError(TransportError):
    """Provider could not be reached (DNS, connection, cross-origin rejection)."""

    error_class = "NetworkError"
    remediation = "Check the network connection and the endpoint URL."
    retryable = True


class AuthError(TransportError):
    """Provider rejected the credential."""

    error_class = "AuthError"
    remediation = "The API key was rejected; check that it is valid for this provider."


class NotFoundError(TransportError):
    """Endpoint or model does not exist on the provider."""

    error_class = "NotFoundError"
    remediation = "Check the endpoint URL and the model name."


class RateLimitError(TransportError):
    """Provider throttled the request."""

    error_class = "RateLimitError"
    remediation = "Too many requests or quota exhausted; wait a moment and retry."
    retryable = True


class ServerError(TransportError):
    """Provider answered with a 5xx status."""

    error_class = "ServerError"
    remediation = "The provider is having trouble; try again later."
    retryable = True


class RequestError(TransportError):
    """Provider refused the request body (4xx other than auth/404/429)."""

    error_class = "RequestError"
    remediation = "The provider refused the request; check model and sampling settings."


class SchemaError(TransportError):
    """Provider answered successfully but the body is malformed or empty."""

    error_class = "SchemaError"
    remediation = "The provider reply had no usable text; check the model or endpoint format."
