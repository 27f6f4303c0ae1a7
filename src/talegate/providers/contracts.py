"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Provider descriptors.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

RequestShapeId = Literal["standard", "minimal"]

ENDPOINT_PLACEHOLDER = "{base_url}"


@dataclass(frozen=True, slots=True)
class ProviderProfile:
    """
    Static description of one generative-text provider.

    Profiles are defined once and never mutated. A profile whose endpoint
    contains `{base_url}` needs the user to supply the endpoint.
    """

    provider_id: str
    name: str
    endpoint: str
    models: tuple[str, ...] = ()
    default_model: str = ""
    auth_header: str = "Authorization"
    auth_scheme: str = "Bearer "
    timeout_ms: int = 30_000
    temperature_range: tuple[float, float] = (0.0, 2.0)
    max_output_tokens: int = 4096
    request_shape: RequestShapeId = "standard"
    accepts_any_model: bool = False
    key_prefix: str = ""

    @property
    def requires_endpoint(self) -> bool:
        return ENDPOINT_PLACEHOLDER in self.endpoint

    @property
    def timeout_s(self) -> float:
        return self.timeout_ms / 1000.0

    def supports_model(self, model: str) -> bool:
        return self.accepts_any_model or model in self.models
