"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

FastAPI host exposing the gateway to the game front-end.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from pydantic import BaseModel, Field

from .errors import ConfigError, DecryptionError, GatewayError
from .runtime.gateway import ContentGateway

logger = logging.getLogger("talegate.server")


class ServerSetupError(RuntimeError):
    """Raised when the HTTP host cannot be created."""


class CredentialBody(BaseModel):
    password: str = Field(min_length=1)
    api_key: str | None = None


class UnlockBody(BaseModel):
    password: str = Field(min_length=1)


class GenerateBody(BaseModel):
    context: dict[str, Any] = Field(default_factory=dict)


def _status_code(error: GatewayError) -> int:
    if isinstance(error, DecryptionError):
        return 401
    if isinstance(error, ConfigError):
        return 400
    return 502


def create_app(gateway: ContentGateway, *, restore_on_startup: bool = True):
    """Create and return a FastAPI app bound to `gateway`."""
    try:
        from fastapi import FastAPI, Request
        from fastapi.responses import JSONResponse
    except Exception as exc:  # pragma: no cover - optional runtime path
        raise ServerSetupError(
            "FastAPI is required to host the gateway: pip install talegate[server]"
        ) from exc

    @asynccontextmanager
    async def lifespan(_app):
        if restore_on_startup:
            await gateway.restore()
        try:
            yield
        finally:
            await gateway.aclose()

    app = FastAPI(title="talegate", lifespan=lifespan)

    @app.exception_handler(GatewayError)
    async def gateway_error(_request: Request, exc: GatewayError) -> JSONResponse:
        return JSONResponse(
            status_code=_status_code(exc),
            content={
                "error_class": exc.error_class,
                "message": str(exc),
                "remediation": exc.remediation,
            },
        )

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return {"ok": True, "providers": gateway.registry.list_ids()}

    @app.get("/status")
    async def status() -> dict[str, Any]:
        return {**gateway.get_status().to_dict(), "usage": gateway.get_usage().to_dict()}

    @app.post("/connection/test")
    async def connection_test(payload: dict[str, Any] | None = None) -> dict[str, Any]:
        ok = await gateway.test_connection(payload or None)
        return {"connected": ok, "status": gateway.get_status().to_dict()}

    @app.get("/config")
    async def get_config() -> dict[str, Any]:
        return gateway.get_config().to_public()

    @app.patch("/config")
    async def patch_config(payload: dict[str, Any]) -> dict[str, Any]:
        merged = await gateway.set_config(payload)
        return merged.to_public()

    @app.post("/credential")
    async def save_credential(body: CredentialBody) -> dict[str, Any]:
        await gateway.save_credential(body.password, body.api_key)
        return {"stored": True}

    @app.post("/credential/unlock")
    async def unlock_credential(body: UnlockBody) -> dict[str, Any]:
        await gateway.load_credential(body.password)
        return {"unlocked": True}

    @app.delete("/credential")
    async def forget_credential() -> dict[str, Any]:
        await gateway.forget_credential()
        return {"stored": False}

    @app.post("/generate/{content_type}")
    async def generate(content_type: str, body: GenerateBody | None = None) -> dict[str, Any]:
        result = await gateway.generate(content_type, (body or GenerateBody()).context)
        return result.to_dict()

    @app.delete("/cache")
    async def clear_cache() -> dict[str, Any]:
        await gateway.clear_cache()
        return {"cleared": True}

    return app


def run(
    gateway: ContentGateway,
    *,
    host: str | None = None,
    port: int | None = None,
    **kwargs: Any,
) -> None:
    """Serve `gateway` with uvicorn; host, port and log level default to its settings."""
    try:
        import uvicorn
    except ImportError:
        raise ImportError(
            "uvicorn is required to run the gateway server. "
            "Install it with: pip install talegate[server]"
        )

    settings = gateway.settings
    kwargs.setdefault("log_level", settings.log_level)
    logger.info("Serving talegate on %s:%s", host or settings.host, port or settings.port)
    uvicorn.run(
        create_app(gateway),
        host=host or settings.host,
        port=port or settings.port,
        **kwargs,
    )
