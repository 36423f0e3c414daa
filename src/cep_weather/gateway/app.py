"""
cep_weather.gateway.app

FastAPI app factory for the Gateway.

Responsibilities:
- Build the app and register routers/middleware.
- Attach settings, tracing handle and HTTP client to app.state.
"""

from __future__ import annotations

import httpx
from fastapi import FastAPI

from cep_weather.app_common import build_lifespan, install_middleware
from cep_weather.gateway.routes import router as gateway_router
from cep_weather.health import router as health_router
from cep_weather.observability.logging import configure_logging
from cep_weather.observability.tracing import Tracing, configure_tracing
from cep_weather.settings import GatewaySettings

SERVER_SPAN_NAME = "gateway-http-request"


def create_app(
    *,
    settings: GatewaySettings,
    tracing: Tracing | None = None,
    http: httpx.AsyncClient | None = None,
) -> FastAPI:
    # Configure structured logging once at process startup (before app serves requests).
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    if tracing is None:
        tracing = configure_tracing(service_name=settings.service_name, settings=settings)

    app = FastAPI(
        title="CEP Weather Gateway",
        version="0.1.0",
        lifespan=build_lifespan(settings=settings, owns_http=http is None),
    )
    app.state.settings = settings
    app.state.tracing = tracing
    if http is not None:
        app.state.http = http

    install_middleware(app, tracing=tracing, span_name=SERVER_SPAN_NAME)
    app.include_router(health_router, tags=["health"])
    app.include_router(gateway_router)
    return app


# --- Module Notes -----------------------------------------------------------
# Passing `http` lets callers point the Gateway at an in-process Resolver
# (httpx.ASGITransport) without a network hop.
