"""
cep_weather.app_common

Composition helpers shared by the Gateway and Resolver app factories.

Responsibilities:
- Install middleware in the right order (tracing outermost).
- Own the lifespan: shared HTTP client and tracing flush at shutdown.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from cep_weather.observability.logging import get_logger
from cep_weather.observability.middleware import RequestContextMiddleware
from cep_weather.observability.tracing import Tracing, TracingMiddleware
from cep_weather.settings import ServiceSettings

log = get_logger(__name__)


def install_middleware(app: FastAPI, *, tracing: Tracing, span_name: str) -> None:
    # Last added runs first: the server span must be current before log context binds.
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(TracingMiddleware, tracing=tracing, span_name=span_name)


def build_lifespan(*, settings: ServiceSettings, owns_http: bool):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", port=settings.api_port)
        if owns_http:
            app.state.http = httpx.AsyncClient(timeout=settings.http_timeout_seconds)
        try:
            yield
        finally:
            if owns_http:
                await app.state.http.aclose()
            # Bounded flush of buffered spans; failures are logged, not raised.
            app.state.tracing.shutdown(timeout_millis=settings.trace_shutdown_timeout_ms)
            log.info("shutdown")

    return lifespan


# --- Module Notes -----------------------------------------------------------
# Injected HTTP clients (tests, in-process wiring) are left for their owner to close.
