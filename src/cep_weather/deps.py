"""
cep_weather.deps

FastAPI dependency wiring shared by both services.

Responsibilities:
- Encapsulate app.state access patterns (settings, tracing handle, HTTP client).
"""

from __future__ import annotations

import httpx
from fastapi import Request

from cep_weather.observability.tracing import Tracing
from cep_weather.settings import ServiceSettings


def settings_from_app(request: Request) -> ServiceSettings:
    # Stored by the app factory; tests construct apps with their own settings.
    return request.app.state.settings  # type: ignore[attr-defined]


def tracing_from_app(request: Request) -> Tracing:
    return request.app.state.tracing  # type: ignore[attr-defined]


def http_from_app(request: Request) -> httpx.AsyncClient:
    # Created in the app lifespan unless injected by the caller.
    return request.app.state.http  # type: ignore[attr-defined]


# --- Module Notes -----------------------------------------------------------
# Service-specific dependencies (ResolverClient, WeatherService) are built from
# these in the service's own routes module.
