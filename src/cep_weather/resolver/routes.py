"""
cep_weather.resolver.routes

Resolver HTTP surface.

Responsibilities:
- Compose the weather service from the provider clients.
- Serve `GET /weather/{cep}` and render errors through the shared error table.
"""

from __future__ import annotations

import httpx
from fastapi import APIRouter, Depends
from starlette.responses import JSONResponse, Response

from cep_weather.clients.location import LocationClient
from cep_weather.clients.weather import WeatherClient
from cep_weather.deps import http_from_app, settings_from_app, tracing_from_app
from cep_weather.errors import CepWeatherError, error_response
from cep_weather.observability.tracing import Tracing
from cep_weather.services.weather_service import WeatherService
from cep_weather.settings import ResolverSettings

router = APIRouter()


def weather_service(
    settings: ResolverSettings = Depends(settings_from_app),
    http: httpx.AsyncClient = Depends(http_from_app),
    tracing: Tracing = Depends(tracing_from_app),
) -> WeatherService:
    return WeatherService(
        location=LocationClient(settings=settings, http=http, tracing=tracing),
        weather=WeatherClient(settings=settings, http=http, tracing=tracing),
    )


# `:path` keeps the whole suffix (formatted codes, stray slashes, or nothing at all).
@router.get("/weather/{cep:path}")
async def get_weather(cep: str, service: WeatherService = Depends(weather_service)) -> Response:
    try:
        result = await service.resolve(cep)
    except CepWeatherError as e:
        return error_response(e)
    return JSONResponse(result.model_dump())


# --- Module Notes -----------------------------------------------------------
# Error bodies are plain text; only successful lookups answer with JSON.
