"""
cep_weather.clients.weather

Weather Provider client (WeatherAPI `current.json` response shape).

Responsibilities:
- Fetch the current temperature (Celsius) for a place name.
- Map provider error codes: 1006 (no matching location) is "not found",
  anything else is an upstream failure.
- Trace the call as `call-weather-api`.
"""

from __future__ import annotations

import httpx
from opentelemetry.semconv.attributes.http_attributes import HTTP_RESPONSE_STATUS_CODE
from opentelemetry.trace import Status, StatusCode
from pydantic import ValidationError

from cep_weather.errors import CepWeatherError
from cep_weather.models import ResolvedLocation, WeatherApiPayload, WeatherReading
from cep_weather.observability.tracing import Tracing, record_failure
from cep_weather.settings import ResolverSettings

LOCATION_NOT_FOUND_CODE = 1006


class WeatherClient:
    def __init__(
        self,
        *,
        settings: ResolverSettings,
        http: httpx.AsyncClient,
        tracing: Tracing,
    ) -> None:
        self._url = settings.weather_base_url
        self._api_key = settings.weather_api_key
        self._http = http
        self._tracing = tracing

    async def current(self, location: ResolvedLocation) -> WeatherReading:
        with self._tracing.client_span(
            "call-weather-api",
            tracer_name=__name__,
            attributes={"weather.location.input": location.name},
        ) as span:
            try:
                # httpx URL-encodes `q`, so names with spaces/accents are safe.
                request = self._http.build_request(
                    "GET",
                    self._url,
                    params={"key": self._api_key, "q": location.name, "aqi": "no"},
                    headers=self._tracing.inject({}),
                )
            except (httpx.InvalidURL, httpx.HTTPError) as e:
                record_failure(span, "failed to create weather request", e)
                raise CepWeatherError.upstream(f"error creating weather request: {e}") from e

            try:
                r = await self._http.send(request)
            except httpx.HTTPError as e:
                record_failure(span, "failed to call weather api", e)
                raise CepWeatherError.upstream(f"error fetching weather data: {e}") from e

            span.set_attribute(HTTP_RESPONSE_STATUS_CODE, r.status_code)

            try:
                payload = WeatherApiPayload.model_validate_json(r.content)
            except ValidationError as e:
                record_failure(span, "failed to decode weather response", e)
                raise CepWeatherError.upstream(f"error decoding weather API response: {e}") from e

            if payload.error is not None:
                span.set_attributes(
                    {
                        "weather.error": True,
                        "weather.error.code": payload.error.code,
                        "weather.error.message": payload.error.message,
                    }
                )
                if payload.error.code == LOCATION_NOT_FOUND_CODE:
                    record_failure(span, "weather api location not found")
                    raise CepWeatherError.not_found()
                record_failure(span, "weather api returned error")
                raise CepWeatherError.upstream(
                    f"WeatherAPI error ({payload.error.code}): {payload.error.message}"
                )

            span.set_attribute("weather.temp_c", payload.current.temp_c)
            span.set_status(Status(StatusCode.OK, "temperature found"))
            return WeatherReading(celsius=payload.current.temp_c)
