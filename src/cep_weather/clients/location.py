"""
cep_weather.clients.location

Location Provider client (ViaCEP response shape).

Responsibilities:
- Resolve a cleaned CEP to a place name.
- Classify provider outcomes into error kinds.
- Trace the call as `call-location-api`.
"""

from __future__ import annotations

import httpx
from opentelemetry.semconv.attributes.http_attributes import HTTP_RESPONSE_STATUS_CODE
from opentelemetry.trace import Status, StatusCode
from pydantic import ValidationError

from cep_weather.errors import CepWeatherError
from cep_weather.models import ResolvedLocation, ViaCepPayload
from cep_weather.observability.tracing import Tracing, record_failure
from cep_weather.settings import ResolverSettings


class LocationClient:
    def __init__(
        self,
        *,
        settings: ResolverSettings,
        http: httpx.AsyncClient,
        tracing: Tracing,
    ) -> None:
        self._base_url = settings.location_base_url.rstrip("/")
        self._http = http
        self._tracing = tracing

    def url_for(self, cep: str) -> str:
        return f"{self._base_url}/{cep}/json/"

    async def lookup(self, cep: str) -> ResolvedLocation:
        with self._tracing.client_span(
            "call-location-api",
            tracer_name=__name__,
            attributes={"cep.input": cep},
        ) as span:
            try:
                request = self._http.build_request(
                    "GET", self.url_for(cep), headers=self._tracing.inject({})
                )
            except (httpx.InvalidURL, httpx.HTTPError) as e:
                record_failure(span, "failed to create location request", e)
                raise CepWeatherError.upstream(f"error creating location request: {e}") from e

            try:
                r = await self._http.send(request)
            except httpx.HTTPError as e:
                record_failure(span, "failed to call location api", e)
                raise CepWeatherError.upstream(f"error fetching CEP data: {e}") from e

            span.set_attribute(HTTP_RESPONSE_STATUS_CODE, r.status_code)

            try:
                payload = ViaCepPayload.model_validate_json(r.content)
            except ValidationError as e:
                # An undecodable answer means the provider rejected the code itself.
                record_failure(span, "failed to decode location response", e)
                raise CepWeatherError.invalid_input() from e

            if payload.erro:
                span.set_attribute("location.error", True)
                record_failure(span, "location api returned error flag")
                raise CepWeatherError.not_found()

            if not payload.localidade:
                record_failure(span, "location api returned empty location")
                raise CepWeatherError.not_found()

            span.set_attribute("location.name", payload.localidade)
            span.set_status(Status(StatusCode.OK, "location found"))
            return ResolvedLocation(name=payload.localidade)
