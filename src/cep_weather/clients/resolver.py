"""
cep_weather.clients.resolver

Gateway -> Resolver client.

Responsibilities:
- Build `GET {resolver_base_url}/weather/{cep}` with the caller's trace headers.
- Send it in streaming mode so the Gateway can relay the body unchanged.
"""

from __future__ import annotations

from collections.abc import Mapping

import httpx

from cep_weather.errors import CepWeatherError
from cep_weather.settings import GatewaySettings


class ResolverClient:
    """
    The caller owns the returned response and must `aclose()` it once the
    body has been relayed.
    """

    def __init__(self, *, settings: GatewaySettings, http: httpx.AsyncClient) -> None:
        self._base_url = settings.resolver_base_url.rstrip("/")
        self._http = http

    def url_for(self, cep: str) -> str:
        return f"{self._base_url}/weather/{cep}"

    async def open_weather(self, cep: str, *, headers: Mapping[str, str]) -> httpx.Response:
        try:
            request = self._http.build_request("GET", self.url_for(cep), headers=dict(headers))
        except (httpx.InvalidURL, httpx.HTTPError) as e:
            raise CepWeatherError.upstream(f"Failed to create request to resolver: {e}") from e

        try:
            return await self._http.send(request, stream=True)
        except httpx.HTTPError as e:
            raise CepWeatherError.upstream(f"Failed to reach resolver: {e}") from e


# --- Module Notes -----------------------------------------------------------
# Status codes are not checked here: the Gateway relays 4xx/5xx from the
# Resolver as-is, only transport failures become local errors.
