"""
cep_weather.services.weather_service

Resolver orchestration service.

Responsibilities:
- Validate the raw CEP leniently (non-digits stripped).
- Chain the Location Provider and Weather Provider lookups.
- Tag failures with the stage that produced them.
- Build the final `WeatherResult`.
"""

from __future__ import annotations

from cep_weather.clients.location import LocationClient
from cep_weather.clients.weather import WeatherClient
from cep_weather.errors import CepWeatherError
from cep_weather.models import WeatherResult
from cep_weather.observability.logging import get_logger
from cep_weather.validation import clean_cep, is_valid_cep

log = get_logger(__name__)


class WeatherService:
    def __init__(self, *, location: LocationClient, weather: WeatherClient) -> None:
        self._location = location
        self._weather = weather

    async def resolve(self, raw_cep: str) -> WeatherResult:
        if not is_valid_cep(raw_cep):
            raise CepWeatherError.invalid_input()
        cep = clean_cep(raw_cep)

        # Sequential on purpose: the weather lookup is keyed by the resolved name.
        try:
            location = await self._location.lookup(cep)
        except CepWeatherError as e:
            e.stage = "location"
            log.warning("location_lookup_failed", cep=cep, kind=e.kind.value, detail=e.detail)
            raise

        try:
            reading = await self._weather.current(location)
        except CepWeatherError as e:
            e.stage = "weather"
            log.warning(
                "weather_lookup_failed", city=location.name, kind=e.kind.value, detail=e.detail
            )
            raise

        result = WeatherResult.from_reading(location, reading)
        log.info("weather_resolved", cep=cep, city=result.city, temp_c=result.temp_C)
        return result


# --- Module Notes -----------------------------------------------------------
# No retries and no caching: any failed hop fails the whole request with the
# status mapped in `cep_weather.errors`.
