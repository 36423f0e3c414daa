"""
cep_weather.models

Wire and domain models.

Responsibilities:
- Gateway request body (`CepRequest`).
- Provider payload shapes (Location Provider, Weather Provider).
- Resolver response (`WeatherResult`) and the intermediate domain values.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from cep_weather.conversions import celsius_to_fahrenheit, celsius_to_kelvin


class _LenientModel(BaseModel):
    """
    JSON `null` (for the whole object or for a field) reads as the default,
    the same as an absent field.
    """

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _null_as_default(cls, data: Any) -> Any:
        if data is None:
            return {}
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class CepRequest(_LenientModel):
    cep: str = ""


class ViaCepPayload(_LenientModel):
    """
    Location Provider response. Unknown fields are ignored; only the place name
    and the not-found flag matter.
    """

    localidade: str = ""
    erro: bool = False


class WeatherApiCurrent(_LenientModel):
    temp_c: float = 0.0


class WeatherApiError(_LenientModel):
    code: int = 0
    message: str = ""


class WeatherApiPayload(_LenientModel):
    current: WeatherApiCurrent = Field(default_factory=WeatherApiCurrent)
    error: WeatherApiError | None = None


@dataclass(frozen=True, slots=True)
class ResolvedLocation:
    name: str


@dataclass(frozen=True, slots=True)
class WeatherReading:
    celsius: float


class WeatherResult(BaseModel):
    # Field names are the public JSON keys (`temp_C`, not `temp_c`).
    city: str
    temp_C: float
    temp_F: float
    temp_K: float

    @classmethod
    def from_reading(cls, location: ResolvedLocation, reading: WeatherReading) -> WeatherResult:
        return cls(
            city=location.name,
            temp_C=reading.celsius,
            temp_F=celsius_to_fahrenheit(reading.celsius),
            temp_K=celsius_to_kelvin(reading.celsius),
        )


# --- Module Notes -----------------------------------------------------------
# Payloads decode leniently (defaults for absent or null fields) so that
# "not found" is decided by content, not by schema failures.
