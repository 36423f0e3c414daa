"""
cep_weather.settings

Central configuration models (Pydantic Settings), one per service.

Responsibilities:
- Provide strongly-typed, env-driven settings for the Gateway and the Resolver.
- Hide secrets from repr/logging (weather provider API key).
- Offer cached settings instances for the process entrypoints.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServiceSettings(BaseSettings):
    """
    Fields shared by both services:
    - HTTP listener
    - Logging
    - Trace export (collector endpoint + wire protocol)
    """

    service_name: str
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int

    # Tracing: "zipkin" speaks Zipkin JSON v2 over HTTP, "otlp" speaks OTLP/gRPC.
    trace_exporter: Literal["zipkin", "otlp"] = "zipkin"
    collector_endpoint: str = "http://localhost:9411/api/v2/spans"
    trace_shutdown_timeout_ms: int = 5000

    # Outbound HTTP (no retries; this is the only bound on a hung upstream).
    http_timeout_seconds: float = 10.0


class GatewaySettings(ServiceSettings):
    model_config = SettingsConfigDict(env_prefix="GATEWAY_", case_sensitive=False)

    service_name: str = "gateway"
    api_port: int = 8080

    resolver_base_url: str = "http://localhost:8081"


class ResolverSettings(ServiceSettings):
    model_config = SettingsConfigDict(env_prefix="RESOLVER_", case_sensitive=False)

    service_name: str = "resolver"
    api_port: int = 8081

    # Location Provider (ViaCEP shape): GET {location_base_url}/{cep}/json/
    location_base_url: str = "http://viacep.com.br/ws"

    # Weather Provider (WeatherAPI shape): GET {weather_base_url}?key=..&q=..&aqi=no
    weather_base_url: str = "http://api.weatherapi.com/v1/current.json"
    weather_api_key: str = Field(default="", repr=False)


@lru_cache(maxsize=1)
def get_gateway_settings() -> GatewaySettings:
    return GatewaySettings()


@lru_cache(maxsize=1)
def get_resolver_settings() -> ResolverSettings:
    return ResolverSettings()


# --- Module Notes -----------------------------------------------------------
# Each service reads only its own prefix, so both can share one environment
# (e.g. a compose file) without collisions.
