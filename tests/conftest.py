"""
tests.conftest

Shared fixtures: in-process Gateway/Resolver apps wired together, fake providers,
and an in-memory span exporter.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

import httpx
import pytest
from fastapi import FastAPI
from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from cep_weather.gateway.app import create_app as create_gateway_app
from cep_weather.observability.tracing import configure_tracing
from cep_weather.resolver.app import create_app as create_resolver_app
from cep_weather.settings import GatewaySettings, ResolverSettings

LOCATION_HOST = "location.test"
WEATHER_HOST = "weather.test"
RESOLVER_HOST = "resolver.test"


class FakeProviders:
    """
    httpx.MockTransport handler standing in for both external providers.

    Each answer is a JSON-able object, raw bytes, an httpx.Response, or an
    exception to raise (transport failure).
    """

    def __init__(self) -> None:
        self.location: Any = {"localidade": "São Paulo", "uf": "SP"}
        self.weather: Any = {"location": {"name": "Sao Paulo"}, "current": {"temp_c": 21.2}}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == LOCATION_HOST:
            return _answer(self.location)
        if request.url.host == WEATHER_HOST:
            return _answer(self.weather)
        return httpx.Response(404, text="unknown host")

    @property
    def location_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == LOCATION_HOST]

    @property
    def weather_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == WEATHER_HOST]


def _answer(answer: Any) -> httpx.Response:
    if isinstance(answer, Exception):
        raise answer
    if isinstance(answer, httpx.Response):
        return answer
    if isinstance(answer, bytes):
        return httpx.Response(200, content=answer)
    return httpx.Response(200, json=answer)


@pytest.fixture
def span_exporter() -> InMemorySpanExporter:
    return InMemorySpanExporter()


@pytest.fixture
def providers() -> FakeProviders:
    return FakeProviders()


@pytest.fixture
def resolver_settings() -> ResolverSettings:
    return ResolverSettings(
        log_level="WARNING",
        location_base_url=f"http://{LOCATION_HOST}/ws",
        weather_base_url=f"http://{WEATHER_HOST}/v1/current.json",
        weather_api_key="test-key",
    )


@pytest.fixture
def gateway_settings() -> GatewaySettings:
    return GatewaySettings(log_level="WARNING", resolver_base_url=f"http://{RESOLVER_HOST}")


@pytest.fixture
def resolver_app(
    resolver_settings: ResolverSettings,
    providers: FakeProviders,
    span_exporter: InMemorySpanExporter,
) -> Iterator[FastAPI]:
    tracing = configure_tracing(
        service_name="resolver", settings=resolver_settings, exporter=span_exporter
    )
    http = httpx.AsyncClient(transport=httpx.MockTransport(providers))
    yield create_resolver_app(settings=resolver_settings, tracing=tracing, http=http)
    tracing.provider.shutdown()


@pytest.fixture
def make_gateway_app(
    gateway_settings: GatewaySettings,
    span_exporter: InMemorySpanExporter,
) -> Iterator[Callable[[httpx.AsyncBaseTransport], FastAPI]]:
    """
    Build a Gateway whose outbound transport is chosen by the test
    (in-process Resolver, or a mock standing in for it).
    """

    tracer_providers = []

    def _make(transport: httpx.AsyncBaseTransport) -> FastAPI:
        tracing = configure_tracing(
            service_name="gateway", settings=gateway_settings, exporter=span_exporter
        )
        tracer_providers.append(tracing.provider)
        http = httpx.AsyncClient(transport=transport)
        return create_gateway_app(settings=gateway_settings, tracing=tracing, http=http)

    yield _make
    for provider in tracer_providers:
        provider.shutdown()


@pytest.fixture
def gateway_app(
    make_gateway_app: Callable[[httpx.AsyncBaseTransport], FastAPI],
    resolver_app: FastAPI,
) -> FastAPI:
    return make_gateway_app(httpx.ASGITransport(app=resolver_app))


@pytest.fixture
def finished_spans(
    span_exporter: InMemorySpanExporter,
) -> Callable[..., list[ReadableSpan]]:
    # Spans go through BatchSpanProcessor; flush the given apps before reading.
    def _collect(*apps: FastAPI) -> list[ReadableSpan]:
        for app in apps:
            app.state.tracing.provider.force_flush()
        return list(span_exporter.get_finished_spans())

    return _collect


def client_for(app: FastAPI, base_url: str = "http://test") -> httpx.AsyncClient:
    # httpx ASGITransport does not run lifespan; apps get their HTTP client injected instead.
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url=base_url)


@pytest.fixture
def client() -> Callable[..., httpx.AsyncClient]:
    return client_for


def spans_by_name(spans: list[ReadableSpan]) -> dict[str, ReadableSpan]:
    return {s.name: s for s in spans}


@pytest.fixture
def by_name() -> Callable[[list[ReadableSpan]], dict[str, ReadableSpan]]:
    return spans_by_name
