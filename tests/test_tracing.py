"""
tests.test_tracing

Tracing handle construction, propagation and shutdown behaviour.
"""

from __future__ import annotations

import pytest
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.exporter.zipkin.json import ZipkinExporter
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ALWAYS_ON

from cep_weather.observability import tracing as tracing_module
from cep_weather.observability.tracing import build_exporter, configure_tracing
from cep_weather.settings import ResolverSettings


def test_configure_tracing(resolver_settings, span_exporter) -> None:
    tracing = configure_tracing(
        service_name="resolver", settings=resolver_settings, exporter=span_exporter
    )
    try:
        assert tracing.service_name == "resolver"
        assert tracing.provider.sampler is ALWAYS_ON
        assert tracing.provider.resource.attributes["service.name"] == "resolver"
        # SDK defaults are merged into the resource.
        assert "telemetry.sdk.language" in tracing.provider.resource.attributes
        processors = tracing.provider._active_span_processor._span_processors
        assert [type(p) for p in processors] == [BatchSpanProcessor]
    finally:
        tracing.provider.shutdown()


def test_build_exporter_follows_settings() -> None:
    zipkin = build_exporter(ResolverSettings(trace_exporter="zipkin"))
    otlp = build_exporter(
        ResolverSettings(trace_exporter="otlp", collector_endpoint="localhost:4317")
    )
    try:
        assert isinstance(zipkin, ZipkinExporter)
        assert isinstance(otlp, OTLPSpanExporter)
    finally:
        zipkin.shutdown()
        otlp.shutdown()


def test_inject_and_extract_round_trip(resolver_settings, span_exporter) -> None:
    tracing = configure_tracing(
        service_name="resolver", settings=resolver_settings, exporter=span_exporter
    )
    try:
        with tracing.tracer("test").start_as_current_span("outer") as span:
            headers = tracing.inject({})
        assert set(headers) >= {"traceparent"}

        ctx = tracing.extract(headers)
        with tracing.tracer("test").start_as_current_span("inner", context=ctx) as inner:
            assert inner.get_span_context().trace_id == span.get_span_context().trace_id
    finally:
        tracing.provider.shutdown()


def test_shutdown_flushes_pending_spans(resolver_settings, span_exporter) -> None:
    tracing = configure_tracing(
        service_name="resolver", settings=resolver_settings, exporter=span_exporter
    )
    with tracing.tracer("test").start_as_current_span("pending"):
        pass

    tracing.shutdown(timeout_millis=1000)

    assert [s.name for s in span_exporter.get_finished_spans()] == ["pending"]


def test_shutdown_tolerates_flush_timeout(
    resolver_settings, span_exporter, monkeypatch: pytest.MonkeyPatch
) -> None:
    tracing = configure_tracing(
        service_name="resolver", settings=resolver_settings, exporter=span_exporter
    )
    monkeypatch.setattr(tracing.provider, "force_flush", lambda timeout_millis=None: False)

    tracing.shutdown(timeout_millis=1)


def test_shutdown_tolerates_flush_errors(
    resolver_settings, span_exporter, monkeypatch: pytest.MonkeyPatch
) -> None:
    tracing = configure_tracing(
        service_name="resolver", settings=resolver_settings, exporter=span_exporter
    )

    def broken_flush(timeout_millis=None):
        raise RuntimeError("collector unreachable")

    monkeypatch.setattr(tracing.provider, "force_flush", broken_flush)

    tracing.shutdown(timeout_millis=1)


def test_install_publishes_process_defaults(
    resolver_settings, span_exporter, monkeypatch: pytest.MonkeyPatch
) -> None:
    installed: dict[str, object] = {}
    monkeypatch.setattr(
        tracing_module.trace, "set_tracer_provider", lambda p: installed.setdefault("provider", p)
    )
    monkeypatch.setattr(
        tracing_module.propagate,
        "set_global_textmap",
        lambda p: installed.setdefault("propagator", p),
    )
    tracing = configure_tracing(
        service_name="resolver", settings=resolver_settings, exporter=span_exporter
    )
    try:
        tracing.install()

        assert installed == {"provider": tracing.provider, "propagator": tracing.propagator}
    finally:
        tracing.provider.shutdown()


def test_shutdown_tolerates_provider_shutdown_errors(
    resolver_settings, span_exporter, monkeypatch: pytest.MonkeyPatch
) -> None:
    tracing = configure_tracing(
        service_name="resolver", settings=resolver_settings, exporter=span_exporter
    )
    real_shutdown = tracing.provider.shutdown

    def broken_shutdown():
        raise RuntimeError("worker did not stop")

    monkeypatch.setattr(tracing.provider, "shutdown", broken_shutdown)
    try:
        tracing.shutdown(timeout_millis=1)
    finally:
        real_shutdown()
