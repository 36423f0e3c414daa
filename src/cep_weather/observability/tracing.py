"""
cep_weather.observability.tracing

Trace emitter shared by both services (OpenTelemetry SDK).

Responsibilities:
- Build the span exporter, resource, batch processor and tracer provider.
- Hold the composite (tracecontext + baggage) propagator.
- Expose all of it through one explicit `Tracing` handle stored on app state.
- Wrap each inbound HTTP request in a SERVER span (`TracingMiddleware`).
- Flush buffered spans with a bounded wait at shutdown.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, MutableMapping
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from opentelemetry import context as otel_context
from opentelemetry import propagate, trace
from opentelemetry.baggage.propagation import W3CBaggagePropagator
from opentelemetry.context import Context
from opentelemetry.propagators.composite import CompositePropagator
from opentelemetry.propagators.textmap import TextMapPropagator
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SpanExporter
from opentelemetry.sdk.trace.sampling import ALWAYS_ON
from opentelemetry.semconv.attributes.http_attributes import (
    HTTP_REQUEST_METHOD,
    HTTP_RESPONSE_STATUS_CODE,
)
from opentelemetry.semconv.attributes.url_attributes import URL_PATH
from opentelemetry.trace import Span, SpanKind, Status, StatusCode
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from cep_weather.observability.logging import get_logger
from cep_weather.settings import ServiceSettings

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Tracing:
    """
    Process tracing configuration, built once at startup and passed by reference.

    Components read the provider/propagator from here instead of the
    OpenTelemetry globals; `install()` additionally publishes them globally for
    third-party code.
    """

    service_name: str
    provider: TracerProvider
    propagator: TextMapPropagator

    def tracer(self, name: str) -> trace.Tracer:
        return self.provider.get_tracer(name)

    @contextmanager
    def client_span(
        self,
        name: str,
        *,
        tracer_name: str,
        attributes: Mapping[str, Any] | None = None,
    ) -> Iterator[Span]:
        # Status/exception recording is left to callers so error messages stay explicit.
        with self.tracer(tracer_name).start_as_current_span(
            name,
            kind=SpanKind.CLIENT,
            attributes=dict(attributes or {}),
            record_exception=False,
            set_status_on_exception=False,
        ) as span:
            yield span

    def inject(
        self, headers: MutableMapping[str, str], context: Context | None = None
    ) -> MutableMapping[str, str]:
        self.propagator.inject(headers, context=context)
        return headers

    def extract(self, headers: Mapping[str, str]) -> Context:
        return self.propagator.extract(carrier=headers)

    def install(self) -> None:
        trace.set_tracer_provider(self.provider)
        propagate.set_global_textmap(self.propagator)

    def shutdown(self, *, timeout_millis: int) -> None:
        # The timeout bounds the flush only; provider.shutdown() then waits on the
        # batch worker with the SDK's own export timeout.
        try:
            flushed = self.provider.force_flush(timeout_millis)
        except Exception as e:
            log.error("tracer_flush_failed", error=str(e))
            flushed = True
        if not flushed:
            log.warning("tracer_flush_failed", timeout_ms=timeout_millis)
        try:
            self.provider.shutdown()
        except Exception as e:
            log.error("tracer_shutdown_failed", error=str(e))


def build_propagator() -> TextMapPropagator:
    return CompositePropagator([TraceContextTextMapPropagator(), W3CBaggagePropagator()])


def build_exporter(settings: ServiceSettings) -> SpanExporter:
    if settings.trace_exporter == "otlp":
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

        return OTLPSpanExporter(endpoint=settings.collector_endpoint, insecure=True)

    from opentelemetry.exporter.zipkin.json import ZipkinExporter

    return ZipkinExporter(endpoint=settings.collector_endpoint)


def configure_tracing(
    *,
    service_name: str,
    settings: ServiceSettings,
    exporter: SpanExporter | None = None,
) -> Tracing:
    """
    Build the tracing handle for one service.

    `exporter` overrides the settings-driven exporter (tests pass an in-memory one).
    """

    exporter_name = settings.trace_exporter if exporter is None else type(exporter).__name__
    if exporter is None:
        exporter = build_exporter(settings)
    # Resource.create merges SDK defaults (telemetry.sdk.*) with the service name.
    resource = Resource.create({SERVICE_NAME: service_name})
    provider = TracerProvider(sampler=ALWAYS_ON, resource=resource)
    provider.add_span_processor(BatchSpanProcessor(exporter))

    log.info(
        "tracer_initialized",
        trace_service=service_name,
        exporter=exporter_name,
        endpoint=settings.collector_endpoint,
    )
    return Tracing(service_name=service_name, provider=provider, propagator=build_propagator())


def record_failure(span: Span, message: str, exc: BaseException | None = None) -> None:
    if exc is not None:
        span.record_exception(exc)
    span.set_status(Status(StatusCode.ERROR, message))


class TracingMiddleware:
    """
    Pure ASGI middleware: one SERVER span per HTTP request.

    The span continues the caller's trace when trace headers are present and
    stays current for the whole request, including streamed response bodies.
    """

    def __init__(self, app: ASGIApp, *, tracing: Tracing, span_name: str) -> None:
        self.app = app
        self._tracing = tracing
        self._span_name = span_name

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        # Attach the extracted context (not just pass it as parent) so inbound
        # baggage stays current for outbound calls made while handling the request.
        token = otel_context.attach(self._tracing.extract(Headers(scope=scope)))
        try:
            tracer = self._tracing.tracer(__name__)
            with tracer.start_as_current_span(
                self._span_name,
                kind=SpanKind.SERVER,
                attributes={HTTP_REQUEST_METHOD: scope["method"], URL_PATH: scope["path"]},
            ) as span:

                async def send_with_status(message: Message) -> None:
                    if message["type"] == "http.response.start":
                        status = int(message["status"])
                        span.set_attribute(HTTP_RESPONSE_STATUS_CODE, status)
                        if status >= 500:
                            span.set_status(Status(StatusCode.ERROR))
                    await send(message)

                await self.app(scope, receive, send_with_status)
        finally:
            otel_context.detach(token)


# --- Module Notes -----------------------------------------------------------
# Sampling is ALWAYS_ON: every request is traced. Export happens on the batch
# processor's worker thread, so request handlers never wait on the collector.
