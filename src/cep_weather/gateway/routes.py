"""
cep_weather.gateway.routes

Gateway HTTP surface.

Responsibilities:
- Decode and strictly validate the inbound CEP.
- Forward to the Resolver inside a `call-resolver` span.
- Relay the Resolver's status, headers and raw body byte-for-byte.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
from fastapi import APIRouter, Depends, Request
from opentelemetry import trace
from opentelemetry.semconv.attributes.http_attributes import HTTP_RESPONSE_STATUS_CODE
from opentelemetry.semconv.attributes.url_attributes import URL_FULL
from opentelemetry.trace import Span, SpanKind
from pydantic import ValidationError
from starlette.responses import PlainTextResponse, Response, StreamingResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_405_METHOD_NOT_ALLOWED,
    HTTP_422_UNPROCESSABLE_CONTENT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from cep_weather.clients.resolver import ResolverClient
from cep_weather.deps import http_from_app, settings_from_app, tracing_from_app
from cep_weather.errors import INVALID_ZIPCODE, CepWeatherError
from cep_weather.models import CepRequest
from cep_weather.observability.logging import get_logger
from cep_weather.observability.middleware import REQUEST_ID_HEADER, current_request_id
from cep_weather.observability.tracing import Tracing, record_failure
from cep_weather.settings import GatewaySettings
from cep_weather.validation import is_valid_cep_strict

log = get_logger(__name__)

router = APIRouter()

# Connection-level headers describe the Resolver hop, not the payload.
_HOP_BY_HOP = frozenset(
    {
        b"connection",
        b"keep-alive",
        b"proxy-authenticate",
        b"proxy-authorization",
        b"te",
        b"trailer",
        b"transfer-encoding",
        b"upgrade",
    }
)


def resolver_client(
    settings: GatewaySettings = Depends(settings_from_app),
    http: httpx.AsyncClient = Depends(http_from_app),
) -> ResolverClient:
    return ResolverClient(settings=settings, http=http)


@router.post("/")
async def relay_weather(
    request: Request,
    tracing: Tracing = Depends(tracing_from_app),
    resolver: ResolverClient = Depends(resolver_client),
) -> Response:
    # Raw body: a pydantic body parameter would turn malformed JSON into 422.
    try:
        body = CepRequest.model_validate_json(await request.body())
    except ValidationError:
        return PlainTextResponse("Bad Request: Malformed JSON", status_code=HTTP_400_BAD_REQUEST)

    if not is_valid_cep_strict(body.cep):
        return PlainTextResponse(INVALID_ZIPCODE, status_code=HTTP_422_UNPROCESSABLE_CONTENT)

    # Not `start_as_current_span`: the span must stay open until the body is relayed.
    span = tracing.tracer(__name__).start_span(
        "call-resolver",
        kind=SpanKind.CLIENT,
        attributes={"cep.input": body.cep, URL_FULL: resolver.url_for(body.cep)},
    )
    headers = tracing.inject({}, context=trace.set_span_in_context(span))
    request_id = current_request_id()
    if request_id:
        headers[REQUEST_ID_HEADER] = request_id

    try:
        upstream = await resolver.open_weather(body.cep, headers=headers)
    except CepWeatherError as e:
        log.error("resolver_unreachable", cep=body.cep, error=e.detail)
        record_failure(span, "failed to reach resolver", e.__cause__ or e)
        span.end()
        return PlainTextResponse(
            f"Internal Server Error: {e.detail}",
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        )

    span.set_attribute(HTTP_RESPONSE_STATUS_CODE, upstream.status_code)
    response = StreamingResponse(_relay_body(upstream, span), status_code=upstream.status_code)
    response.raw_headers = relay_headers(upstream)
    return response


@router.api_route(
    "/",
    methods=["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"],
    include_in_schema=False,
)
async def method_not_allowed() -> Response:
    return PlainTextResponse(
        "Method Not Allowed",
        status_code=HTTP_405_METHOD_NOT_ALLOWED,
        headers={"Allow": "POST"},
    )


def relay_headers(upstream: httpx.Response) -> list[tuple[bytes, bytes]]:
    # Raw pairs keep repeated headers (e.g. several Set-Cookie) intact.
    return [(k.lower(), v) for k, v in upstream.headers.raw if k.lower() not in _HOP_BY_HOP]


async def _relay_body(upstream: httpx.Response, span: Span) -> AsyncIterator[bytes]:
    # Raw bytes: no decompression, so content-length/content-encoding stay valid.
    try:
        if upstream.is_stream_consumed:
            # Already buffered by the transport; the stream cannot be iterated again.
            yield upstream.content
        else:
            async for chunk in upstream.aiter_raw():
                yield chunk
    except (httpx.HTTPError, httpx.StreamError) as e:
        # Status and headers are already sent; all that is left is to record it.
        log.error("relay_body_failed", error=str(e))
        record_failure(span, "failed to copy response body", e)
    finally:
        await upstream.aclose()
        span.end()


# --- Module Notes -----------------------------------------------------------
# The Gateway never reclassifies a Resolver answer: 404/422/500 bodies from the
# Resolver reach the caller exactly as produced there.
