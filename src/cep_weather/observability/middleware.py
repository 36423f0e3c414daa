"""
cep_weather.observability.middleware

HTTP middleware for request-scoped logging context.

Responsibilities:
- Generate/propagate request IDs (the Gateway forwards its id to the Resolver).
- Bind request metadata into structlog contextvars.
"""

from __future__ import annotations

import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "x-request-id"


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())

        # Scoped binding restores the previous values on exit; the Resolver can run
        # in-process inside a Gateway request (tests, ASGITransport).
        with structlog.contextvars.bound_contextvars(
            request_id=request_id,
            path=request.url.path,
            method=request.method,
        ):
            response: Response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def current_request_id() -> str | None:
    return structlog.contextvars.get_contextvars().get("request_id")
