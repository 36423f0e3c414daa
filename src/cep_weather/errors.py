"""
cep_weather.errors

User-facing error kinds and their HTTP mapping.

Responsibilities:
- Define the tagged error kinds shared by both services.
- Own the single kind -> (status, public text) table.
- Render a `CepWeatherError` as the plain-text HTTP response callers see.
"""

from __future__ import annotations

import enum

from starlette.responses import PlainTextResponse
from starlette.status import (
    HTTP_404_NOT_FOUND,
    HTTP_422_UNPROCESSABLE_CONTENT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

INVALID_ZIPCODE = "invalid zipcode"
ZIPCODE_NOT_FOUND = "can not find zipcode"


class ErrorKind(str, enum.Enum):
    invalid_input = "INVALID_INPUT"
    not_found = "NOT_FOUND"
    upstream_failure = "UPSTREAM_FAILURE"


STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.invalid_input: HTTP_422_UNPROCESSABLE_CONTENT,
    ErrorKind.not_found: HTTP_404_NOT_FOUND,
    ErrorKind.upstream_failure: HTTP_500_INTERNAL_SERVER_ERROR,
}

# Upstream failures have no fixed text; their detail is rendered instead.
PUBLIC_TEXT_BY_KIND: dict[ErrorKind, str] = {
    ErrorKind.invalid_input: INVALID_ZIPCODE,
    ErrorKind.not_found: ZIPCODE_NOT_FOUND,
}


class CepWeatherError(Exception):
    """
    Raised by provider clients and the weather service.
    `detail` is diagnostic text; it only reaches callers for upstream failures.
    """

    def __init__(self, kind: ErrorKind, detail: str = "", *, stage: str | None = None) -> None:
        super().__init__(detail or kind.value)
        self.kind = kind
        self.detail = detail
        # Which lookup failed ("location" / "weather"); set by the weather service.
        self.stage = stage

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]

    @classmethod
    def invalid_input(cls, detail: str = INVALID_ZIPCODE) -> CepWeatherError:
        return cls(ErrorKind.invalid_input, detail)

    @classmethod
    def not_found(cls, detail: str = ZIPCODE_NOT_FOUND) -> CepWeatherError:
        return cls(ErrorKind.not_found, detail)

    @classmethod
    def upstream(cls, detail: str) -> CepWeatherError:
        return cls(ErrorKind.upstream_failure, detail)


def public_text(err: CepWeatherError) -> str:
    text = PUBLIC_TEXT_BY_KIND.get(err.kind)
    if text is not None:
        return text
    if err.stage:
        return f"Internal server error getting {err.stage}: {err.detail}"
    return f"Internal server error: {err.detail}"


def error_response(err: CepWeatherError) -> PlainTextResponse:
    return PlainTextResponse(public_text(err), status_code=err.status_code)


# --- Module Notes -----------------------------------------------------------
# The public texts and status codes are part of the observable contract; the
# Gateway relays them untouched, so changing them here changes both services.
