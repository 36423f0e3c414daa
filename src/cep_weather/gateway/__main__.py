"""
cep_weather.gateway.__main__

Entrypoint for running the Gateway via `python -m cep_weather.gateway`.

Responsibilities:
- Load settings.
- Create the app (logging and tracing are configured there).
- Install its tracing handle process-wide and start uvicorn.
"""

from __future__ import annotations

import uvicorn

from cep_weather.gateway.app import create_app
from cep_weather.settings import get_gateway_settings


def main() -> None:
    settings = get_gateway_settings()
    app = create_app(settings=settings)
    app.state.tracing.install()

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,  # structlog
    )


if __name__ == "__main__":
    main()
