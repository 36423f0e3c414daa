"""
cep_weather.resolver.__main__

Entrypoint for running the Resolver via `python -m cep_weather.resolver`.

Responsibilities:
- Load settings.
- Create the app (logging and tracing are configured there).
- Install its tracing handle process-wide and start uvicorn.
"""

from __future__ import annotations

import uvicorn

from cep_weather.resolver.app import create_app
from cep_weather.settings import get_resolver_settings


def main() -> None:
    settings = get_resolver_settings()
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
