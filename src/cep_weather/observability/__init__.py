"""
cep_weather.observability

Observability package.

Responsibilities:
- Structured logging configuration.
- Request context propagation for consistent log enrichment.
- Distributed tracing (span provider, exporter, propagator, server spans).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Both services build the same observability stack; only the service name differs.
