"""
cep_weather.gateway

Front Gateway service.

Responsibilities:
- Accept `POST /` with `{"cep": "..."}`, validate it strictly.
- Relay the Resolver's answer (status, headers, body) unchanged.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Run with `python -m cep_weather.gateway`.
