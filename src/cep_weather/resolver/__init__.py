"""
cep_weather.resolver

Resolver service.

Responsibilities:
- Serve `GET /weather/{cep}`.
- Resolve CEP -> city (Location Provider) -> temperature (Weather Provider).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Run with `python -m cep_weather.resolver`.
