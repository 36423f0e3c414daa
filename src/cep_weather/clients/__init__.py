"""
cep_weather.clients

Outbound HTTP client package.

Responsibilities:
- Location Provider and Weather Provider clients (used by the Resolver).
- Resolver client (used by the Gateway).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Every client wraps its call in a CLIENT span and injects trace headers; services
# depend on these boundaries, never on httpx directly.
