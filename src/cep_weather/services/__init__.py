"""
cep_weather.services

Service layer package.

Responsibilities:
- Resolver orchestration (CEP -> location -> temperature).
"""

# Package marker.
