"""
cep_weather.conversions

Temperature unit conversions for the Resolver response.
"""

from __future__ import annotations


def celsius_to_fahrenheit(celsius: float) -> float:
    return celsius * 1.8 + 32


def celsius_to_kelvin(celsius: float) -> float:
    # +273 (not +273.15) is what clients of this API already rely on.
    return celsius + 273
