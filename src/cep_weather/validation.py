"""
cep_weather.validation

Postal code (CEP) syntax checks.

Responsibilities:
- Strict check used by the Gateway (exactly 8 digits, nothing else).
- Lenient check used by the Resolver (non-digits stripped first).
"""

from __future__ import annotations

import re

# ASCII only: `\d` would also accept other Unicode decimal digits.
_CEP_RE = re.compile(r"[0-9]{8}")
_NON_DIGIT_RE = re.compile(r"[^0-9]")


def is_valid_cep_strict(cep: str) -> bool:
    return _CEP_RE.fullmatch(cep) is not None


def clean_cep(cep: str) -> str:
    return _NON_DIGIT_RE.sub("", cep)


def is_valid_cep(cep: str) -> bool:
    # "01001-000" passes here but not in `is_valid_cep_strict`.
    return is_valid_cep_strict(clean_cep(cep))


# --- Module Notes -----------------------------------------------------------
# The asymmetry is intentional: the Gateway is the public edge and only accepts
# canonical input, the Resolver tolerates formatted codes from other callers.
