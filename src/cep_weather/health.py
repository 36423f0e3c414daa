"""
cep_weather.health

Liveness endpoint shared by both services.
"""

from __future__ import annotations

from fastapi import APIRouter

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    # Liveness only: upstream providers are not probed.
    return {"status": "ok"}
