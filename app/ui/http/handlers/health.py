from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.domain.common.time import to_iso
from app.ui.http.middlewares.di import Services, get_services
from app.ui.http.responses import ok

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(services: Services = Depends(get_services)) -> JSONResponse:
    await services.db.fetchone("SELECT 1;")
    return ok("OK", {"status": "OK", "timestamp": to_iso(services.clock.now())})
