"""
Health check endpoints.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ... import __version__
from ...adapters.db.mongo.database import ping
from ...core.config import get_settings
from ..schemas.common import ApiResponse
from ..utils.responses import ok

router = APIRouter(prefix="/health", tags=["health"])
logger = logging.getLogger("clinicqueue")


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    timestamp: datetime
    version: str
    service: str


@router.get("", response_model=ApiResponse[HealthResponse])
@router.get("/", response_model=ApiResponse[HealthResponse], include_in_schema=False)
async def health_check(request: Request):
    """
    Health check endpoint.

    Returns the current status of the service.
    """
    return ok(request, data=HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        service="Clinic Queue Journey",
    ), message="OK")


@router.get("/ready", response_model=ApiResponse[dict])
async def readiness_check(request: Request):
    """
    Readiness check endpoint.

    Returns whether the service can reach its database.
    """
    checks = {}
    try:
        await ping(get_settings().database)
        checks["database"] = "ok"
    except Exception as e:
        logger.warning(f"Readiness check: database unreachable: {e}")
        checks["database"] = f"error: {str(e)[:50]}"

    all_ok = all(value == "ok" for value in checks.values())
    response = ok(request, data={"ready": all_ok, "checks": checks})
    return JSONResponse(status_code=200 if all_ok else 503, content=response.model_dump())
