"""Health check endpoints."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, status
from pydantic import BaseModel

from au_payroll.api.dependencies import PayEvents
from au_payroll.stp.types import financial_year_for

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime
    storage: str


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
)
async def health_check(service: PayEvents) -> HealthResponse:
    """Check API and pay event storage health."""
    now = datetime.now(timezone.utc)
    storage_status = "unhealthy"
    try:
        await service.repository.list_events_for_year(financial_year_for(now.date()))
        storage_status = "healthy"
    except Exception:
        logger.exception("Pay event storage health check failed")

    return HealthResponse(
        status="healthy" if storage_status == "healthy" else "degraded",
        timestamp=now,
        storage=storage_status,
    )


@router.get("/ready", status_code=status.HTTP_200_OK)
async def readiness_check() -> dict[str, str]:
    """Readiness check for container orchestration."""
    return {"status": "ready"}


@router.get("/live", status_code=status.HTTP_200_OK)
async def liveness_check() -> dict[str, str]:
    """Liveness check for container orchestration."""
    return {"status": "alive"}
