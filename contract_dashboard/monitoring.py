"""
Health check and metrics endpoints for the contract scan dashboard.
"""
import time
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Request, status
from pydantic import BaseModel

router = APIRouter(tags=["monitoring"])

APP_VERSION = "1.0.0"

# Application start time
START_TIME = time.time()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    timestamp: str
    uptime_seconds: float
    version: str
    component: str


@router.get("/health", response_model=HealthResponse, status_code=status.HTTP_200_OK)
async def health_check() -> HealthResponse:
    """
    Basic health check endpoint.
    Returns 200 OK if the service is running.
    """
    uptime = time.time() - START_TIME

    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        uptime_seconds=round(uptime, 2),
        version=APP_VERSION,
        component="contract-dashboard",
    )


@router.get("/metrics")
async def metrics(request: Request) -> Dict[str, Any]:
    """
    Basic metrics endpoint.
    Returns application metrics in JSON format.
    """
    uptime = time.time() - START_TIME

    return {
        "app_uptime_seconds": round(uptime, 2),
        "app_version": APP_VERSION,
        "app_name": "contract-scan-dashboard",
        "stored_scans": len(request.app.state.store),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
