"""
Health Check Router

Liveness, readiness (database ping) and a summary endpoint for load
balancers and monitoring systems.
"""

import logging
import os
import time
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app import settings
from app.utils.feature_flags import feature_flags

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Application start time for uptime calculation
_start_time = time.time()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health", summary="Basic Health Check")
async def health_check():
    """Application status, version and environment."""
    return {
        "status": "healthy",
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "timestamp": _now(),
        "uptime": time.time() - _start_time,
        "features": feature_flags.get_environment_info()["flag_summary"],
    }


@router.get("/health/ready", summary="Readiness Check")
async def readiness_check(request: Request):
    """
    Kubernetes-style readiness probe

    Returns 200 when the database answers a trivial query, 503 otherwise.
    """
    try:
        async with request.app.state.session_factory() as session:
            await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as exc:
        logger.error("Readiness check failed: %s", exc)
        raise HTTPException(status_code=503, detail="Database unavailable")
    return {"status": "ready", "timestamp": _now()}


@router.get("/health/live", summary="Liveness Check")
async def liveness_check():
    """
    Kubernetes-style liveness probe

    Returns 200 if the application is alive and responding.
    """
    return {"status": "alive", "timestamp": _now(), "pid": os.getpid()}
