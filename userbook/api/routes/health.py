"""Health & Readiness Probes: liveness and readiness endpoints.

Invariants:
    - GET /health always returns 200 "ok" if the process is up (liveness)
    - GET /health/ready returns 503 if the database is unreachable (readiness)
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse

from userbook.api.deps import get_user_repository
from userbook.core.repository_protocols import UserRepository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_class=PlainTextResponse)
async def health_check():
    """Basic liveness probe."""
    return PlainTextResponse("ok", status_code=status.HTTP_200_OK)


@router.get("/ready", response_class=PlainTextResponse)
async def readiness_check(
    repository: UserRepository = Depends(get_user_repository),
):
    """Readiness probe, includes database connectivity."""
    if not await repository.ping():
        logger.warning("Readiness check failed: database unavailable")
        return PlainTextResponse(
            "database unavailable",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return PlainTextResponse("ready")
