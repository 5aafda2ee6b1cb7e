"""
Health check API routes.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Response, status

from huissier.di.container import get_container

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("/live", status_code=status.HTTP_200_OK)
async def liveness():
    """Liveness check: process is up."""
    return {"status": "healthy"}


@router.get("", status_code=status.HTTP_200_OK)
async def health_check(response: Response):
    """
    Health check with database connectivity.

    Returns 503 when the database cannot be reached.
    """
    container = get_container()
    db_healthy = await container.database.health_check()

    if not db_healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return {
        "status": "healthy" if db_healthy else "degraded",
        "components": {
            "database": {"status": "healthy" if db_healthy else "unhealthy"},
        },
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
