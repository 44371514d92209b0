"""
Liveness check.

GET /health is public and never touches the database, so it stays green
while Postgres or Supabase Auth are down.
"""

from fastapi import APIRouter

from dashboard.schemas.health import HealthResponse
from dashboard.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["system"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness check",
    description="Public; answers as long as the process is serving requests.",
    status_code=200,
)
async def health_check() -> HealthResponse:
    logger.debug("Health check")
    return HealthResponse()
