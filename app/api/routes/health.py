"""
Health check routes for monitoring and service discovery.
Provides endpoints to verify service health and database connectivity.
"""

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.api.deps import SessionDep
from app.core.config import settings
from app.core.logging import get_logger
from app.models.base import utc_now

logger = get_logger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check() -> dict:
    """
    Basic health check endpoint.
    Returns service status and version information.

    Returns:
        Health status
    """
    return {
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "timestamp": utc_now().isoformat(),
    }


@router.get("/health/db")
def database_health_check(session: SessionDep) -> dict:
    """
    Database health check endpoint.
    Verifies database connectivity by executing a simple query.

    Args:
        session: Database session

    Returns:
        Database health status; driver errors are logged, not returned
    """
    try:
        result = session.connection().execute(text("SELECT 1")).scalar()
    except SQLAlchemyError:
        logger.exception("Database health check failed")
        return {"status": "unhealthy", "database": "error"}

    return {
        "status": "healthy",
        "database": "ok",
        "result": int(result) if result is not None else 1,
    }
