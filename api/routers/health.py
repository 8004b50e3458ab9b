"""
Health & Status Router
======================
Server status for the dashboard banner and a database health check.
"""

from datetime import datetime, timezone
from fastapi import APIRouter, Depends

from api import __version__
from api.deps import get_db, check_db_health
from api.schemas import HealthStatus, ServerStatus
from backoffice.db_utils import DatabaseManager

router = APIRouter(prefix="/api", tags=["Health & Status"])


@router.get("/status", response_model=ServerStatus)
def server_status():
    """
    Liveness check polled by the dashboard.
    """
    return ServerStatus(status="online", message="服务器运行正常")


@router.get("/health", response_model=HealthStatus)
def health_check(db: DatabaseManager = Depends(get_db)):
    """
    Health check endpoint.

    Returns API status and database connectivity.
    """
    db_healthy = check_db_health(db)

    return HealthStatus(
        status="ok" if db_healthy else "degraded",
        db="ok" if db_healthy else "error",
        version=__version__,
        timestamp=datetime.now(timezone.utc)
    )
