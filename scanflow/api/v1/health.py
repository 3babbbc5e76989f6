"""
==============================================================================
Health Check Endpoints
==============================================================================

System health status endpoints for monitoring and orchestration.

==============================================================================
"""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from scanflow.core.dependencies import get_session_store
from scanflow.db.database import get_db
from scanflow.session.store import SessionStore


router = APIRouter(prefix="/health", tags=["Health"])


class HealthController:
    """Controller for health check operations."""

    def __init__(self, db: Session, store: SessionStore):
        self._db = db
        self._store = store

    def check_database(self) -> str:
        """Check database connectivity."""
        try:
            self._db.execute(text("SELECT 1"))
            return "healthy"
        except Exception:
            return "unhealthy"

    def get_health(self) -> dict:
        """Get full health status."""
        db_status = self.check_database()
        overall = "healthy" if db_status == "healthy" else "degraded"

        return {
            "status": overall,
            "components": {
                "api": "healthy",
                "database": db_status,
            },
            "details": {
                "open_sessions": len(self._store),
            }
        }


@router.get("")
async def health_check(
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
):
    """
    Health check endpoint.

    Returns system status including API and database.
    """
    controller = HealthController(db, store)
    return controller.get_health()


@router.get("/ready")
async def readiness_check():
    """Readiness probe for container orchestration."""
    return {"ready": True}


@router.get("/live")
async def liveness_check():
    """Liveness probe for container orchestration."""
    return {"alive": True}
