"""
Liveness and service info endpoints
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from orderdesk import __version__
from orderdesk.config import settings
from orderdesk.database import get_db, utcnow

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Service and database status; events are reported as configured, not probed"""
    try:
        db.execute(text("SELECT 1"))
        database = "healthy"
    except SQLAlchemyError as e:
        logger.error("Health check could not reach the database: %s", e)
        database = f"unhealthy: {e}"

    return {
        "service": settings.SERVICE_NAME,
        "status": "healthy" if database == "healthy" else "unhealthy",
        "database": database,
        "events": "enabled" if settings.EVENTS_ENABLED else "disabled",
        "timestamp": utcnow().isoformat() + "Z",
    }


@router.get("/")
def root():
    return {"service": settings.SERVICE_NAME, "version": __version__, "docs": "/docs"}
