"""
Health check endpoints for the API.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Dict, Any
from datetime import datetime

from app.config import settings
from app.dependencies import get_db
from app.db.init_db import check_connection

router = APIRouter()

@router.get("/ping")
def ping() -> Dict[str, str]:
    """Liveness probe."""
    return {"response": "pong"}

@router.get("/health")
def health_check() -> Dict[str, Any]:
    """
    Basic health check endpoint.
    Returns API status and version information.
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT
    }

@router.get("/health/database")
def database_health(db: Session = Depends(get_db)) -> Dict[str, Any]:
    """
    Check that the store answers a trivial query.
    """
    engine = db.get_bind()
    healthy = check_connection(engine)
    return {
        "status": "healthy" if healthy else "unhealthy",
        "timestamp": datetime.now().isoformat(),
        "backend": engine.dialect.name,
    }
