# dealership/routers/health.py
"""
Liveness endpoints.
/ping is the storefront's keep-alive; /health adds database connectivity
and which webhook integrations are configured.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from dealership.database import get_db
from dealership.config import settings
from datetime import datetime

router = APIRouter()


@router.get("/ping", summary="Keep-alive")
def ping():
    return {"message": settings.PING_MESSAGE}


@router.get("/health", summary="System health check")
def health_check(db: Session = Depends(get_db)):
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "backend": "ok",
        "database": "unknown",
        "webhooks": settings.webhooks_configured,
    }

    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except SQLAlchemyError as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    return result
