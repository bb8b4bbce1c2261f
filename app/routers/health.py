"""
Health Check Endpoints

- /health/live  - Liveness check (is process running)
- /health/ready - Readiness check (can the database be reached)
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from datetime import datetime, timezone
import time

from ..database import get_db
from ..utils.db_helpers import is_postgres
from ..utils.logging_config import get_logger

router = APIRouter(prefix="/health", tags=["Health"])
logger = get_logger(__name__)


def get_db_health(db: Session) -> dict:
    """Check database connectivity and latency"""
    try:
        start = time.time()
        db.execute(text("SELECT 1"))
        latency_ms = (time.time() - start) * 1000
        return {
            "status": "up",
            "latency_ms": round(latency_ms, 2),
            "type": "postgresql" if is_postgres(db) else "sqlite"
        }
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        return {
            "status": "down",
            "error": str(e)[:100]
        }


@router.get("/live")
async def liveness():
    return {"status": "alive", "timestamp": datetime.now(timezone.utc).isoformat()}


@router.get("/ready")
async def readiness(db: Session = Depends(get_db)):
    database = get_db_health(db)
    ready = database["status"] == "up"
    return JSONResponse(
        status_code=200 if ready else 503,
        content={"status": "ready" if ready else "not_ready", "database": database}
    )
