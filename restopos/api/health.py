"""
Health Check endpoints pour restopos.

- /health: Liveness check (l'app repond)
- /ready: Readiness check (base de donnees joignable)
"""
import logging
import time
from datetime import datetime, timezone
from typing import Dict, Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from restopos.core.config import get_settings
from restopos.core.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


def check_database(db: Session) -> Dict[str, Any]:
    """
    Verifie la connexion a la base de donnees.

    Returns:
        Dict avec status et latence
    """
    try:
        start = time.perf_counter()
        db.execute(text("SELECT 1")).fetchone()
        latency_ms = round((time.perf_counter() - start) * 1000, 2)
        return {"status": "ok", "latency_ms": latency_ms}
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        return {"status": "error", "error": str(e)}


@router.get("/health", summary="Liveness check")
async def health():
    """Retourne OK si l'application est en vie. Ne verifie pas les dependances."""
    settings = get_settings()
    return {"status": "ok", "version": settings.APP_VERSION}


@router.get("/ready", summary="Readiness check", include_in_schema=False)
def ready(db: Session = Depends(get_db)):
    """Retourne 503 si la base de donnees est indisponible."""
    db_status = check_database(db)
    timestamp = datetime.now(timezone.utc).isoformat()
    if db_status["status"] != "ok":
        return JSONResponse(
            status_code=503,
            content={"status": "error", "checks": {"database": db_status}, "timestamp": timestamp},
        )
    return {"status": "ok", "checks": {"database": db_status}, "timestamp": timestamp}
