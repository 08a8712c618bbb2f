"""
restopos API - Point d'entree principal
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.gzip import GZipMiddleware

from restopos.core.config import get_settings
from restopos.core.database import SessionLocal
from restopos.core.logging import configure_logging, get_logger
from restopos.middleware.exception_handler import register_exception_handlers
from restopos.middleware.request_id import RequestIDMiddleware
from restopos.services.events import change_notifier

settings = get_settings()

# JSON en prod, console en dev
configure_logging(level=settings.LOG_LEVEL, json_format=settings.ENV != "dev")
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Gestionnaire de cycle de vie de l'application
    Execute au demarrage et a l'arret
    """
    logger.info("=" * 50)
    logger.info(f"Demarrage de {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environnement: {settings.ENV}")
    logger.info(
        f"Journee commerciale: coupure {settings.BUSINESS_DAY_CUTOFF_HOUR:02d}:"
        f"{settings.BUSINESS_DAY_CUTOFF_MINUTE:02d} ({settings.BUSINESS_TIMEZONE})"
    )
    logger.info("=" * 50)

    try:
        for warning in settings.validate_config():
            logger.warning(warning)
        logger.info("Validation de la configuration: OK")
    except ValueError as e:
        logger.critical(f"Configuration invalide: {e}")
        if settings.is_strict_env:
            raise

    change_notifier.attach(SessionLocal)

    yield

    change_notifier.detach(SessionLocal)
    logger.info("Arret de l'application...")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Stock d'ingredients, catalogue et commandes pour un restaurant",
    lifespan=lifespan,
    docs_url="/docs" if settings.ENV == "dev" else None,
    redoc_url="/redoc" if settings.ENV == "dev" else None,
)

# ============================================
# Middleware Stack (dernier ajoute = premier execute)
# ============================================

app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(RequestIDMiddleware)

register_exception_handlers(app)


# ============================================
# Routes
# ============================================

from restopos.api.health import router as health_router
app.include_router(health_router)

from restopos.api.v1.router import api_router
app.include_router(api_router, prefix="/api/v1")
