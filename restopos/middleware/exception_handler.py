"""
Exception Handler pour restopos.

Toute erreur sort au meme format JSON:
    {"error": "...", "message": "...", "details": {...}, "request_id": "..."}

- AppException: status et code portes par l'exception (404, 409, 422)
- StaleDataError au commit: 409 INCONSISTENT_STATE
- Validation des requetes: 422 VALIDATION_ERROR
- Routes inconnues / methode non supportee: 404 NOT_FOUND, 405 METHOD_NOT_ALLOWED
- Erreur SQLAlchemy non geree: 503, tout le reste: 500
"""
import logging
from typing import Any, Dict, Optional

from fastapi import Request, FastAPI
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from restopos.core.exceptions import AppException, InconsistentState

logger = logging.getLogger(__name__)

# Seules erreurs HTTP levees par le routage de l'API
ROUTING_ERROR_CODES = {
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


def error_response(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    """Response d'erreur standard, request_id repris de RequestIDMiddleware."""
    content: Dict[str, Any] = {"error": error_code, "message": message}
    if details:
        content["details"] = details
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        content["request_id"] = request_id
    return JSONResponse(status_code=status_code, content=content)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code}: {exc.message}", extra={"details": exc.details})
    else:
        logger.info(f"{exc.error_code}: {exc.message}")
    return error_response(request, exc.status_code, exc.error_code, exc.message, exc.details)


async def stale_data_handler(request: Request, exc: StaleDataError) -> JSONResponse:
    """Conflit de version detecte hors service (commit): meme rendu qu'InconsistentState."""
    logger.warning(f"Conflit de version: {exc}")
    return await app_exception_handler(request, InconsistentState())


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    error_code = ROUTING_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
    return error_response(request, exc.status_code, error_code, str(exc.detail))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Corps, query ou path invalides: une entree par champ en erreur."""
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", [])),
            "message": error.get("msg", "Validation error"),
            "type": error.get("type", "unknown"),
        }
        for error in exc.errors()
    ]
    return error_response(
        request, 422, "VALIDATION_ERROR", "Request validation failed", {"errors": errors}
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Exceptions non gerees: le detail reste dans les logs, jamais dans la response."""
    if isinstance(exc, SQLAlchemyError):
        logger.error(f"Erreur base de donnees: {type(exc).__name__}: {exc}", exc_info=True)
        return error_response(request, 503, "SERVICE_UNAVAILABLE", "Database unavailable")
    logger.critical(f"Erreur inattendue: {type(exc).__name__}: {exc}", exc_info=True)
    return error_response(request, 500, "INTERNAL_ERROR", "An unexpected error occurred")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(StaleDataError, stale_data_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
