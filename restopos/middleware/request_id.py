"""
Request ID Middleware pour restopos.

Genere ou propage un X-Request-ID unique pour chaque requete;
le request_id est inclus dans tous les logs emis pendant la requete.
"""
import uuid
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from restopos.core.logging import set_request_context, clear_request_context


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware pour la gestion des Request IDs.

    - Genere un UUID v4 si X-Request-ID absent
    - Stocke dans request.state.request_id
    - Ajoute X-Request-ID dans la response
    """

    HEADER_NAME = "X-Request-ID"

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(self.HEADER_NAME) or str(uuid.uuid4())
        request.state.request_id = request_id
        set_request_context(request_id=request_id)

        try:
            response = await call_next(request)
            response.headers[self.HEADER_NAME] = request_id
            return response
        finally:
            clear_request_context()
