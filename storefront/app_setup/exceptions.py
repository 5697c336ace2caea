"""
Gestionnaires d’exceptions.
- Toute HTTPException (dont storefront.errors.*) est rendue en JSON {"error": "<message>"}.
- 401/403 sur une navigation HTML hors /api/*: redirection vers /auth avec le message.
"""
import logging
import urllib.parse
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import HTTP_303_SEE_OTHER

logger = logging.getLogger(__name__)

def _is_api(request: Request) -> bool:
    path = request.url.path
    return path.startswith("/api/") or path.startswith("/admin/api/")

def register_exception_handlers(app: FastAPI) -> None:
    """
    Enregistre les handlers HTTPException et erreurs inattendues.
    - Web: redirection avec message vers /auth pour 401/403.
    - API: {"error": ...} avec le code de l'exception.
    """
    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (401, 403) and not _is_api(request):
            accept = (request.headers.get("accept") or "").lower()
            if "text/html" in accept:
                detail = str(getattr(exc, "detail", "")) or (
                    "Veuillez vous connecter" if exc.status_code == 401 else "Accès interdit"
                )
                msg = urllib.parse.quote_plus(detail)
                return RedirectResponse(url=f"/auth?error={msg}", status_code=HTTP_303_SEE_OTHER)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Erreur interne"})
