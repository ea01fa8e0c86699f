"""
Gestionnaires d'exceptions.
- Erreurs métier (funwalk.errors) -> JSON {"detail", "message", "code"} + statut de la classe
  (les erreurs distantes n'exposent qu'un message générique).
- HTTPException 401/403 sur une navigation HTML vers /admin -> redirection vers /.
- Les autres clients (API, JSON) conservent la réponse FastAPI standard.
"""
import logging
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.status import HTTP_303_SEE_OTHER
from funwalk.errors import (
    GENERIC_FAILURE_MESSAGE,
    PaymentDeclinedError,
    RecordStoreError,
    PaymentSetupError,
    RegistrationError,
    ValidationError,
)

logger = logging.getLogger(__name__)

REMOTE_ERRORS = (RecordStoreError, PaymentSetupError)

def error_payload(exc: RegistrationError) -> dict:
    if isinstance(exc, REMOTE_ERRORS):
        message = GENERIC_FAILURE_MESSAGE
    else:
        message = exc.message
    payload = {"detail": exc.title, "message": message, "code": exc.code}
    if isinstance(exc, ValidationError):
        payload["errors"] = exc.errors
    if isinstance(exc, PaymentDeclinedError) and exc.decline_code:
        payload["decline_code"] = exc.decline_code
    return payload

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RegistrationError)
    async def registration_error(request: Request, exc: RegistrationError):
        if exc.status_code >= 500:
            logger.error("%s %s -> %s: %s", request.method, request.url.path, type(exc).__name__, exc.message)
        else:
            logger.info("%s %s -> %s: %s", request.method, request.url.path, type(exc).__name__, exc.message)
        return JSONResponse(status_code=exc.status_code, content=error_payload(exc))

    @app.exception_handler(HTTPException)
    async def html_redirect_on_auth_errors(request: Request, exc: HTTPException):
        if exc.status_code in (401, 403):
            accept = (request.headers.get("accept") or "").lower()
            if "text/html" in accept and request.url.path.startswith("/admin"):
                return RedirectResponse(url="/", status_code=HTTP_303_SEE_OTHER)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=getattr(exc, "headers", None))
