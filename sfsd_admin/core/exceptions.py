"""
Errores de dominio y handlers globales para respuestas de error consistentes.

Todas las respuestas de error tienen la forma `{"error": str}` (más `request_id`
cuando el middleware lo asignó).
"""
import logging
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


class AdminError(Exception):
    """Base de los errores de dominio; cada subclase fija su status HTTP."""

    status_code = 500

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message or self.__class__.__name__


class InvalidArgument(AdminError):
    status_code = 400


class Unauthorized(AdminError):
    status_code = 401


class Forbidden(AdminError):
    status_code = 403


class NotFound(AdminError):
    status_code = 404


class StorageError(AdminError):
    """Falla de la capa de persistencia (Mongo)."""


class AssetHostError(AdminError):
    """Falla del host de assets remoto (Cloudinary)."""


def _req_id(request: Request) -> str | None:
    return getattr(getattr(request, "state", object()), "request_id", None)


def _body(request: Request, message: str, **extra: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {"error": message, **extra}
    rid = _req_id(request)
    if rid:
        body["request_id"] = rid
    return body


def register_exception_handlers(app: FastAPI) -> None:
    log = logging.getLogger("sfsd.errors")

    @app.exception_handler(AdminError)
    async def _admin_error_handler(request: Request, exc: AdminError):
        if exc.status_code >= 500:
            log.error("%s: %s request_id=%s", type(exc).__name__, exc.message, _req_id(request))
        return JSONResponse(status_code=exc.status_code, content=_body(request, exc.message))

    @app.exception_handler(StarletteHTTPException)
    async def _http_exc_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=_body(request, exc.detail or "HTTP error"),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_handler(request: Request, exc: RequestValidationError):
        details = [{"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in exc.errors()]
        return JSONResponse(status_code=400, content=_body(request, "Validation error", details=details))

    @app.exception_handler(Exception)
    async def _generic_handler(request: Request, exc: Exception):
        log.exception("Unhandled error request_id=%s", _req_id(request))
        return JSONResponse(status_code=500, content=_body(request, "Internal server error"))
