from __future__ import annotations

import traceback
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

from vinped.commons.logging import logger
from vinped.commons.results import ErrorKind, ServiceError
from vinped.core.db import (
    IntegrityViolationException,
    UniqueViolationException,
)
from vinped.core.settings import settings

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
}


def _body(
    request: Request, code: int, message: str, details: Any = None
) -> dict[str, Any]:
    return {
        "exception": {
            "code": code,
            "message": message,
            "details": details,
            "path": request.url.path,
            "method": request.method,
        }
    }


def error_response(request: Request, error: ServiceError) -> JSONResponse:
    code = STATUS_BY_KIND[error.kind]
    headers = {"WWW-Authenticate": "Bearer"} if error.kind is ErrorKind.UNAUTHORIZED else None
    return JSONResponse(
        status_code=code,
        content=_body(request, code, error.message, error.details),
        headers=headers,
    )


def _field_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    out: list[dict[str, str]] = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        msg = str(err.get("msg", ""))
        out.append(
            {"path": ".".join(loc), "message": msg.removeprefix("Value error, ")}
        )
    return out


def configure_global_exception_handlers(app: FastAPI) -> FastAPI:
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        code = status.HTTP_400_BAD_REQUEST
        return JSONResponse(
            status_code=code,
            content=_body(request, code, "Validation error", _field_errors(exc)),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=_body(request, exc.status_code, str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(IntegrityViolationException)
    async def integrity_exception_handler(
        request: Request, exc: IntegrityViolationException
    ) -> JSONResponse:
        # Constraint violations no service anticipated.
        if isinstance(exc, UniqueViolationException):
            code = status.HTTP_409_CONFLICT
        else:
            code = status.HTTP_400_BAD_REQUEST
        return JSONResponse(status_code=code, content=_body(request, code, exc.message))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        logger.exception(
            "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
        )
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
        details = (
            "".join(traceback.format_exception(exc)) if settings.is_development else None
        )
        return JSONResponse(
            status_code=code,
            content=_body(request, code, "Internal server error", details),
        )

    return app
