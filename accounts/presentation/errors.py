from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from accounts.domain.errors import DomainError, ErrorKind, ValidationFailed

logger = logging.getLogger(__name__)

_HTTP_BY_KIND: dict[ErrorKind, tuple[int, str]] = {
    ErrorKind.NOT_FOUND: (status.HTTP_404_NOT_FOUND, "NOT FOUND"),
    ErrorKind.VALIDATION: (status.HTTP_400_BAD_REQUEST, "BAD REQUEST"),
    ErrorKind.EMAIL_USED: (status.HTTP_400_BAD_REQUEST, "BAD REQUEST"),
    ErrorKind.WRONG_OTP: (status.HTTP_400_BAD_REQUEST, "BAD REQUEST"),
    ErrorKind.WRONG_PASSWORD: (status.HTTP_400_BAD_REQUEST, "BAD REQUEST"),
    ErrorKind.ALREADY_ACTIVE: (status.HTTP_400_BAD_REQUEST, "BAD REQUEST"),
    ErrorKind.INTERNAL: (status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL SERVER ERROR"),
}


def error_response(kind: ErrorKind, data: Any = None) -> JSONResponse:
    code, label = _HTTP_BY_KIND[kind]
    return JSONResponse(
        status_code=code,
        content={"code": code, "status": label, "data": data},
    )


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    if exc.kind is ErrorKind.INTERNAL:
        return await unhandled_error_handler(request, exc)
    if isinstance(exc, ValidationFailed):
        return error_response(exc.kind, exc.field_errors)
    logger.info(
        "request failed",
        extra={"kind": exc.kind.value, "path": request.url.path},
    )
    return error_response(exc.kind, exc.message)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    field_errors = [
        {
            "field": ".".join(str(p) for p in err["loc"] if p not in ("body", "path", "query")),
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    return await domain_error_handler(request, ValidationFailed(field_errors))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "unhandled error",
        extra={"path": request.url.path},
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    return error_response(ErrorKind.INTERNAL)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
