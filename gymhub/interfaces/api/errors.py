"""Exception handlers rendering errors into the response envelope."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from gymhub.domain.errors import (
    EffectFailed,
    Forbidden,
    InvalidTransition,
    NotFound,
    PreconditionFailed,
    RequestLifecycleError,
)

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES: dict[type[RequestLifecycleError], int] = {
    NotFound: status.HTTP_404_NOT_FOUND,
    Forbidden: status.HTTP_403_FORBIDDEN,
    InvalidTransition: status.HTTP_409_CONFLICT,
    PreconditionFailed: status.HTTP_422_UNPROCESSABLE_ENTITY,
    EffectFailed: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_code_for(exc: RequestLifecycleError) -> int:
    for error_type in type(exc).__mro__:
        if error_type in ERROR_STATUS_CODES:
            return ERROR_STATUS_CODES[error_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _envelope(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, **extra},
    )


async def lifecycle_error_handler(
    request: Request, exc: RequestLifecycleError
) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return _envelope(status_code, exc.message, retryable=exc.retryable)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    response = _envelope(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return _envelope(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "Invalid request data",
        errors=jsonable_encoder(exc.errors()),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestLifecycleError, lifecycle_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)


__all__ = ["ERROR_STATUS_CODES", "register_exception_handlers", "status_code_for"]
