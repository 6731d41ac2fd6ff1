# app/core/errors.py
"""
Application error taxonomy and the FastAPI handlers that render it.

Every error leaves the API as ``{"error": <kind>, "message": <text>}``.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("uvicorn.error")


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    kind = "ServerError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """Malformed or duplicate input."""
    status_code = status.HTTP_400_BAD_REQUEST
    kind = "ValidationError"


class BadRequestError(AppError):
    """Missing file parts, missing query, invalid identifiers."""
    status_code = status.HTTP_400_BAD_REQUEST
    kind = "ValidationError"


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    kind = "UnauthorizedError"


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    kind = "ForbiddenError"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    kind = "NotFoundError"


class ServerError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    kind = "ServerError"


# Kinds for errors raised by the framework itself (unknown route, bad method...)
_KIND_BY_STATUS = {
    400: "ValidationError",
    401: "UnauthorizedError",
    403: "ForbiddenError",
    404: "NotFoundError",
    422: "ValidationError",
    500: "ServerError",
}


def error_body(kind: str, message: str) -> dict:
    return {"error": kind, "message": message}


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    # loc looks like ("body", "username") or ("query", "query")
    field = ".".join(str(p) for p in first.get("loc", ())[1:])
    msg = first.get("msg", "Invalid value")
    return f"{field}: {msg}" if field else msg


async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.kind, exc.message))


async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("ValidationError", _validation_message(exc)),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    kind = _KIND_BY_STATUS.get(exc.status_code, "UnknownError")
    message = exc.detail if isinstance(exc.detail, str) else "An unknown error occurred"
    return JSONResponse(status_code=exc.status_code, content=error_body(kind, message), headers=exc.headers)


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("ServerError", "Internal server error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
