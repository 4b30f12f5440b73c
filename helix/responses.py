# Response envelope and error kinds shared by every route

import logging
from enum import Enum
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from google.api_core.exceptions import GoogleAPICallError
from pydantic import ValidationError

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    AUTHORIZATION = "authorization"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    TRANSPORT = "transport"
    PARSE = "parse"
    INTERNAL = "internal"


STATUS_CODES = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.AUTHORIZATION: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.TRANSPORT: 502,
    ErrorKind.PARSE: 502,
    ErrorKind.INTERNAL: 500,
}


class HelixError(Exception):
    kind = ErrorKind.INTERNAL

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]


class ValidationFailed(HelixError):
    kind = ErrorKind.VALIDATION


class AuthorizationError(HelixError):
    kind = ErrorKind.AUTHORIZATION


class ForbiddenError(HelixError):
    kind = ErrorKind.FORBIDDEN


class NotFoundError(HelixError):
    kind = ErrorKind.NOT_FOUND


def ok(data: Any = None, status_code: int = 200) -> JSONResponse:
    return JSONResponse({"ok": True, "data": jsonable_encoder(data)}, status_code=status_code)


def fail(kind: ErrorKind, message: str) -> JSONResponse:
    return JSONResponse(
        {"ok": False, "error": {"kind": kind.value, "message": message}},
        status_code=STATUS_CODES[kind],
    )


def install_error_handlers(app: FastAPI) -> None:
    """Render HelixError and request validation failures in the envelope."""

    @app.exception_handler(HelixError)
    async def helix_error_handler(request: Request, exc: HelixError):
        return fail(exc.kind, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = "; ".join(
            f"{'.'.join(str(part) for part in error.get('loc', []))}: {error.get('msg')}"
            for error in errors
        ) or "Invalid request"
        return fail(ErrorKind.VALIDATION, message)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.url.path}: {exc}")
        return fail(ErrorKind.INTERNAL, str(exc))


def error_response(exc: Exception) -> JSONResponse:
    """Map an exception caught in a route to its envelope."""
    if isinstance(exc, HelixError):
        return fail(exc.kind, exc.message)
    if isinstance(exc, GoogleAPICallError):
        logger.error(f"Database call failed: {exc}")
        return fail(ErrorKind.TRANSPORT, str(exc))
    if isinstance(exc, ValidationError):
        logger.error(f"Stored data failed validation: {exc}")
        return fail(ErrorKind.PARSE, str(exc))
    logger.exception(f"Unexpected error: {exc}")
    return fail(ErrorKind.INTERNAL, str(exc))
