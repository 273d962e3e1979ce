"""
Centralized error formatting.

Route functions raise ErrorResponse with a message and HTTP status; the
handlers registered here turn every failure into the same JSON shape:

    {"success": false, "error": "<message>"}
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)


class ErrorResponse(Exception):
    """An error that carries the HTTP status it should be reported with."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_body(message: str) -> dict:
    return {"success": False, "error": message}


def _validation_message(error: dict) -> str:
    field = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path"))
    msg = error.get("msg", "Invalid value")
    return f"{field}: {msg}" if field else msg


async def error_response_handler(request: Request, exc: ErrorResponse) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = ", ".join(_validation_message(err) for err in exc.errors())
    return JSONResponse(status_code=400, content=_error_body(message))


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning(f"Integrity error on {request.method} {request.url.path}: {exc.orig}")
    return JSONResponse(status_code=400, content=_error_body("Duplicate field value entered"))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content=_error_body("Server Error"))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ErrorResponse, error_response_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
