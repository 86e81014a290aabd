from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.domain.common.errors import (
    AccountNotFoundError,
    AuthenticationError,
    ConflictError,
    DomainError,
    IncorrectCredentialError,
    NotFoundError,
    PartialDeletionError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# first match wins
_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AccountNotFoundError, 404),
    (IncorrectCredentialError, 401),
    (ConflictError, 400),
    (NotFoundError, 404),
    (PartialDeletionError, 500),
)


def envelope(success: bool, message: str, data: Any = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": success, "message": message}
    if data is not None:
        body["data"] = data
    return body


def ok(message: str, data: Any = None, status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=envelope(True, message, data))


def fail(message: str, status_code: int, data: Any = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=envelope(False, message, data))


def status_for(error: DomainError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(error, cls):
            return status
    return 500


def _field_name(loc: tuple) -> str:
    # ("body", "dueDate") -> "dueDate"; ("query", "status") -> "status"
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "header")]
    return ".".join(parts) or "body"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainError)
    async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
        status = status_for(exc)
        if status >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return fail(exc.message, status, exc.data)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors: Dict[str, str] = {}
        for err in exc.errors():
            errors.setdefault(_field_name(tuple(err.get("loc", ()))), str(err.get("msg", "Invalid value")))
        return fail("Validation failed", 400, errors)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404:
            message = f"Route {request.url.path} not found"
        else:
            message = str(exc.detail)
        return fail(message, exc.status_code)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return fail("Server error", 500)

