"""Error responder: one JSON error shape for every failure path."""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from puantaj_service.errors import AppError, FieldViolation, ValidationFailed

log = structlog.get_logger(__name__)


def error_response(
    status_code: int,
    message: str,
    details: list[FieldViolation] | None = None,
    headers: dict[str, str] | None = None,
    **extra: Any,
) -> JSONResponse:
    content: dict[str, Any] = {"error": message}
    if details is not None:
        content["details"] = jsonable_encoder([d.as_dict() for d in details])
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content, headers=headers)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        log.error("internal_error", method=request.method, path=request.url.path, error=exc.message)
    return error_response(exc.status_code, exc.message, exc.details)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Routing raises 404 for unknown paths and 405 for known paths with the
    # wrong method; both are reported as an unknown endpoint.
    if exc.status_code in (404, 405):
        return error_response(404, f"Endpoint {request.method} {request.url.path} not found")
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    violations = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("path", "query", "body")]
        name = ".".join(loc) or "request"
        message = f"{name}: {err.get('msg', 'invalid value')}"
        violations.append(FieldViolation(name, message, err.get("input")))
    failure = ValidationFailed(violations)
    return error_response(failure.status_code, failure.message, failure.details)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception("unhandled_exception", method=request.method, path=request.url.path)
    return error_response(500, "Internal server error")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
