"""Exception handlers mapping failures onto `{"error": message}` responses."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING
from uuid import uuid4

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.errors import StoreError, TrackerError
from app.core.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from fastapi import FastAPI
    from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-Id"
GENERIC_ERROR_MESSAGE = "Internal server error"

logger = get_logger(__name__)


def _request_id(request: Request) -> str:
    value = getattr(request.state, "request_id", None)
    return value if isinstance(value, str) else ""


def _error_response(request: Request, status_code: int, message: str) -> JSONResponse:
    response = JSONResponse(status_code=status_code, content={"error": message})
    request_id = _request_id(request)
    if request_id:
        response.headers[REQUEST_ID_HEADER] = request_id
    return response


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(loc)
    msg = str(first.get("msg", "Invalid value"))
    return f"{field}: {msg}" if field else msg


async def _tracker_error_handler(request: Request, exc: Exception) -> JSONResponse:
    if not isinstance(exc, TrackerError):  # pragma: no cover
        raise exc
    if isinstance(exc, StoreError):
        logger.error(
            "request.store_error request_id=%s path=%s error=%s",
            _request_id(request),
            request.url.path,
            exc.message,
        )
    return _error_response(request, exc.status_code, exc.message)


async def _http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    if not isinstance(exc, StarletteHTTPException):  # pragma: no cover
        raise exc
    detail = exc.detail if isinstance(exc.detail, str) else "Request failed"
    response = _error_response(request, exc.status_code, detail)
    for key, value in (exc.headers or {}).items():
        response.headers[key] = value
    return response


async def _request_validation_handler(request: Request, exc: Exception) -> JSONResponse:
    if not isinstance(exc, RequestValidationError):  # pragma: no cover
        raise exc
    return _error_response(request, status.HTTP_400_BAD_REQUEST, _validation_message(exc))


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "request.unhandled_error request_id=%s path=%s error_type=%s",
        _request_id(request),
        request.url.path,
        exc.__class__.__name__,
    )
    return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE)


def install_error_handling(app: FastAPI) -> None:
    @app.middleware("http")
    async def _attach_request_id(
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()
        response = await call_next(request)
        response.headers.setdefault(REQUEST_ID_HEADER, request_id)
        logger.info(
            "request.completed request_id=%s method=%s path=%s status=%s duration_ms=%.1f",
            request_id,
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
        )
        return response

    app.add_exception_handler(TrackerError, _tracker_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
