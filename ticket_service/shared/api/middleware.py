"""
Shared API Middleware
======================

Request middleware and exception handlers for the FastAPI application.
"""

import math
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Callable

from fastapi import FastAPI, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware

from ticket_service.core import (
    ApplicationException,
    DataSourceException,
    ResourceNotFoundException,
    ValidationException,
)
from ticket_service.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """
    Adds correlation ID to requests for tracing.

    Reuses the caller's ``X-Correlation-ID`` when present.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER, str(uuid.uuid4()))
        request.state.correlation_id = correlation_id

        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs every request with its method, path, status and latency."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = getattr(request.state, "correlation_id", "unknown")
        start_time = time.perf_counter()

        logger.info(
            "Request started",
            extra={
                "correlation_id": correlation_id,
                "method": request.method,
                "path": request.url.path,
                "client": request.client.host if request.client else None
            }
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                extra={
                    "correlation_id": correlation_id,
                    "method": request.method,
                    "path": request.url.path,
                    "error": str(e),
                    "response_time_ms": int((time.perf_counter() - start_time) * 1000)
                }
            )
            raise

        logger.info(
            "Request completed",
            extra={
                "correlation_id": correlation_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "response_time_ms": int((time.perf_counter() - start_time) * 1000)
            }
        )
        return response


def _error_response(request: Request, status_code: int, detail: Any, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": detail,
            "correlation_id": getattr(request.state, "correlation_id", "unknown"),
            **extra
        }
    )


async def not_found_handler(request: Request, exc: ResourceNotFoundException) -> JSONResponse:
    logger.info(
        "Resource not found",
        extra={
            "correlation_id": getattr(request.state, "correlation_id", "unknown"),
            "resource_type": exc.resource_type,
            "resource_id": exc.resource_id
        }
    )
    return _error_response(request, status.HTTP_404_NOT_FOUND, exc.message)


async def validation_handler(request: Request, exc: ValidationException) -> JSONResponse:
    logger.warning(
        "Rejected request",
        extra={
            "correlation_id": getattr(request.state, "correlation_id", "unknown"),
            "path": request.url.path,
            "error_message": exc.message
        }
    )
    body = {"errors": exc.details} if exc.details else {}
    return _error_response(request, status.HTTP_400_BAD_REQUEST, exc.message, **body)


def _json_safe_float(value: float):
    return value if math.isfinite(value) else str(value)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """422 for malformed bodies. Rejected NaN/Infinity inputs are echoed as strings."""
    errors = jsonable_encoder(exc.errors(), custom_encoder={float: _json_safe_float})
    logger.info(
        "Invalid request body",
        extra={
            "correlation_id": getattr(request.state, "correlation_id", "unknown"),
            "path": request.url.path,
            "error_count": len(errors)
        }
    )
    return _error_response(request, status.HTTP_422_UNPROCESSABLE_ENTITY, errors)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handler for data source failures and any other unhandled exception.

    Internal details are only exposed in development.
    """
    correlation_id = getattr(request.state, "correlation_id", "unknown")

    logger.error(
        "Unhandled exception",
        extra={
            "correlation_id": correlation_id,
            "path": request.url.path,
            "method": request.method,
            "error_type": type(exc).__name__,
            "error_message": str(exc)
        }
    )

    settings = getattr(request.app.state, "settings", None)
    is_dev = getattr(settings, "environment", None) == "development"

    if isinstance(exc, (DataSourceException, SQLAlchemyError)):
        detail = "Data source error"
    else:
        detail = "Internal server error"

    return _error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail,
        timestamp=datetime.now(timezone.utc).isoformat(),
        debug_info=str(exc) if is_dev else None
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ResourceNotFoundException, not_found_handler)
    app.add_exception_handler(ValidationException, validation_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ApplicationException, global_exception_handler)
    app.add_exception_handler(SQLAlchemyError, global_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
