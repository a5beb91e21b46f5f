# ============================================================================
# API ERROR HANDLERS
# ============================================================================
# EPOCH: 1 - REQUEST AGGREGATION
# STATUS: Core - Exception to HTTP response mapping
# PURPOSE: Render every failure through the error envelope
# CREATED: 19 OCT 2026
# ============================================================================
"""
API Error Handlers

Maps exceptions to the error envelope:

    {"code": 400, "msg": "...", "data": {}, "path": "/cc/aggregate",
     "timestamp": "2026-10-19T10:30:00.000Z"}

Status mapping:
- AggregationError subclasses: their own status_code
  (CycleOrDeadlock 400, AggregateTaskFailed 500)
- RequestValidationError (malformed body): 400
- HTTPException: its status code
- Anything else: 500 "Internal server error"
"""

import logging
from typing import Any, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.schemas import ErrorEnvelope
from core.errors import AggregationError

logger = logging.getLogger(__name__)


def error_response(request: Request, status_code: int, message: str) -> JSONResponse:
    """Build an enveloped JSON error response."""
    envelope = ErrorEnvelope(code=status_code, msg=message, path=request.url.path)
    return JSONResponse(status_code=status_code, content=envelope.to_dict())


def format_validation_errors(errors: List[Any]) -> str:
    """Join pydantic errors into one message ("items.0.method: ...")."""
    messages = []
    for error in errors:
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        text = error.get("msg", "invalid value")
        messages.append(f"{location}: {text}" if location else text)
    return ", ".join(messages) or "Invalid request"


async def aggregation_error_handler(request: Request, exc: AggregationError) -> JSONResponse:
    logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc.detail}")
    return error_response(request, exc.status_code, exc.detail)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = format_validation_errors(exc.errors())
    logger.warning(f"Invalid request on {request.url.path}: {message}")
    return error_response(request, 400, message)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(request, exc.status_code, str(exc.detail))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.url.path}: {exc}")
    return error_response(request, 500, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    """Install the envelope handlers on an app."""
    app.add_exception_handler(AggregationError, aggregation_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


__all__ = [
    "error_response",
    "format_validation_errors",
    "register_exception_handlers",
]
