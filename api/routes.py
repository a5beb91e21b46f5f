# ============================================================================
# API ROUTES
# ============================================================================
# EPOCH: 1 - REQUEST AGGREGATION
# STATUS: Core - FastAPI route definitions
# PURPOSE: HTTP endpoints for aggregate and single-call proxy
# CREATED: 19 OCT 2026
# ============================================================================
"""
API Routes

- POST /cc/aggregate - Run a batch of dependent upstream calls
- POST /cc/proxy     - Run a single upstream call, return its data directly

Inbound headers are handed to the scheduler, which forwards only the
allow-listed ones (authorization, app-id, resource-id, x-trace-id, cookie).
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse

from core.errors import AggregateTaskFailed, AggregateValidationError, AggregationError
from core.models import AggregateRequest, TaskDescriptor
from .schemas import AggregateResponseBody, ErrorEnvelope

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cc", tags=["Aggregation"])

TRACE_HEADER = "x-trace-id"


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================
# Set by the main app at startup

_scheduler = None


def set_services(scheduler) -> None:
    """Set service instances for dependency injection."""
    global _scheduler
    _scheduler = scheduler


def get_scheduler():
    if _scheduler is None:
        raise HTTPException(500, "Scheduler not initialized")
    return _scheduler


def _client_headers(request: Request) -> Dict[str, str]:
    return {key: value for key, value in request.headers.items()}


# ============================================================================
# AGGREGATE
# ============================================================================

@router.post(
    "/aggregate",
    response_model=AggregateResponseBody,
    responses={400: {"model": ErrorEnvelope}, 500: {"model": ErrorEnvelope}},
    summary="Run a batch of dependent upstream calls",
)
async def aggregate(body: AggregateRequest, request: Request):
    """
    Execute every task of the batch in dependency order.

    Returns 200 with {success, data, errors?} when the call completes,
    including partial failures when allowPartial is true.
    """
    scheduler = get_scheduler()
    headers = _client_headers(request)

    result = await scheduler.aggregate(
        body,
        headers,
        request_id=headers.get(TRACE_HEADER),
    )
    return JSONResponse(content=result.to_dict())


# ============================================================================
# PROXY
# ============================================================================

@router.post(
    "/proxy",
    responses={400: {"model": ErrorEnvelope}, 500: {"model": ErrorEnvelope}},
    summary="Run a single upstream call",
)
async def proxy(body: TaskDescriptor, request: Request) -> Any:
    """
    Execute one task as a one-item strict aggregate.

    On success the task's data is returned as-is (no aggregate envelope).
    On failure the task's own error becomes the error message.
    """
    if body.depends_on:
        raise AggregateValidationError("dependsOn is not supported by /cc/proxy")

    scheduler = get_scheduler()
    headers = _client_headers(request)

    try:
        result = await scheduler.aggregate(
            AggregateRequest(items=[body]),
            headers,
            request_id=headers.get(TRACE_HEADER),
        )
    except AggregateTaskFailed as e:
        error = e.error if isinstance(e.error, str) else str(e.error)
        raise AggregationError(error) from e

    return JSONResponse(content=result.data.get(body.id))
