# ============================================================================
# CORE MODULE
# ============================================================================
# EPOCH: 1 - REQUEST AGGREGATION
# STATUS: Core module initialization
# PURPOSE: Export core contracts, models and errors
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================

from core.contracts import HttpMethod, ProjectionMode, ErrorKind
from core.errors import (
    AggregationError,
    AggregateValidationError,
    CycleOrDeadlock,
    AggregateTaskFailed,
    TransportError,
)
from core.models import (
    ProjectionSpec,
    TaskDescriptor,
    AggregateRequest,
    AggregateResponse,
    ExecutionResult,
)

__all__ = [
    # Enums
    "HttpMethod",
    "ProjectionMode",
    "ErrorKind",
    # Errors
    "AggregationError",
    "AggregateValidationError",
    "CycleOrDeadlock",
    "AggregateTaskFailed",
    "TransportError",
    # Models
    "ProjectionSpec",
    "TaskDescriptor",
    "AggregateRequest",
    "AggregateResponse",
    "ExecutionResult",
]
