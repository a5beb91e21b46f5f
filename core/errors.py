# ============================================================================
# ERROR TAXONOMY
# ============================================================================
# EPOCH: 1 - REQUEST AGGREGATION
# STATUS: Foundation - Exceptions raised by the aggregation engine
# PURPOSE: Whole-call failures with HTTP status mapping
# CREATED: 19 OCT 2026
# ============================================================================
"""
Aggregation Errors

Whole-call failures raised by the scheduler and the API layer.

Per-task failures (transport, business, dependency) are NOT exceptions:
they are captured on ExecutionResult and only become an exception when
strict mode aborts the call (AggregateTaskFailed).

Hierarchy:
    AggregationError
    ├── AggregateValidationError  (400) malformed request
    ├── CycleOrDeadlock           (400) unsatisfiable dependency graph
    └── AggregateTaskFailed       (500) strict-mode task failure

    TransportError - raised by the transport client, never escapes the executor
"""

import json
from typing import Any, List, Optional


class AggregationError(Exception):
    """Base exception for aggregate call failures."""

    status_code: int = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class AggregateValidationError(AggregationError):
    """Raised when an aggregate request is malformed."""

    status_code = 400


class CycleOrDeadlock(AggregationError):
    """
    Raised when no pending task can ever become ready.

    Covers true cycles (A -> B -> A) and references to task ids that
    are not part of the batch.
    """

    status_code = 400

    def __init__(
        self,
        detail: str,
        pending_ids: Optional[List[str]] = None,
        cycle_ids: Optional[List[str]] = None,
    ):
        super().__init__(detail)
        self.pending_ids = pending_ids or []
        self.cycle_ids = cycle_ids or []


class AggregateTaskFailed(AggregationError):
    """Raised in strict mode when any task of the batch fails."""

    status_code = 500

    def __init__(self, task_id: str, error: Any):
        super().__init__(f"Request {task_id} failed: {json.dumps(error, default=str)}")
        self.task_id = task_id
        self.error = error


class TransportError(Exception):
    """Raised by the transport client when no HTTP response was received."""

    def __init__(self, message: str, timeout: bool = False):
        super().__init__(message)
        self.timeout = timeout


__all__ = [
    "AggregationError",
    "AggregateValidationError",
    "CycleOrDeadlock",
    "AggregateTaskFailed",
    "TransportError",
]
