# ============================================================================
# MODELS MODULE
# ============================================================================
# EPOCH: 1 - REQUEST AGGREGATION
# STATUS: Model exports
# PURPOSE: Central export point for all Pydantic models
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
Models Module - Central Export Point

All request, outcome and response models for the aggregation engine.
"""

from core.models.task import ProjectionSpec, TaskDescriptor
from core.models.aggregate import (
    DEPENDENCY_FAILED,
    AggregateRequest,
    AggregateResponse,
    ExecutionResult,
)

__all__ = [
    # Task
    "ProjectionSpec",
    "TaskDescriptor",
    # Aggregate
    "AggregateRequest",
    "AggregateResponse",
    "ExecutionResult",
    "DEPENDENCY_FAILED",
]
