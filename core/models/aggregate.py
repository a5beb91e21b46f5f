# ============================================================================
# AGGREGATE MODELS
# ============================================================================
# EPOCH: 1 - REQUEST AGGREGATION
# STATUS: Core model - Aggregate request, task outcome and response
# PURPOSE: Define what comes in, what each task yields, what goes out
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: AggregateRequest, ExecutionResult, AggregateResponse
# DEPENDENCIES: pydantic
# ============================================================================
"""
Aggregate Models

Three models:
- AggregateRequest: the batch submitted by the client
- ExecutionResult: the transient outcome of one task run
- AggregateResponse: the merged outcome of the whole batch

All of them live for a single aggregate call. Nothing is persisted.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from core.contracts import ErrorKind
from core.models.task import TaskDescriptor

DEPENDENCY_FAILED = "dependency failed"


class AggregateRequest(BaseModel):
    """A batch of tasks executed as one call."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "items": [
                    {"id": "user", "url": "/u", "method": "GET"},
                    {
                        "id": "order",
                        "url": "/o?uid=${user.id}",
                        "method": "GET",
                        "dependsOn": ["user"],
                    },
                ],
                "allowPartial": False,
            }
        },
    )

    common_headers: Dict[str, str] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("commonHeaders", "common_headers"),
        description="Headers sent with every task, win over forwarded client headers",
    )
    items: List[TaskDescriptor] = Field(..., description="Tasks to execute")
    allow_partial: bool = Field(
        default=False,
        validation_alias=AliasChoices("allowPartial", "allow_partial"),
        description="Keep going when a task fails instead of aborting the call",
    )

    @field_validator("common_headers", mode="before")
    @classmethod
    def handle_null_headers(cls, v):
        """Treat null as no common headers."""
        return v or {}

    @field_validator("items")
    @classmethod
    def check_unique_ids(cls, v: List[TaskDescriptor]) -> List[TaskDescriptor]:
        """Task ids must be unique across the batch."""
        seen = set()
        duplicates = []
        for item in v:
            if item.id in seen and item.id not in duplicates:
                duplicates.append(item.id)
            seen.add(item.id)
        if duplicates:
            raise ValueError(f"Duplicate task ids: {', '.join(duplicates)}")
        return v


@dataclass(frozen=True)
class ExecutionResult:
    """
    Outcome of one task run.

    Produced by TaskExecutor (or by the scheduler for skipped tasks),
    consumed only by the scheduler's merge step.
    """
    id: str
    success: bool
    data: Any = None
    error: Any = None
    error_kind: Optional[ErrorKind] = None
    status_code: Optional[int] = None
    duration_ms: int = 0

    @classmethod
    def ok(
        cls,
        task_id: str,
        data: Any,
        status_code: Optional[int] = None,
        duration_ms: int = 0,
    ) -> "ExecutionResult":
        """Create a success result."""
        return cls(
            id=task_id,
            success=True,
            data=data,
            status_code=status_code,
            duration_ms=duration_ms,
        )

    @classmethod
    def failure(
        cls,
        task_id: str,
        error: Any,
        error_kind: ErrorKind,
        status_code: Optional[int] = None,
        duration_ms: int = 0,
    ) -> "ExecutionResult":
        """Create a failure result."""
        return cls(
            id=task_id,
            success=False,
            error=error,
            error_kind=error_kind,
            status_code=status_code,
            duration_ms=duration_ms,
        )

    @classmethod
    def skipped(cls, task_id: str) -> "ExecutionResult":
        """Create a result for a task whose dependency failed."""
        return cls(
            id=task_id,
            success=False,
            error=DEPENDENCY_FAILED,
            error_kind=ErrorKind.DEPENDENCY,
        )


class AggregateResponse(BaseModel):
    """Merged outcome of an aggregate call."""

    success: bool
    data: Dict[str, Any] = Field(default_factory=dict)
    errors: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for the wire, omitting errors when there are none."""
        result = {"success": self.success, "data": self.data}
        if self.errors:
            result["errors"] = self.errors
        return result


__all__ = [
    "DEPENDENCY_FAILED",
    "AggregateRequest",
    "ExecutionResult",
    "AggregateResponse",
]
