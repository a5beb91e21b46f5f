# ============================================================================
# TASK MODELS
# ============================================================================
# EPOCH: 1 - REQUEST AGGREGATION
# STATUS: Core model - Declarative task descriptor
# PURPOSE: Define one unit of proxied HTTP work and its projection
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: ProjectionSpec, TaskDescriptor
# DEPENDENCIES: pydantic
# ============================================================================
"""
Task Models

Task = one declarative HTTP call inside an aggregate request.

Key insight: Tasks are DUMB. They don't know about:
- The rest of the batch
- Which round they run in
- Who consumes their result

They declare what to call and what they need, the scheduler does the rest.
"""

from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from core.contracts import HttpMethod, ProjectionMode


class ProjectionSpec(BaseModel):
    """Include/exclude filter applied to a task's result."""

    mode: ProjectionMode
    fields: List[str] = Field(default_factory=list)


class TaskDescriptor(BaseModel):
    """
    A single upstream call.

    String values in url, params and body may reference earlier results:
    - "$user.id"           whole-value substitution (keeps the type)
    - "/orders?uid=${user.id}"  template substitution (always a string)
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "order",
                "url": "/orders",
                "method": "GET",
                "params": {"uid": "$user.data.id"},
                "dependsOn": ["user"],
                "projection": {"mode": "include", "fields": ["id", "total"]},
            }
        },
    )

    id: str = Field(..., min_length=1, description="Unique id within the batch")
    url: str = Field(..., min_length=1, description="Upstream URL (may contain placeholders)")
    method: HttpMethod = Field(..., description="HTTP method")
    headers: Optional[Dict[str, str]] = Field(
        default=None,
        description="Task-level headers, win over forwarded and common headers",
    )
    params: Optional[Dict[str, Any]] = Field(default=None, description="Query parameters")
    body: Optional[Any] = Field(
        default=None,
        validation_alias=AliasChoices("body", "data"),
        description="Request body (accepted as 'body' or 'data')",
    )
    depends_on: List[str] = Field(
        default_factory=list,
        alias="dependsOn",
        description="Ids of tasks whose results this task needs",
    )
    projection: Optional[ProjectionSpec] = None

    @field_validator("depends_on", mode="before")
    @classmethod
    def handle_depends_on(cls, v):
        """Allow a single string or null; drop duplicates keeping order."""
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        if isinstance(v, list):
            return list(dict.fromkeys(v))
        return v


__all__ = [
    "ProjectionSpec",
    "TaskDescriptor",
]
