# ============================================================================
# API SCHEMAS
# ============================================================================
# EPOCH: 1 - REQUEST AGGREGATION
# STATUS: Core - Request/Response schemas
# PURPOSE: Pydantic models for API validation and the error envelope
# CREATED: 19 OCT 2026
# ============================================================================
"""
API Schemas

Request bodies reuse the core models (AggregateRequest, TaskDescriptor).
This module adds the wire-only shapes: the aggregate response document
and the error envelope every failure is rendered with.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class AggregateResponseBody(BaseModel):
    """Response document for POST /cc/aggregate."""
    success: bool = Field(..., description="True when every task succeeded")
    data: Dict[str, Any] = Field(
        default_factory=dict,
        description="Task id -> result, for tasks that succeeded",
    )
    errors: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Task id -> error detail (omitted when there are none)",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "success": False,
                    "data": {"user": {"code": 200, "data": {"id": 42}}},
                    "errors": {"order": "HTTP 404: Not Found"},
                }
            ]
        }
    }


class ErrorEnvelope(BaseModel):
    """Error response rendered for every failed call."""
    code: int = Field(..., description="HTTP status code")
    msg: str = Field(..., description="Error message")
    data: Dict[str, Any] = Field(default_factory=dict)
    path: str = Field(..., description="Request path")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with an ISO-8601 UTC timestamp."""
        return {
            "code": self.code,
            "msg": self.msg,
            "data": self.data,
            "path": self.path,
            "timestamp": self.timestamp.isoformat(timespec="milliseconds").replace(
                "+00:00", "Z"
            ),
        }
