# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# EPOCH: 1 - REQUEST AGGREGATION
# STATUS: Foundation - Core enums shared by models, engine and API
# PURPOSE: Define method, projection and failure-kind enums
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: HttpMethod, ProjectionMode, ErrorKind
# DEPENDENCIES: enum
# ============================================================================
"""
Base contracts for the request aggregation engine.

These enums cross every boundary:
- HTTP (request bodies)
- Engine (executor classification)
- Logs (error kinds)
"""

from enum import Enum


# ============================================================================
# ENUMS
# ============================================================================

class HttpMethod(str, Enum):
    """HTTP methods a task may use against an upstream service."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"

    def has_body(self) -> bool:
        """Check if the method conventionally carries a request body."""
        return self in (HttpMethod.POST, HttpMethod.PUT, HttpMethod.PATCH)


class ProjectionMode(str, Enum):
    """Field projection modes."""
    INCLUDE = "include"          # Keep only the named fields
    EXCLUDE = "exclude"          # Drop the named fields


class ErrorKind(str, Enum):
    """
    Classification of a failed task.

    TRANSPORT and BUSINESS come from the upstream call,
    DEPENDENCY means the call was never attempted.
    """
    TRANSPORT = "transport"      # Non-2xx status, connect error, timeout
    BUSINESS = "business"        # 2xx with a non-success business code
    DEPENDENCY = "dependency"    # A prerequisite failed or was skipped
    INTERNAL = "internal"        # Unexpected exception inside the executor


__all__ = [
    "HttpMethod",
    "ProjectionMode",
    "ErrorKind",
]
