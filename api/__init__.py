# ============================================================================
# API MODULE
# ============================================================================
# EPOCH: 1 - REQUEST AGGREGATION
# STATUS: Core - FastAPI routes
# PURPOSE: HTTP API for aggregate and proxy calls
# CREATED: 19 OCT 2026
# ============================================================================
"""
API Module

FastAPI routes and error handlers for the request aggregator.
"""

from .routes import router, set_services
from .errors import register_exception_handlers
from .schemas import AggregateResponseBody, ErrorEnvelope

__all__ = [
    "router",
    "set_services",
    "register_exception_handlers",
    "AggregateResponseBody",
    "ErrorEnvelope",
]
