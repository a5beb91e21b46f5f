# ============================================================================
# INFRASTRUCTURE MODULE
# ============================================================================
# EPOCH: 1 - REQUEST AGGREGATION
# STATUS: Infrastructure - External collaborators
# PURPOSE: Upstream HTTP transport
# CREATED: 19 OCT 2026
# ============================================================================
"""
Infrastructure Module

External collaborators of the aggregation engine. The engine talks to
upstream services only through TransportClient.
"""

from infrastructure.http_client import (
    TransportClient,
    TransportResponse,
    get_transport_client,
    set_transport_client,
)

__all__ = [
    "TransportClient",
    "TransportResponse",
    "get_transport_client",
    "set_transport_client",
]
