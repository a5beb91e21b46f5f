# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# EPOCH: 1 - REQUEST AGGREGATION
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for the request aggregator.
"""

from core.config.defaults import (
    DEFAULT_FORWARDED_HEADERS,
    TransportDefaults,
    AggregationDefaults,
    Defaults,
    get_defaults,
    reset_defaults,
)

__all__ = [
    "DEFAULT_FORWARDED_HEADERS",
    "TransportDefaults",
    "AggregationDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
