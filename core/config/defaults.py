# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# EPOCH: 1 - REQUEST AGGREGATION
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for transport, header forwarding, business codes
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides sensible defaults for the aggregation engine.
These can be overridden via environment variables.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple


# Client headers forwarded into every task (compared case-insensitively)
DEFAULT_FORWARDED_HEADERS: Tuple[str, ...] = (
    "authorization",
    "app-id",
    "resource-id",
    "x-trace-id",
    "cookie",
)


def _parse_header_list(raw: Optional[str]) -> Tuple[str, ...]:
    """Parse a comma-separated header list, lowercased."""
    if not raw:
        return DEFAULT_FORWARDED_HEADERS
    names = tuple(part.strip().lower() for part in raw.split(",") if part.strip())
    return names or DEFAULT_FORWARDED_HEADERS


@dataclass(frozen=True)
class TransportDefaults:
    """
    Defaults for the upstream HTTP transport.

    The transport owns timeouts and redirects, the scheduler adds none.
    """
    timeout_seconds: float = 10.0
    max_redirects: int = 5
    max_connections: int = 100

    # Prefix for relative task URLs ("" = use URLs as given)
    base_url: str = ""

    @classmethod
    def from_env(cls) -> "TransportDefaults":
        """Create from environment variables."""
        return cls(
            timeout_seconds=float(os.getenv("AGG_HTTP_TIMEOUT", 10.0)),
            max_redirects=int(os.getenv("AGG_HTTP_MAX_REDIRECTS", 5)),
            max_connections=int(os.getenv("AGG_HTTP_MAX_CONNECTIONS", 100)),
            base_url=os.getenv("AGG_UPSTREAM_BASE_URL", ""),
        )


@dataclass(frozen=True)
class AggregationDefaults:
    """
    Defaults for aggregate execution.

    Controls header forwarding and business-code classification.
    """
    forwarded_headers: Tuple[str, ...] = DEFAULT_FORWARDED_HEADERS

    # Upstream envelope: {"code": 200, "msg": "...", "data": {...}}
    business_success_code: int = 200
    business_code_field: str = "code"
    business_message_field: str = "msg"

    @classmethod
    def from_env(cls) -> "AggregationDefaults":
        """Create from environment variables."""
        return cls(
            forwarded_headers=_parse_header_list(os.getenv("AGG_FORWARDED_HEADERS")),
            business_success_code=int(os.getenv("AGG_BUSINESS_SUCCESS_CODE", 200)),
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    transport: TransportDefaults = field(default_factory=TransportDefaults)
    aggregation: AggregationDefaults = field(default_factory=AggregationDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment variables."""
        return cls(
            transport=TransportDefaults.from_env(),
            aggregation=AggregationDefaults.from_env(),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "DEFAULT_FORWARDED_HEADERS",
    "TransportDefaults",
    "AggregationDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
