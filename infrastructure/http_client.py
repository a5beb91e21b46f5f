# ============================================================================
# UPSTREAM HTTP CLIENT
# ============================================================================
# EPOCH: 1 - REQUEST AGGREGATION
# STATUS: Infrastructure - Async HTTP transport for task calls
# PURPOSE: Issue one upstream call per task with bounded timeout/redirects
# CREATED: 19 OCT 2026
# ============================================================================
"""
Upstream HTTP Client

Async httpx client used by TaskExecutor for every upstream call.

The client owns the transport concerns the scheduler does not:
- Timeout budget (default 10s)
- Redirect limit (default 5)
- Connection pooling

It does NOT classify responses. Any HTTP response, 2xx or not, is
returned as a TransportResponse; only failures to get a response at
all (connect error, timeout, too many redirects) raise TransportError.
"""

import json
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import httpx

from core.config import TransportDefaults, get_defaults
from core.errors import TransportError
from core.logging import get_logger, ComponentType

logger = get_logger(__name__, ComponentType.TRANSPORT)


@dataclass(frozen=True)
class TransportResponse:
    """Normalised upstream response."""
    status_code: int
    reason_phrase: str
    body: Any
    elapsed_ms: int

    @property
    def is_success(self) -> bool:
        """2xx status."""
        return 200 <= self.status_code < 300


def encode_params(params: Optional[Dict[str, Any]]) -> Optional[List[Tuple[str, str]]]:
    """
    Flatten query params into (key, value) pairs.

    - None values are dropped
    - Lists repeat the key
    - Dicts are sent as JSON
    - Bools are sent as true/false
    """
    if not params:
        return None

    pairs: List[Tuple[str, str]] = []
    for key, value in params.items():
        values = value if isinstance(value, list) else [value]
        for item in values:
            if item is None:
                continue
            pairs.append((key, _encode_scalar(item)))
    return pairs


def _encode_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), default=str)
    return str(value)


def _parse_body(response: httpx.Response) -> Any:
    """Return parsed JSON, falling back to text (None when empty)."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class TransportClient:
    """Async HTTP client for upstream task calls."""

    def __init__(
        self,
        settings: Optional[TransportDefaults] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize client.

        Args:
            settings: Timeout/redirect/pool settings (default from env)
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.settings = settings or get_defaults().transport
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    # ------------------------------------------------------------------
    # LIFECYCLE
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Create the pooled client."""
        if self._client is not None:
            return
        kwargs: Dict[str, Any] = {
            "timeout": httpx.Timeout(self.settings.timeout_seconds),
            "follow_redirects": True,
            "max_redirects": self.settings.max_redirects,
            "limits": httpx.Limits(max_connections=self.settings.max_connections),
        }
        if self.settings.base_url:
            kwargs["base_url"] = self.settings.base_url
        if self._transport is not None:
            kwargs["transport"] = self._transport
        self._client = httpx.AsyncClient(**kwargs)
        logger.info(
            f"Transport client started: timeout={self.settings.timeout_seconds}s, "
            f"max_redirects={self.settings.max_redirects}"
        )

    async def close(self) -> None:
        """Close the pooled client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("Transport client closed")

    @property
    def is_started(self) -> bool:
        return self._client is not None

    async def __aenter__(self) -> "TransportClient":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # REQUEST
    # ------------------------------------------------------------------

    async def request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        body: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> TransportResponse:
        """
        Issue one upstream call.

        Args:
            method: HTTP method
            url: Absolute URL, or relative to the configured base_url
            params: Query parameters
            body: JSON body (str bodies are sent verbatim)
            headers: Request headers

        Returns:
            TransportResponse for any HTTP status

        Raises:
            TransportError: No response (connect error, timeout, redirects)
        """
        if self._client is None:
            await self.start()

        content = None
        json_body = None
        if isinstance(body, (str, bytes)):
            content = body
        elif body is not None:
            json_body = body

        start = time.monotonic()
        try:
            response = await self._client.request(
                method,
                url,
                params=encode_params(params),
                json=json_body,
                content=content,
                headers=headers or None,
            )
        except httpx.TimeoutException as e:
            raise TransportError(
                f"timeout of {self.settings.timeout_seconds:g}s exceeded: {method} {url}",
                timeout=True,
            ) from e
        except httpx.TooManyRedirects as e:
            raise TransportError(
                f"Maximum number of redirects ({self.settings.max_redirects}) exceeded"
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(f"{type(e).__name__}: {e}") from e

        return TransportResponse(
            status_code=response.status_code,
            reason_phrase=response.reason_phrase,
            body=_parse_body(response),
            elapsed_ms=int((time.monotonic() - start) * 1000),
        )


# ============================================================================
# SHARED INSTANCE
# ============================================================================
# Set by the application lifespan

_transport_client: Optional[TransportClient] = None


def set_transport_client(client: Optional[TransportClient]) -> None:
    """Register the shared transport client."""
    global _transport_client
    _transport_client = client


def get_transport_client() -> Optional[TransportClient]:
    """Get the shared transport client (None before startup)."""
    return _transport_client


__all__ = [
    "TransportResponse",
    "TransportClient",
    "encode_params",
    "set_transport_client",
    "get_transport_client",
]
