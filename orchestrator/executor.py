# ============================================================================
# TASK EXECUTOR
# ============================================================================
# EPOCH: 1 - REQUEST AGGREGATION
# STATUS: Core - Single task execution
# PURPOSE: Resolve placeholders, call upstream, classify, project
# CREATED: 19 OCT 2026
# ============================================================================
"""
Task Executor

Executes one TaskDescriptor and produces an ExecutionResult:
1. Resolve url/params/body placeholders against the context snapshot
2. Merge headers (task headers win over base headers)
3. Call upstream through TransportClient
4. Classify: non-2xx -> transport failure,
             2xx with a non-success business code -> business failure
5. Apply projection on success

The executor NEVER raises. Every failure is captured into the result so
the scheduler can apply its partial-failure policy. It never writes to
the context either: it only reads the snapshot it is given.
"""

import time
from typing import Any, Dict, Mapping, Optional

from core.config import AggregationDefaults, get_defaults
from core.contracts import ErrorKind
from core.errors import TransportError
from core.logging import get_logger, log_context, ComponentType
from core.models import ExecutionResult, TaskDescriptor
from infrastructure.http_client import TransportClient, TransportResponse
from orchestrator.engine.placeholders import (
    PlaceholderResolver,
    get_resolver,
    to_template_string,
)
from orchestrator.engine.projection import ProjectionEngine

logger = get_logger(__name__, ComponentType.EXECUTOR)


def merge_headers(
    base: Mapping[str, str],
    overrides: Optional[Mapping[str, str]],
) -> Dict[str, str]:
    """
    Overlay headers case-insensitively.

    A key in overrides replaces any base key with the same lowercase name.
    """
    merged = dict(base)
    for key, value in (overrides or {}).items():
        for existing in [k for k in merged if k.lower() == key.lower()]:
            del merged[existing]
        merged[key] = value
    return merged


class TaskExecutor:
    """
    Executes aggregate tasks.

    Takes a TaskDescriptor, calls upstream, returns ExecutionResult.
    """

    def __init__(
        self,
        transport: TransportClient,
        settings: Optional[AggregationDefaults] = None,
        resolver: Optional[PlaceholderResolver] = None,
        projection: Optional[ProjectionEngine] = None,
    ):
        """
        Initialize executor.

        Args:
            transport: Upstream HTTP client
            settings: Business-code classification settings
            resolver: Placeholder resolver (shared instance by default)
            projection: Projection engine
        """
        self.transport = transport
        self.settings = settings or get_defaults().aggregation
        self.resolver = resolver or get_resolver()
        self.projection = projection or ProjectionEngine()

    async def execute(
        self,
        task: TaskDescriptor,
        base_headers: Mapping[str, str],
        context: Mapping[str, Any],
    ) -> ExecutionResult:
        """
        Execute a task.

        Args:
            task: Task to run
            base_headers: Forwarded + common headers
            context: Read-only snapshot of earlier successful results

        Returns:
            ExecutionResult with success or failure
        """
        start_time = time.monotonic()
        with log_context(task_id=task.id):
            try:
                return await self._execute(task, base_headers, context)

            except TransportError as e:
                duration_ms = int((time.monotonic() - start_time) * 1000)
                logger.error(f"Failed {task.id}: {e}")
                return ExecutionResult.failure(
                    task.id,
                    error=str(e),
                    error_kind=ErrorKind.TRANSPORT,
                    duration_ms=duration_ms,
                )

            except Exception as e:
                duration_ms = int((time.monotonic() - start_time) * 1000)
                logger.exception(f"Task {task.id} failed with exception")
                return ExecutionResult.failure(
                    task.id,
                    error=f"{type(e).__name__}: {e}"[:2000],
                    error_kind=ErrorKind.INTERNAL,
                    duration_ms=duration_ms,
                )

    async def _execute(
        self,
        task: TaskDescriptor,
        base_headers: Mapping[str, str],
        context: Mapping[str, Any],
    ) -> ExecutionResult:
        """Resolve, call, classify and project."""
        url = self.resolver.resolve(task.url, context)
        params = self.resolver.resolve(task.params, context)
        body = self.resolver.resolve(task.body, context)
        headers = merge_headers(base_headers, task.headers)

        if self.resolver.has_placeholders(task.url):
            logger.debug(f"Resolved url {task.url} -> {url}")
        if body is not None and not task.method.has_body():
            logger.debug(f"Sending a body with {task.method.value} for {task.id}")

        if not isinstance(url, str):
            # "$user.data" resolved to a non-string; render it like a template value
            url = to_template_string(url)

        response = await self.transport.request(
            task.method.value,
            url,
            params=params,
            body=body,
            headers=headers,
        )

        code = self._business_code(response.body)
        logger.info(
            f"{task.method.value} {url} - {response.status_code} - {code} "
            f"({response.elapsed_ms}ms)"
        )

        error = self._classify(response, code)
        if error is not None:
            message, kind = error
            logger.error(f"Failed {task.id}: {message}")
            return ExecutionResult.failure(
                task.id,
                error=message,
                error_kind=kind,
                status_code=response.status_code,
                duration_ms=response.elapsed_ms,
            )

        data = response.body
        if task.projection is not None:
            data = self.projection.apply(data, task.projection)

        return ExecutionResult.ok(
            task.id,
            data,
            status_code=response.status_code,
            duration_ms=response.elapsed_ms,
        )

    # ------------------------------------------------------------------
    # CLASSIFICATION
    # ------------------------------------------------------------------

    def _business_code(self, body: Any) -> Any:
        if isinstance(body, dict):
            return body.get(self.settings.business_code_field)
        return None

    def _body_message(self, body: Any) -> Optional[str]:
        if isinstance(body, dict):
            message = body.get(self.settings.business_message_field)
            if message:
                return message
        return None

    def _classify(self, response: TransportResponse, code: Any):
        """
        Return (error, kind) for a failed call, None on success.

        A falsy business code (absent, null, 0) counts as success.
        """
        if not response.is_success:
            generic = f"HTTP {response.status_code}: {response.reason_phrase}"
            return self._body_message(response.body) or generic, ErrorKind.TRANSPORT

        if code and code != self.settings.business_success_code:
            message = self._body_message(response.body) or "No message"
            return f"API Error Code {code}: {message}", ErrorKind.BUSINESS

        return None


__all__ = [
    "TaskExecutor",
    "merge_headers",
]
