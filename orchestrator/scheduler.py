# ============================================================================
# TASK GRAPH SCHEDULER
# ============================================================================
# EPOCH: 1 - REQUEST AGGREGATION
# STATUS: Core - Round-based dependency-aware execution
# PURPOSE: Run a batch of tasks in dependency order and merge the outcome
# CREATED: 19 OCT 2026
# ============================================================================
"""
Task Graph Scheduler

Owns the execution loop of one aggregate call.

Each round:
1. Plan: pending tasks whose dependencies are all resolved are ready.
   Ready tasks with a failed dependency are skipped ("dependency failed").
2. Fork: every runnable task is dispatched concurrently.
3. Join: the round ends when every dispatched task has an outcome.
4. Merge: successes go into the context, failures into the errors map.
5. Pending is rebuilt without the tasks processed this round.

Invariants:
- The context, errors and completed set are written only here, only
  between rounds. Executors receive a read-only snapshot, so a task
  depending on A always sees A's fully merged result. No locks needed.
- A batch of n tasks finishes in at most n rounds. No progress in a
  round, or exceeding n+1 rounds, raises CycleOrDeadlock.

Failure policy:
- allow_partial=False (default): the first failure aborts the call with
  AggregateTaskFailed. Results already gathered are discarded.
- allow_partial=True: failures are recorded per task, dependents are
  skipped, independent tasks keep running.

Strict-mode abort does NOT cancel siblings of the failed task. All calls
of a round were issued together and are awaited before the abort is
raised, so side effects of sibling calls (e.g. a POST that succeeded)
happen and their results are discarded. Callers that need all-or-nothing
side effects must sequence such calls with dependsOn.
"""

import asyncio
import uuid
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Set

from core.config import AggregationDefaults, get_defaults
from core.errors import AggregateTaskFailed, CycleOrDeadlock
from core.logging import get_logger, log_context, log_checkpoint, ComponentType
from core.models import (
    AggregateRequest,
    AggregateResponse,
    ExecutionResult,
    TaskDescriptor,
)
from orchestrator.engine.evaluator import ReadySetEvaluator, TopologicalSorter
from orchestrator.executor import TaskExecutor

logger = get_logger(__name__, ComponentType.SCHEDULER)


class TaskGraphScheduler:
    """
    Round-based scheduler for aggregate requests.

    Stateless between calls: every aggregate() builds its own context.
    """

    def __init__(
        self,
        executor: TaskExecutor,
        settings: Optional[AggregationDefaults] = None,
        evaluator: Optional[ReadySetEvaluator] = None,
    ):
        """
        Initialize scheduler.

        Args:
            executor: Runs individual tasks
            settings: Header allow-list and related defaults
            evaluator: Ready-set evaluator
        """
        self.executor = executor
        self.settings = settings or get_defaults().aggregation
        self.evaluator = evaluator or ReadySetEvaluator()

    # ------------------------------------------------------------------
    # HEADERS
    # ------------------------------------------------------------------

    def build_base_headers(
        self,
        client_headers: Optional[Mapping[str, str]],
        common_headers: Optional[Mapping[str, str]],
    ) -> Dict[str, str]:
        """
        Headers sent with every task.

        Client headers on the allow-list (case-insensitive, lowercased),
        overlaid with the request's common headers.
        """
        allowed = {name.lower() for name in self.settings.forwarded_headers}
        base = {
            key.lower(): value
            for key, value in (client_headers or {}).items()
            if key.lower() in allowed
        }
        for key, value in (common_headers or {}).items():
            for existing in [k for k in base if k == key.lower()]:
                del base[existing]
            base[key] = value
        return base

    # ------------------------------------------------------------------
    # AGGREGATE
    # ------------------------------------------------------------------

    async def aggregate(
        self,
        request: AggregateRequest,
        client_headers: Optional[Mapping[str, str]] = None,
        request_id: Optional[str] = None,
    ) -> AggregateResponse:
        """
        Execute a batch of tasks.

        Args:
            request: Validated aggregate request
            client_headers: Inbound request headers (filtered by allow-list)
            request_id: Id used in logs (random if not given)

        Returns:
            AggregateResponse with merged context and per-task errors

        Raises:
            CycleOrDeadlock: Dependencies can never be satisfied
            AggregateTaskFailed: A task failed and allow_partial is False
        """
        request_id = request_id or uuid.uuid4().hex[:12]
        with log_context(request_id=request_id):
            return await self._run(request, client_headers)

    async def _run(
        self,
        request: AggregateRequest,
        client_headers: Optional[Mapping[str, str]],
    ) -> AggregateResponse:
        base_headers = self.build_base_headers(client_headers, request.common_headers)
        known_ids = {task.id for task in request.items}

        pending: List[TaskDescriptor] = list(request.items)
        completed: Set[str] = set()
        context: Dict[str, Any] = {}
        errors: Dict[str, Any] = {}

        max_rounds = len(pending) + 1
        round_number = 0

        levels = TopologicalSorter().levels(pending)
        log_checkpoint("aggregate_started", {
            "task_count": len(pending),
            "allow_partial": request.allow_partial,
            "expected_rounds": max(levels.values(), default=0) if levels is not None else None,
        })

        while pending:
            round_number += 1
            if round_number > max_rounds:
                pending_ids = [task.id for task in pending]
                logger.error(f"Round budget exhausted. Pending: {','.join(pending_ids)}")
                raise CycleOrDeadlock(
                    "Detected dependency cycle or deadlock",
                    pending_ids=pending_ids,
                )

            plan = self.evaluator.plan_round(pending, completed, set(errors))

            if plan.is_stuck:
                pending_ids = [task.id for task in pending]
                diagnosis = self.evaluator.diagnose(pending, known_ids)
                logger.error(
                    f"Deadlock detected. Pending: {','.join(pending_ids)} "
                    f"({diagnosis.describe()})"
                )
                raise CycleOrDeadlock(
                    f"Unresolvable dependencies: {', '.join(pending_ids)}",
                    pending_ids=pending_ids,
                    cycle_ids=diagnosis.cyclic,
                )

            with log_context(round=round_number):
                results = await self._run_round(plan.runnable, plan.skipped, base_headers, context)

                # Merge (single writer, after the join)
                first_failure: Optional[ExecutionResult] = None
                for result in results:
                    if result.success:
                        context[result.id] = result.data
                        completed.add(result.id)
                    else:
                        errors[result.id] = result.error
                        if first_failure is None:
                            first_failure = result

                log_checkpoint("round_completed", {
                    "succeeded": [r.id for r in results if r.success],
                    "failed": [r.id for r in results if not r.success],
                })

                if first_failure is not None and not request.allow_partial:
                    logger.error(
                        f"Aborting aggregate: {first_failure.id} failed "
                        f"({first_failure.error_kind.value if first_failure.error_kind else 'unknown'})"
                    )
                    raise AggregateTaskFailed(first_failure.id, first_failure.error)

            processed = {result.id for result in results}
            pending = [task for task in pending if task.id not in processed]

        response = AggregateResponse(
            success=not errors,
            data=context,
            errors=errors or None,
        )
        log_checkpoint("aggregate_completed", {
            "rounds": round_number,
            "succeeded": len(context),
            "failed": len(errors),
        })
        logger.info(
            f"Aggregate finished in {round_number} round(s): "
            f"{len(context)} succeeded, {len(errors)} failed"
        )
        return response

    async def _run_round(
        self,
        runnable: List[TaskDescriptor],
        skipped: List[TaskDescriptor],
        base_headers: Mapping[str, str],
        context: Mapping[str, Any],
    ) -> List[ExecutionResult]:
        """
        Dispatch one round and wait for all of it.

        Returns skipped results followed by executed results, the latter
        in dispatch order.
        """
        if skipped:
            logger.info(f"Skipping (dependency failed): {', '.join(t.id for t in skipped)}")
        if runnable:
            logger.info(f"Dispatching: {', '.join(t.id for t in runnable)}")

        snapshot = MappingProxyType(dict(context))
        executed = await asyncio.gather(*(
            self.executor.execute(task, base_headers, snapshot)
            for task in runnable
        ))

        return [ExecutionResult.skipped(task.id) for task in skipped] + list(executed)


__all__ = [
    "TaskGraphScheduler",
]
