# ============================================================================
# ORCHESTRATOR MODULE
# ============================================================================
# EPOCH: 1 - REQUEST AGGREGATION
# STATUS: Core - Aggregate execution
# PURPOSE: Schedule and execute a batch of dependent upstream calls
# CREATED: 19 OCT 2026
# ============================================================================
"""
Orchestrator Module

The round-based scheduler and the single-task executor.

Usage:
    from orchestrator import TaskExecutor, TaskGraphScheduler

    scheduler = TaskGraphScheduler(TaskExecutor(transport_client))
    response = await scheduler.aggregate(request, headers)
"""

from .executor import TaskExecutor
from .scheduler import TaskGraphScheduler

__all__ = ["TaskExecutor", "TaskGraphScheduler"]
