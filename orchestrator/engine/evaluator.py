# ============================================================================
# READY-SET EVALUATOR
# ============================================================================
# EPOCH: 1 - REQUEST AGGREGATION
# STATUS: Core - Dependency resolution for one scheduling round
# PURPOSE: Determine runnable, skipped and blocked tasks; diagnose deadlocks
# CREATED: 19 OCT 2026
# ============================================================================
"""
Ready-Set Evaluator

Core logic for dependency resolution between rounds.

Features:
- Dependency graph construction over a batch of tasks
- Ready set detection (runnable vs skipped-because-dependency-failed)
- Topological diagnostics (which pending tasks sit on a cycle,
  which reference ids missing from the batch)

The evaluator is stateless - it takes the pending tasks and the
completed/failed id sets as input and returns decisions about what
the next round should do. It never mutates its inputs.
"""

from collections import defaultdict, deque
from dataclasses import dataclass, field
from typing import AbstractSet, Dict, List, Optional, Sequence, Set, Tuple

from core.models import TaskDescriptor
from core.logging import get_logger, ComponentType

logger = get_logger(__name__, ComponentType.SCHEDULER)


# ============================================================================
# DATA STRUCTURES
# ============================================================================

@dataclass
class DependencyGraph:
    """
    Dependency graph for a batch of tasks.

    A -> B means "B depends on A" (A must complete before B).
    """
    # Task ID -> tasks that depend on it
    forward_edges: Dict[str, List[str]] = field(default_factory=lambda: defaultdict(list))

    # Task ID -> tasks it depends on
    backward_edges: Dict[str, List[str]] = field(default_factory=lambda: defaultdict(list))

    # Task IDs present in the batch
    nodes: Set[str] = field(default_factory=set)

    def add_edge(self, from_node: str, to_node: str) -> None:
        """Add a dependency edge: to_node depends on from_node."""
        self.forward_edges[from_node].append(to_node)
        self.backward_edges[to_node].append(from_node)

    def get_dependencies(self, node_id: str) -> List[str]:
        """Get tasks that this task depends on."""
        return self.backward_edges.get(node_id, [])

    def get_dependents(self, node_id: str) -> List[str]:
        """Get tasks that depend on this task."""
        return self.forward_edges.get(node_id, [])

    @classmethod
    def build(cls, tasks: Sequence[TaskDescriptor]) -> "DependencyGraph":
        """Build the graph from task descriptors."""
        graph = cls()
        for task in tasks:
            graph.nodes.add(task.id)
            for dep in task.depends_on:
                graph.add_edge(dep, task.id)
        return graph


@dataclass
class RoundPlan:
    """What one scheduling round should do."""
    # Tasks whose dependencies all succeeded
    runnable: List[TaskDescriptor] = field(default_factory=list)

    # Tasks whose dependencies are resolved but at least one failed
    skipped: List[TaskDescriptor] = field(default_factory=list)

    # Tasks still waiting on unresolved dependencies
    blocked: List[TaskDescriptor] = field(default_factory=list)

    @property
    def ready(self) -> List[TaskDescriptor]:
        """All tasks processed this round (runnable + skipped)."""
        return self.runnable + self.skipped

    @property
    def is_stuck(self) -> bool:
        """True when nothing can be processed but tasks remain."""
        return not self.runnable and not self.skipped and bool(self.blocked)


@dataclass
class DeadlockDiagnosis:
    """Why a set of pending tasks can never run."""
    # Pending task -> dependency ids that are not in the batch at all
    missing: Dict[str, List[str]] = field(default_factory=dict)

    # Pending tasks that lie on (or behind) a dependency cycle
    cyclic: List[str] = field(default_factory=list)

    def describe(self) -> str:
        """One-line human description."""
        parts = []
        if self.missing:
            refs = "; ".join(
                f"{task_id} -> {', '.join(deps)}" for task_id, deps in self.missing.items()
            )
            parts.append(f"missing dependencies ({refs})")
        if self.cyclic:
            parts.append(f"cycle involving: {', '.join(self.cyclic)}")
        return ", ".join(parts) if parts else "no progress possible"


# ============================================================================
# EVALUATOR
# ============================================================================

class ReadySetEvaluator:
    """Decides which pending tasks a round may process."""

    def plan_round(
        self,
        pending: Sequence[TaskDescriptor],
        completed: AbstractSet[str],
        failed: AbstractSet[str],
    ) -> RoundPlan:
        """
        Partition pending tasks for the next round.

        A task is ready when every dependency is either completed or
        failed. Ready tasks with a failed dependency are skipped.

        Args:
            pending: Tasks not processed yet, in request order
            completed: Ids of tasks that succeeded
            failed: Ids of tasks that failed or were skipped

        Returns:
            RoundPlan preserving request order inside each bucket
        """
        plan = RoundPlan()
        for task in pending:
            deps = task.depends_on
            if not all(dep in completed or dep in failed for dep in deps):
                plan.blocked.append(task)
            elif any(dep in failed for dep in deps):
                plan.skipped.append(task)
            else:
                plan.runnable.append(task)
        return plan

    def diagnose(
        self,
        pending: Sequence[TaskDescriptor],
        known_ids: AbstractSet[str],
    ) -> DeadlockDiagnosis:
        """
        Explain why pending tasks cannot make progress.

        Args:
            pending: Tasks left when the scheduler got stuck
            known_ids: Every id in the original batch

        Returns:
            DeadlockDiagnosis with missing references and cyclic tasks
        """
        diagnosis = DeadlockDiagnosis()
        for task in pending:
            missing = [dep for dep in task.depends_on if dep not in known_ids]
            if missing:
                diagnosis.missing[task.id] = missing

        diagnosis.cyclic = TopologicalSorter().cycle_members(DependencyGraph.build(pending))
        return diagnosis


# ============================================================================
# TOPOLOGICAL SORT / CYCLE DETECTION
# ============================================================================

class TopologicalSorter:
    """Kahn's algorithm over a DependencyGraph."""

    def sort(self, graph: DependencyGraph) -> Tuple[bool, List[str], List[str]]:
        """
        Sort the graph, counting only edges between tasks in the graph.

        Edges to ids outside the graph count as unsatisfiable, so tasks
        referencing them (and their dependents) stay unsorted.

        Returns:
            Tuple of (is_dag, sorted_ids, unsorted_ids)
        """
        in_degree = {node: 0 for node in graph.nodes}
        blocked = set()

        for node in graph.nodes:
            for dep in graph.get_dependencies(node):
                if dep in in_degree:
                    in_degree[node] += 1
                else:
                    blocked.add(node)

        queue = deque(
            sorted(node for node, degree in in_degree.items() if degree == 0 and node not in blocked)
        )
        sorted_nodes: List[str] = []

        while queue:
            node = queue.popleft()
            sorted_nodes.append(node)
            for dependent in graph.get_dependents(node):
                if dependent not in in_degree:
                    continue
                in_degree[dependent] -= 1
                if in_degree[dependent] == 0 and dependent not in blocked:
                    queue.append(dependent)

        done = set(sorted_nodes)
        remaining = sorted(node for node in graph.nodes if node not in done)
        return not remaining, sorted_nodes, remaining

    def cycle_members(self, graph: DependencyGraph) -> List[str]:
        """
        Ids of tasks that lie on a dependency cycle.

        Only tasks Kahn's algorithm leaves unsorted are candidates. A
        candidate is on a cycle iff it can reach itself through its
        dependencies. Tasks merely waiting on a missing id, or on a task
        of a cycle, are excluded.
        """
        _, _, remaining = self.sort(graph)
        candidates = set(remaining)
        return [node for node in remaining if self._reaches(graph, node, node, candidates)]

    def _reaches(
        self,
        graph: DependencyGraph,
        start: str,
        target: str,
        allowed: AbstractSet[str],
    ) -> bool:
        """Depth-first search from start over dependency edges inside allowed."""
        stack = list(graph.get_dependencies(start))
        seen: Set[str] = set()
        while stack:
            node = stack.pop()
            if node == target:
                return True
            if node in seen or node not in allowed:
                continue
            seen.add(node)
            stack.extend(graph.get_dependencies(node))
        return False

    def levels(self, tasks: Sequence[TaskDescriptor]) -> Optional[Dict[str, int]]:
        """
        Compute the round each task runs in when everything succeeds.

        A task enters round k iff the longest dependency chain ending at
        it has length k-1. Returns None when the batch cannot complete.
        """
        graph = DependencyGraph.build(tasks)
        is_dag, order, _ = self.sort(graph)
        if not is_dag:
            return None

        level: Dict[str, int] = {}
        for node in order:
            deps = graph.get_dependencies(node)
            level[node] = 1 + max((level[dep] for dep in deps), default=0)
        return level


__all__ = [
    "DependencyGraph",
    "RoundPlan",
    "DeadlockDiagnosis",
    "ReadySetEvaluator",
    "TopologicalSorter",
]
