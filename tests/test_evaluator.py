# ============================================================================
# READY-SET EVALUATOR TESTS
# ============================================================================
# EPOCH: 1 - REQUEST AGGREGATION
# STATUS: Tests - Round planning and deadlock diagnosis
# PURPOSE: Verify runnable/skipped/blocked partitioning and cycle detection
# CREATED: 19 OCT 2026
# ============================================================================
"""
Ready-Set Evaluator Tests

Run with:
    pytest tests/test_evaluator.py -v
"""

import pytest

from core.models import TaskDescriptor
from orchestrator.engine.evaluator import (
    DependencyGraph,
    ReadySetEvaluator,
    TopologicalSorter,
)


def task(task_id, *deps):
    return TaskDescriptor(
        id=task_id, url=f"/{task_id}", method="GET", depends_on=list(deps),
    )


def ids(tasks):
    return [t.id for t in tasks]


@pytest.fixture
def evaluator():
    return ReadySetEvaluator()


# ============================================================================
# ROUND PLANNING
# ============================================================================

class TestPlanRound:
    """Partitioning pending tasks for one round."""

    def test_roots_are_runnable(self, evaluator):
        pending = [task("A"), task("B", "A"), task("C")]
        plan = evaluator.plan_round(pending, set(), set())
        assert ids(plan.runnable) == ["A", "C"]
        assert ids(plan.blocked) == ["B"]
        assert plan.skipped == []

    def test_completed_dependency_unblocks(self, evaluator):
        plan = evaluator.plan_round([task("B", "A")], {"A"}, set())
        assert ids(plan.runnable) == ["B"]

    def test_failed_dependency_skips(self, evaluator):
        plan = evaluator.plan_round([task("B", "A"), task("C")], set(), {"A"})
        assert ids(plan.skipped) == ["B"]
        assert ids(plan.runnable) == ["C"]
        assert ids(plan.ready) == ["C", "B"]

    def test_waits_until_every_dependency_resolved(self, evaluator):
        # A failed but B still unresolved: D is not ready yet
        plan = evaluator.plan_round([task("D", "A", "B")], set(), {"A"})
        assert ids(plan.blocked) == ["D"]

    def test_is_stuck(self, evaluator):
        plan = evaluator.plan_round([task("A", "B"), task("B", "A")], set(), set())
        assert plan.is_stuck

    def test_empty_pending_is_not_stuck(self, evaluator):
        assert not evaluator.plan_round([], set(), set()).is_stuck

    def test_does_not_mutate_inputs(self, evaluator):
        pending = [task("A"), task("B", "A")]
        completed, failed = set(), set()
        evaluator.plan_round(pending, completed, failed)
        assert ids(pending) == ["A", "B"]
        assert completed == set() and failed == set()


# ============================================================================
# DIAGNOSIS
# ============================================================================

class TestDiagnose:
    """Explaining why pending tasks cannot run."""

    def test_true_cycle(self, evaluator):
        pending = [task("A", "B"), task("B", "A")]
        diagnosis = evaluator.diagnose(pending, {"A", "B"})
        assert diagnosis.cyclic == ["A", "B"]
        assert diagnosis.missing == {}
        assert "cycle involving: A, B" in diagnosis.describe()

    def test_missing_reference(self, evaluator):
        diagnosis = evaluator.diagnose([task("A", "ghost")], {"A"})
        assert diagnosis.missing == {"A": ["ghost"]}
        assert diagnosis.cyclic == []
        assert "A -> ghost" in diagnosis.describe()

    def test_dependent_of_cycle_not_on_cycle(self, evaluator):
        pending = [task("A", "B"), task("B", "A"), task("C", "A")]
        diagnosis = evaluator.diagnose(pending, {"A", "B", "C"})
        assert diagnosis.cyclic == ["A", "B"]

    def test_dependent_of_missing_reference_not_cyclic(self, evaluator):
        pending = [task("t", "ghost"), task("c", "t")]
        diagnosis = evaluator.diagnose(pending, {"t", "c"})
        assert diagnosis.missing == {"t": ["ghost"]}
        assert diagnosis.cyclic == []
        assert "cycle" not in diagnosis.describe()

    def test_task_between_two_cycles(self, evaluator):
        pending = [
            task("A", "B"), task("B", "A"),
            task("X", "A"),
            task("C", "D", "X"), task("D", "C"),
        ]
        diagnosis = evaluator.diagnose(pending, {"A", "B", "C", "D", "X"})
        assert diagnosis.cyclic == ["A", "B", "C", "D"]

    def test_self_dependency(self, evaluator):
        diagnosis = evaluator.diagnose([task("A", "A")], {"A"})
        assert diagnosis.cyclic == ["A"]


# ============================================================================
# TOPOLOGICAL SORT
# ============================================================================

class TestTopologicalSorter:
    """Kahn's algorithm and round levels."""

    def test_graph_edges(self):
        graph = DependencyGraph.build([task("A"), task("B", "A")])
        assert graph.get_dependencies("B") == ["A"]
        assert graph.get_dependents("A") == ["B"]
        assert graph.nodes == {"A", "B"}

    def test_sort_dag(self):
        graph = DependencyGraph.build([task("C", "B"), task("B", "A"), task("A")])
        is_dag, order, remaining = TopologicalSorter().sort(graph)
        assert is_dag
        assert order == ["A", "B", "C"]
        assert remaining == []

    def test_cycle_members(self):
        graph = DependencyGraph.build([task("A", "A"), task("B", "A"), task("C")])
        assert TopologicalSorter().cycle_members(graph) == ["A"]

    def test_sort_cycle(self):
        graph = DependencyGraph.build([task("A", "B"), task("B", "A"), task("C")])
        is_dag, order, remaining = TopologicalSorter().sort(graph)
        assert not is_dag
        assert order == ["C"]
        assert remaining == ["A", "B"]

    def test_levels_diamond(self):
        tasks = [task("A"), task("B", "A"), task("C", "A"), task("D", "B", "C")]
        assert TopologicalSorter().levels(tasks) == {"A": 1, "B": 2, "C": 2, "D": 3}

    def test_levels_longest_chain_wins(self):
        tasks = [task("A"), task("B", "A"), task("C", "A", "B")]
        assert TopologicalSorter().levels(tasks)["C"] == 3

    def test_levels_unsatisfiable(self):
        assert TopologicalSorter().levels([task("A", "ghost")]) is None
