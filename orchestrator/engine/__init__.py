# ============================================================================
# ORCHESTRATOR ENGINE
# ============================================================================
# EPOCH: 1 - REQUEST AGGREGATION
# STATUS: Core - Engine components
# PURPOSE: Placeholder resolution, projection, ready-set evaluation
# CREATED: 19 OCT 2026
# ============================================================================
"""
Orchestrator Engine Components

- placeholders: $path / ${path} substitution from earlier results
- projection: envelope-aware include/exclude field filter
- evaluator: ready-set detection and deadlock diagnostics
"""

from orchestrator.engine.placeholders import (
    PlaceholderResolver,
    get_resolver,
    resolve_placeholders,
)
from orchestrator.engine.projection import (
    ProjectionEngine,
    apply_projection,
)
from orchestrator.engine.evaluator import (
    DependencyGraph,
    RoundPlan,
    DeadlockDiagnosis,
    ReadySetEvaluator,
    TopologicalSorter,
)

__all__ = [
    # Placeholders
    "PlaceholderResolver",
    "get_resolver",
    "resolve_placeholders",
    # Projection
    "ProjectionEngine",
    "apply_projection",
    # Evaluator
    "DependencyGraph",
    "RoundPlan",
    "DeadlockDiagnosis",
    "ReadySetEvaluator",
    "TopologicalSorter",
]
