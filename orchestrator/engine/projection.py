# ============================================================================
# PROJECTION ENGINE
# ============================================================================
# EPOCH: 1 - REQUEST AGGREGATION
# STATUS: Core - Field include/exclude on task results
# PURPOSE: Trim upstream payloads down to the fields a client asked for
# CREATED: 19 OCT 2026
# ============================================================================
"""
Projection Engine

Applies an include/exclude field filter to a task's result.

Envelope awareness:
    Upstream services usually answer {"code": 0, "msg": "", "data": {...}}.
    When the result is a dict whose "data" field is a dict or list, the
    filter targets that payload and the envelope is kept as-is.

Filtering:
- Lists are mapped element-wise
- include: keep only the named fields (missing ones are simply absent)
- exclude: drop the named fields, keep everything else
- Scalars pass through
- A dotted field ("profile.email") reaches into nested dicts when no
  top-level key has that literal name

Projection is pure and idempotent.
"""

from typing import Any, Dict, List, Optional

from core.contracts import ProjectionMode
from core.models import ProjectionSpec

ENVELOPE_FIELD = "data"


class ProjectionEngine:
    """Envelope-aware include/exclude filter."""

    def __init__(self, envelope_field: str = ENVELOPE_FIELD):
        self.envelope_field = envelope_field

    def apply(self, data: Any, spec: Optional[ProjectionSpec]) -> Any:
        """
        Apply a projection to a task result.

        Args:
            data: Upstream response body
            spec: Projection to apply (None = unchanged)

        Returns:
            Projected copy of data
        """
        if spec is None or data is None:
            return data

        if isinstance(data, dict):
            inner = data.get(self.envelope_field)
            if isinstance(inner, (dict, list)):
                return {**data, self.envelope_field: self._project(inner, spec)}

        return self._project(data, spec)

    def _project(self, target: Any, spec: ProjectionSpec) -> Any:
        """Apply the filter to a list, dict or scalar."""
        if isinstance(target, list):
            return [self._project(item, spec) for item in target]
        if isinstance(target, dict):
            if spec.mode == ProjectionMode.INCLUDE:
                return _pick(target, spec.fields)
            return _omit(target, spec.fields)
        return target


# ============================================================================
# FIELD HELPERS
# ============================================================================

def _pick(target: Dict[str, Any], fields: List[str]) -> Dict[str, Any]:
    """Keep only the named fields (top-level name or dotted path)."""
    result: Dict[str, Any] = {}
    for name in fields:
        if name in target:
            result[name] = target[name]
        elif "." in name:
            _pick_path(target, name.split("."), result)
    return result


def _pick_path(source: Dict[str, Any], parts: List[str], dest: Dict[str, Any]) -> None:
    """Copy one nested path from source into dest, creating parents."""
    current: Any = source
    for part in parts:
        if not isinstance(current, dict) or part not in current:
            return
        current = current[part]

    node = dest
    for part in parts[:-1]:
        existing = node.get(part)
        if not isinstance(existing, dict):
            existing = {}
            node[part] = existing
        node = existing
    node[parts[-1]] = current


def _omit(target: Dict[str, Any], fields: List[str]) -> Dict[str, Any]:
    """Drop the named fields (top-level name or dotted path)."""
    result = dict(target)
    for name in fields:
        if name in result:
            del result[name]
        elif "." in name:
            result = _omit_path(result, name.split("."))
    return result


def _omit_path(target: Dict[str, Any], parts: List[str]) -> Dict[str, Any]:
    """Return a copy of target without one nested path."""
    head = parts[0]
    if head not in target:
        return target
    if len(parts) == 1:
        return {k: v for k, v in target.items() if k != head}
    child = target[head]
    if not isinstance(child, dict):
        return target
    return {**target, head: _omit_path(child, parts[1:])}


# ============================================================================
# CONVENIENCE FUNCTIONS
# ============================================================================

_engine = ProjectionEngine()


def apply_projection(data: Any, spec: Optional[ProjectionSpec]) -> Any:
    """Convenience function to project with the shared engine."""
    return _engine.apply(data, spec)


__all__ = [
    "ENVELOPE_FIELD",
    "ProjectionEngine",
    "apply_projection",
]
