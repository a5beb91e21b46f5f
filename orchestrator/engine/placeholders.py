# ============================================================================
# PLACEHOLDER RESOLUTION ENGINE
# ============================================================================
# EPOCH: 1 - REQUEST AGGREGATION
# STATUS: Core - Placeholder substitution from earlier task results
# PURPOSE: Resolve $path and ${path} references in task url/params/body
# CREATED: 19 OCT 2026
# ============================================================================
"""
Placeholder Resolution Engine

Resolves references to earlier task results inside a pending task.

Supported patterns:
- "$user.data.id"          - Whole value: replaced by the looked-up value,
                             whatever its type (dict, list, number...)
- "/orders?uid=${user.id}" - Template: each ${...} replaced by the string
                             form of the looked-up value, "" if missing
- "/o?uid=$user.id"       - Inline reference inside a longer string:
                             substituted only when the path resolves,
                             otherwise left verbatim ("costs $5" is safe)
                             Inline paths stop at any non-word character,
                             so "$user.id-x" reads user.id
- "$items[0].id"           - Bracket and dotted list indexes both work

Rules:
- A string starting with "$" is ALWAYS a whole-value reference. If the
  path does not resolve the string is returned unchanged (fail open).
- Lists and dicts are walked recursively. Dict keys are never substituted.
- Anything else (numbers, bools, None) passes through.

Examples:
    context = {"A": {"user": {"id": 42}}}
    resolve("$A.user.id", context)       -> 42
    resolve("id=${A.user.id}", context)  -> "id=42"
    resolve("id=${A.missing}", context)  -> "id="
"""

import json
import re
from typing import Any, List, Mapping

from core.logging import get_logger, ComponentType

logger = get_logger(__name__, ComponentType.EXECUTOR)

SENTINEL = "$"

# ${path} span, or an inline $path reference inside a longer string
_SPAN_PATTERN = re.compile(
    r"\$\{(?P<template>[^}]+)\}"
    r"|\$(?P<inline>[A-Za-z_]\w*(?:\.\w+|\[\d+\])*)"
)
_BRACKET_PATTERN = re.compile(r"\[([^\]]*)\]")

# Marker for "path did not resolve" (None is a legitimate JSON value)
_MISSING = object()


def split_path(path: str) -> List[str]:
    """
    Split a dotted path into segments.

    "a.b[0].c" -> ["a", "b", "0", "c"]
    """
    normalized = _BRACKET_PATTERN.sub(
        lambda m: "." + m.group(1).strip("'\""), path.strip()
    )
    return [segment for segment in normalized.split(".") if segment != ""]


def lookup(context: Mapping[str, Any], path: str) -> Any:
    """
    Look up a dotted path in the context.

    Returns _MISSING when any segment cannot be followed.
    """
    current: Any = context
    segments = split_path(path)
    if not segments:
        return _MISSING

    for segment in segments:
        if isinstance(current, Mapping):
            if segment not in current:
                return _MISSING
            current = current[segment]
        elif isinstance(current, list):
            try:
                index = int(segment)
            except ValueError:
                return _MISSING
            if index < 0 or index >= len(current):
                return _MISSING
            current = current[index]
        else:
            return _MISSING

    return current


def to_template_string(value: Any) -> str:
    """Render a looked-up value the way it appears inside a template."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)
    return str(value)


class PlaceholderResolver:
    """
    Resolver for placeholders in task parameters.

    Stateless, can be reused across tasks and rounds.
    """

    def resolve(self, value: Any, context: Mapping[str, Any]) -> Any:
        """
        Resolve all placeholders in a value.

        Args:
            value: str, list, dict or scalar (not modified)
            context: Map of task_id -> result of completed tasks

        Returns:
            New value with placeholders resolved
        """
        if isinstance(value, str):
            return self._resolve_string(value, context)
        elif isinstance(value, dict):
            return {k: self.resolve(v, context) for k, v in value.items()}
        elif isinstance(value, list):
            return [self.resolve(item, context) for item in value]
        else:
            return value

    def _resolve_string(self, value: str, context: Mapping[str, Any]) -> Any:
        """Resolve a whole-value reference or template spans in a string."""
        if not value:
            return value

        if value.startswith(SENTINEL):
            found = lookup(context, value[len(SENTINEL):])
            if found is _MISSING:
                logger.debug(f"Unresolved reference left as-is: {value}")
                return value
            return found

        if SENTINEL not in value:
            return value

        def _substitute(match: "re.Match[str]") -> str:
            template = match.group("template")
            if template is not None:
                found = lookup(context, template)
                return "" if found is _MISSING else to_template_string(found)
            found = lookup(context, match.group("inline"))
            return match.group(0) if found is _MISSING else to_template_string(found)

        return _SPAN_PATTERN.sub(_substitute, value)

    def has_placeholders(self, value: Any) -> bool:
        """Check if a value contains any placeholder."""
        if isinstance(value, str):
            return value.startswith(SENTINEL) or bool(_SPAN_PATTERN.search(value))
        elif isinstance(value, dict):
            return any(self.has_placeholders(v) for v in value.values())
        elif isinstance(value, list):
            return any(self.has_placeholders(item) for item in value)
        return False


# ============================================================================
# CONVENIENCE FUNCTIONS
# ============================================================================

_resolver = PlaceholderResolver()


def get_resolver() -> PlaceholderResolver:
    """Get shared placeholder resolver instance."""
    return _resolver


def resolve_placeholders(value: Any, context: Mapping[str, Any]) -> Any:
    """Convenience function to resolve a value with the shared resolver."""
    return _resolver.resolve(value, context)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "SENTINEL",
    "PlaceholderResolver",
    "split_path",
    "lookup",
    "to_template_string",
    "get_resolver",
    "resolve_placeholders",
]
