# ============================================================================
# STRUCTURED LOGGING
# ============================================================================
# EPOCH: 1 - REQUEST AGGREGATION
# STATUS: Core - Structured logging with context
# PURPOSE: Consistent, queryable logging across all components
# CREATED: 19 OCT 2026
# ============================================================================
"""
Structured Logging

Provides structured, JSON-formatted logging for the request aggregator.

Features:
- Component-based loggers
- Contextual fields (request_id, round, task_id)
- JSON output for log aggregation
- Named checkpoints for tracing an aggregate call

Context is kept in a ContextVar, so every asyncio task dispatched in a
round sees its own task_id without leaking into its siblings.

Usage:
    from core.logging import get_logger, log_context

    logger = get_logger("orchestrator.scheduler")

    with log_context(request_id="req-123", round=1):
        logger.info("Dispatching round", extra={"task_count": 5})
"""

import json
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple, Union
from enum import Enum


class ComponentType(str, Enum):
    """Component types for logging categorization."""
    SCHEDULER = "scheduler"
    EXECUTOR = "executor"
    API = "api"
    TRANSPORT = "transport"


@dataclass(frozen=True)
class LogContext:
    """
    Context for structured logging.

    Immutable, nested contexts are merged copies of their parent.
    """
    request_id: Optional[str] = None
    task_id: Optional[str] = None
    round: Optional[int] = None
    component: Optional[str] = None
    operation: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict, excluding None values."""
        result = {}
        for key, value in asdict(self).items():
            if value is not None and key != "extra":
                result[key] = value
        if self.extra:
            result.update(self.extra)
        return result


# Per-task context stack (tuples, never mutated in place)
_context_stack: ContextVar[Tuple[LogContext, ...]] = ContextVar(
    "log_context_stack", default=()
)


def get_current_context() -> LogContext:
    """Get current logging context."""
    stack = _context_stack.get()
    if stack:
        return stack[-1]
    return LogContext()


@contextmanager
def log_context(**kwargs):
    """
    Context manager for adding logging context.

    Args:
        **kwargs: Context fields to add

    Example:
        with log_context(request_id="req-123", task_id="user"):
            logger.info("Calling upstream")
    """
    # Merge with parent context
    parent = get_current_context()
    new_context = LogContext(
        request_id=kwargs.get("request_id", parent.request_id),
        task_id=kwargs.get("task_id", parent.task_id),
        round=kwargs.get("round", parent.round),
        component=kwargs.get("component", parent.component),
        operation=kwargs.get("operation", parent.operation),
        extra={**parent.extra, **kwargs.get("extra", {})},
    )

    token = _context_stack.set(_context_stack.get() + (new_context,))
    try:
        yield new_context
    finally:
        _context_stack.reset(token)


def _utc_now() -> str:
    stamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


class StructuredFormatter(logging.Formatter):
    """
    One JSON document per record, for log aggregators.

    Shape:
        {"ts", "level", "logger", "msg", "context"?, "data"?, "exception"?, "at"}
    """

    def format(self, record: logging.LogRecord) -> str:
        document: Dict[str, Any] = {
            "ts": _utc_now(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        context = get_current_context().to_dict()
        if context:
            document["context"] = context

        # Set by ContextLogger / log_checkpoint
        data = getattr(record, "extra", None)
        if data:
            document["data"] = data

        if record.exc_info:
            document["exception"] = self.formatException(record.exc_info)

        document["at"] = f"{record.filename}:{record.lineno} {record.funcName}"
        return json.dumps(document, default=str)


class HumanFormatter(logging.Formatter):
    """
    Single-line output for local runs.

    2026-10-19 10:30:00 INFO     orchestrator.scheduler [req=ab12, round=2, task=order]: ...
    """

    def format(self, record: logging.LogRecord) -> str:
        context = get_current_context()
        tags = [
            f"{label}={value}"
            for label, value in (
                ("req", context.request_id),
                ("round", context.round),
                ("task", context.task_id),
            )
            if value is not None
        ]
        prefix = " ".join([
            datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S"),
            record.levelname.ljust(8),
            record.name + (f" [{', '.join(tags)}]" if tags else ""),
        ])

        line = f"{prefix}: {record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class ContextLogger(logging.LoggerAdapter):
    """
    Adapter stamping the component on every record.

    Caller extras are nested under record.extra so they cannot collide
    with LogRecord attributes. Context fields are added by the formatter.
    """

    def process(self, msg, kwargs):
        data = {"component": self.extra["component"]} if self.extra.get("component") else {}
        data.update(kwargs.get("extra") or {})
        kwargs["extra"] = {"extra": data}
        return msg, kwargs


def get_logger(name: str, component: Optional[ComponentType] = None) -> ContextLogger:
    """Get a context-aware logger, optionally tagged with a component."""
    return ContextLogger(
        logging.getLogger(name),
        {"component": component.value if component else None},
    )


def configure_logging(
    level: Union[str, int] = "INFO",
    json_output: bool = False,
) -> None:
    """
    Install one stdout handler on the root logger.

    Args:
        level: Log level name or number (unknown names fall back to INFO)
        json_output: StructuredFormatter instead of HumanFormatter
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter() if json_output else HumanFormatter())

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)

    # httpx logs every request at INFO, the executor already does
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))


# ============================================================================
# CHECKPOINT LOGGING
# ============================================================================

CHECKPOINT_LOGGER = "aggregate.checkpoint"


def log_checkpoint(
    name: str,
    data: Optional[Dict[str, Any]] = None,
    logger: Optional[logging.Logger] = None,
) -> None:
    """
    Log a named checkpoint.

    Checkpoints (aggregate_started, round_completed, aggregate_completed)
    are fixed markers, so one call can be followed by filtering on
    request_id and checkpoint name.
    """
    target = logger or logging.getLogger(CHECKPOINT_LOGGER)
    target.info(
        f"CHECKPOINT: {name}",
        extra={"extra": {"checkpoint": name, **(data or {})}},
    )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ComponentType",
    "LogContext",
    "StructuredFormatter",
    "HumanFormatter",
    "ContextLogger",
    "get_logger",
    "configure_logging",
    "log_context",
    "get_current_context",
    "log_checkpoint",
]
