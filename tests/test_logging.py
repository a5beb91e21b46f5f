# ============================================================================
# STRUCTURED LOGGING TESTS
# ============================================================================
# EPOCH: 1 - REQUEST AGGREGATION
# STATUS: Tests - Log context and formatters
# PURPOSE: Verify context nesting, per-task isolation and JSON output
# CREATED: 19 OCT 2026
# ============================================================================
"""
Structured Logging Tests

Run with:
    pytest tests/test_logging.py -v
"""

import asyncio
import json
import logging

from core.logging import (
    HumanFormatter,
    StructuredFormatter,
    get_current_context,
    log_context,
)


def make_record(message="hello"):
    record = logging.LogRecord("test", logging.INFO, __file__, 1, message, None, None)
    record.extra = {"component": "scheduler"}
    return record


class TestLogContext:

    def test_nesting_merges_parent(self):
        with log_context(request_id="r1"):
            with log_context(round=2):
                context = get_current_context()
                assert context.request_id == "r1"
                assert context.round == 2
            assert get_current_context().round is None
        assert get_current_context().request_id is None

    def test_concurrent_tasks_isolated(self):
        async def worker(task_id, seen):
            with log_context(task_id=task_id):
                await asyncio.sleep(0)
                seen.append((task_id, get_current_context().task_id))

        async def _go():
            seen = []
            with log_context(request_id="r1"):
                await asyncio.gather(worker("a", seen), worker("b", seen))
            return seen

        assert sorted(asyncio.run(_go())) == [("a", "a"), ("b", "b")]


class TestFormatters:

    def test_structured_output(self):
        with log_context(request_id="r1", task_id="user"):
            line = StructuredFormatter().format(make_record())
        payload = json.loads(line)
        assert payload["msg"] == "hello"
        assert payload["level"] == "INFO"
        assert payload["context"] == {"request_id": "r1", "task_id": "user"}
        assert payload["data"] == {"component": "scheduler"}
        assert payload["at"].startswith("test_logging.py:1 ")

    def test_timestamp_is_utc_with_z_suffix(self):
        payload = json.loads(StructuredFormatter().format(make_record()))
        assert payload["ts"].endswith("Z")
        assert "+00:00" not in payload["ts"]

    def test_human_output(self):
        with log_context(request_id="r1", round=1, task_id="user"):
            line = HumanFormatter().format(make_record())
        assert "[req=r1, round=1, task=user]: hello" in line
