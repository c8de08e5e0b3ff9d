"""Tests for trace ID context management and propagation."""

import asyncio
import uuid

import pytest

from vaultkit.common.logging.context import (
    LogContext,
    clear_trace_id,
    generate_trace_id,
    get_trace_id,
    set_trace_id,
)


class TestTraceContext:
    def test_generate_trace_id_is_uuid4(self) -> None:
        assert uuid.UUID(generate_trace_id()).version == 4

    def test_set_and_clear(self) -> None:
        set_trace_id("trace-1")
        assert get_trace_id() == "trace-1"

        clear_trace_id()
        assert get_trace_id() is None

    def test_empty_trace_id_rejected(self) -> None:
        with pytest.raises(ValueError, match="empty"):
            set_trace_id("")

    def test_log_context_restores_previous(self) -> None:
        set_trace_id("outer")

        with LogContext("inner") as trace_id:
            assert trace_id == "inner"
            assert get_trace_id() == "inner"

        assert get_trace_id() == "outer"

    def test_log_context_generates_when_omitted(self) -> None:
        with LogContext() as trace_id:
            assert get_trace_id() == trace_id
            assert trace_id

        assert get_trace_id() is None

    @pytest.mark.asyncio()
    async def test_tasks_see_their_own_trace_id(self) -> None:
        async def worker(name: str) -> str | None:
            with LogContext(name):
                await asyncio.sleep(0)
                return get_trace_id()

        results = await asyncio.gather(worker("a"), worker("b"), worker("c"))

        assert results == ["a", "b", "c"]
