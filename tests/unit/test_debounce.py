"""Unit tests for keyed debouncing."""

import asyncio

import pytest

from tasktree.services.debounce import Debouncer


class TestDebouncer:
    @pytest.mark.asyncio
    async def test_burst_coalesces_into_last_callback(self):
        debouncer = Debouncer()
        calls = []

        for i in range(3):
            debouncer.schedule("doc", 0.02, lambda i=i: calls.append(i))
        await asyncio.sleep(0.1)

        assert calls == [2]
        assert not debouncer.is_pending("doc")

    @pytest.mark.asyncio
    async def test_keys_are_independent(self):
        debouncer = Debouncer()
        calls = []

        debouncer.schedule("a", 0.01, lambda: calls.append("a"))
        debouncer.schedule("b", 0.01, lambda: calls.append("b"))
        await asyncio.sleep(0.1)

        assert sorted(calls) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_cancel(self):
        debouncer = Debouncer()
        calls = []

        debouncer.schedule("doc", 0.02, lambda: calls.append(1))
        assert debouncer.is_pending("doc")
        assert debouncer.cancel("doc") is True
        await asyncio.sleep(0.05)

        assert calls == []
        assert debouncer.cancel("doc") is False

    @pytest.mark.asyncio
    async def test_cancel_all(self):
        debouncer = Debouncer()
        calls = []

        debouncer.schedule("a", 0.02, lambda: calls.append("a"))
        debouncer.schedule("b", 0.02, lambda: calls.append("b"))
        debouncer.cancel_all()
        await asyncio.sleep(0.05)

        assert calls == []

    @pytest.mark.asyncio
    async def test_reschedule_after_fire(self):
        debouncer = Debouncer()
        calls = []

        debouncer.schedule("doc", 0.0, lambda: calls.append(1))
        await asyncio.sleep(0.02)
        debouncer.schedule("doc", 0.0, lambda: calls.append(2))
        await asyncio.sleep(0.02)

        assert calls == [1, 2]
