"""Tests for KeyedLock."""

import asyncio

from sales_assistant.utils.locks import KeyedLock


class TestKeyedLock:
    """SUT: KeyedLock"""

    async def test_serializes_same_key(self):
        locks = KeyedLock()
        events = []

        async def worker(name):
            async with locks.hold("c1"):
                events.append(f"{name}-start")
                await asyncio.sleep(0.01)
                events.append(f"{name}-end")

        await asyncio.gather(worker("a"), worker("b"))
        assert events == ["a-start", "a-end", "b-start", "b-end"]

    async def test_different_keys_run_concurrently(self):
        locks = KeyedLock()
        inside = asyncio.Event()
        released = asyncio.Event()

        async def holder():
            async with locks.hold("c1"):
                inside.set()
                await released.wait()

        task = asyncio.create_task(holder())
        await inside.wait()
        async with locks.hold("c2"):
            assert locks._locks["c1"].locked()
            assert locks._locks["c2"].locked()
        released.set()
        await task

    async def test_lock_dropped_when_idle(self):
        locks = KeyedLock()
        async with locks.hold("c1"):
            assert locks._locks["c1"].locked()
        assert locks._locks == {}
        assert locks._waiters == {}

    async def test_released_on_error(self):
        locks = KeyedLock()
        try:
            async with locks.hold("c1"):
                raise ValueError("boom")
        except ValueError:
            pass
        assert locks._locks == {}
