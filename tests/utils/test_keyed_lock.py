"""Tests for KeyedLock."""

import asyncio

from frontdesk.utils import KeyedLock


class TestKeyedLock:
    """SUT: KeyedLock.hold"""

    async def test_same_key_is_serialized(self):
        """Two holders of one key should never overlap."""
        locks = KeyedLock()
        events = []

        async def worker(name):
            async with locks.hold("k"):
                events.append(f"{name}-in")
                await asyncio.sleep(0.01)
                events.append(f"{name}-out")

        await asyncio.gather(worker("a"), worker("b"))
        assert events in (
            ["a-in", "a-out", "b-in", "b-out"],
            ["b-in", "b-out", "a-in", "a-out"],
        )

    async def test_different_keys_run_concurrently(self):
        """Holders of different keys should interleave."""
        locks = KeyedLock()
        entered = asyncio.Event()
        released = []

        async def first():
            async with locks.hold("a"):
                entered.set()
                await asyncio.sleep(0.01)
                released.append("a")

        async def second():
            await entered.wait()
            async with locks.hold("b"):
                released.append("b")

        await asyncio.gather(first(), second())
        assert released == ["b", "a"]

    async def test_idle_keys_are_forgotten(self):
        """The table should be empty once nobody holds or waits on a key."""
        locks = KeyedLock()
        async with locks.hold(("p1", "42")):
            assert len(locks) == 1
        assert len(locks) == 0

    async def test_released_on_error(self):
        """An exception inside the block should still release the key."""
        locks = KeyedLock()
        try:
            async with locks.hold("k"):
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        assert len(locks) == 0
        async with locks.hold("k"):
            pass
