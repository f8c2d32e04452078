# tests/test_concurrency.py
"""Tests for bounded-concurrency mapping"""

import asyncio
import random

import pytest

from album_sync.core.concurrency import DEFAULT_CONCURRENCY, map_bounded


class TestMapBounded:
    """Test chunked concurrent mapping"""

    @pytest.mark.asyncio
    async def test_preserves_order_with_scrambled_completion(self):
        """Output order matches input order whatever finishes first"""
        rng = random.Random(42)
        delays = {i: rng.uniform(0, 0.02) for i in range(23)}

        async def work(i):
            await asyncio.sleep(delays[i])
            return i * 10

        result = await map_bounded(list(range(23)), work, limit=5)
        assert result == [i * 10 for i in range(23)]

    @pytest.mark.asyncio
    async def test_never_exceeds_limit(self):
        """At most `limit` invocations are in flight at once"""
        in_flight = 0
        peak = 0

        async def work(i):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.001)
            in_flight -= 1
            return i

        await map_bounded(list(range(12)), work, limit=3)
        assert peak == 3

    @pytest.mark.asyncio
    async def test_next_chunk_waits_for_previous(self):
        """A chunk starts only after every call of the previous one settled"""
        events = []

        async def work(i):
            events.append(("start", i))
            await asyncio.sleep(0.01 if i == 0 else 0)
            events.append(("end", i))
            return i

        await map_bounded([0, 1, 2], work, limit=2)
        assert events.index(("end", 0)) < events.index(("start", 2))

    @pytest.mark.asyncio
    async def test_exception_propagates(self):
        """Errors are not swallowed"""
        async def work(i):
            if i == 3:
                raise RuntimeError("boom")
            return i

        with pytest.raises(RuntimeError, match="boom"):
            await map_bounded(list(range(6)), work, limit=5)

    @pytest.mark.asyncio
    async def test_empty_input(self):
        """No items, no calls"""
        async def work(i):
            raise AssertionError("should not be called")

        assert await map_bounded([], work) == []

    @pytest.mark.asyncio
    async def test_invalid_limit(self):
        """Limit must be at least 1"""
        async def work(i):
            return i

        with pytest.raises(ValueError):
            await map_bounded([1, 2], work, limit=0)

    def test_default_limit(self):
        """Default chunk size is five"""
        assert DEFAULT_CONCURRENCY == 5
