"""
Unit Tests for Single-Flight
============================
"""

import asyncio

import pytest

from portal_glyphs.core.singleflight import SingleFlight


class Computation:
    """Counts invocations and blocks until released."""

    def __init__(self, result="done", error=None):
        self.calls = 0
        self.result = result
        self.error = error
        self.release = asyncio.Event()

    async def __call__(self):
        self.calls += 1
        await self.release.wait()
        if self.error is not None:
            raise self.error
        return self.result


class TestSingleFlight:
    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_run(self):
        flights = SingleFlight()
        compute = Computation()

        waiters = [asyncio.ensure_future(flights.do("key", compute)) for _ in range(5)]
        await asyncio.sleep(0)

        assert flights.is_running("key")
        assert flights.in_flight == 1

        compute.release.set()
        results = await asyncio.gather(*waiters)

        assert results == ["done"] * 5
        assert compute.calls == 1
        assert flights.in_flight == 0

    @pytest.mark.asyncio
    async def test_keys_are_independent(self):
        flights = SingleFlight()
        first, second = Computation("a"), Computation("b")
        first.release.set()
        second.release.set()

        results = await asyncio.gather(flights.do("a", first), flights.do("b", second))

        assert results == ["a", "b"]
        assert first.calls == second.calls == 1

    @pytest.mark.asyncio
    async def test_failure_reaches_every_waiter_and_releases_key(self):
        flights = SingleFlight()
        compute = Computation(error=ValueError("render failed"))

        waiters = [asyncio.ensure_future(flights.do("key", compute)) for _ in range(3)]
        await asyncio.sleep(0)
        compute.release.set()
        results = await asyncio.gather(*waiters, return_exceptions=True)

        assert all(isinstance(r, ValueError) for r in results)
        assert compute.calls == 1
        assert not flights.is_running("key")

    @pytest.mark.asyncio
    async def test_runs_again_after_completion(self):
        flights = SingleFlight()
        compute = Computation()
        compute.release.set()

        await flights.do("key", compute)
        await flights.do("key", compute)

        assert compute.calls == 2

    @pytest.mark.asyncio
    async def test_cancelled_waiter_does_not_cancel_the_run(self):
        flights = SingleFlight()
        compute = Computation()

        leaver = asyncio.ensure_future(flights.do("key", compute))
        stayer = asyncio.ensure_future(flights.do("key", compute))
        await asyncio.sleep(0)

        leaver.cancel()
        await asyncio.sleep(0)
        assert flights.is_running("key")

        compute.release.set()
        assert await stayer == "done"
        with pytest.raises(asyncio.CancelledError):
            await leaver

    @pytest.mark.asyncio
    async def test_run_completes_after_every_waiter_left(self):
        flights = SingleFlight()
        compute = Computation()

        waiter = asyncio.ensure_future(flights.do("key", compute))
        await asyncio.sleep(0)
        waiter.cancel()
        await asyncio.sleep(0)

        compute.release.set()
        for _ in range(10):
            if not flights.is_running("key"):
                break
            await asyncio.sleep(0)

        assert not flights.is_running("key")
        assert compute.calls == 1
