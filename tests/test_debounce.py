"""Tests for request debouncing."""

import asyncio

from dither_studio.utils.debounce import Debouncer


class TestDebouncer:
    def test_burst_coalesces(self):
        calls = []

        async def main():
            debouncer = Debouncer(lambda: calls.append(1))
            for _ in range(5):
                debouncer.schedule(0.02)
                await asyncio.sleep(0.001)
            assert debouncer.pending
            await asyncio.sleep(0.1)
            assert not debouncer.pending

        asyncio.run(main())
        assert calls == [1]

    def test_separate_bursts(self):
        calls = []

        async def main():
            debouncer = Debouncer(lambda: calls.append(1))
            debouncer.schedule(0.01)
            await asyncio.sleep(0.05)
            debouncer.schedule(0.01)
            await asyncio.sleep(0.05)

        asyncio.run(main())
        assert len(calls) == 2

    def test_cancel(self):
        calls = []

        async def main():
            debouncer = Debouncer(lambda: calls.append(1))
            debouncer.schedule(0.01)
            debouncer.cancel()
            assert not debouncer.pending
            await asyncio.sleep(0.05)

        asyncio.run(main())
        assert calls == []
