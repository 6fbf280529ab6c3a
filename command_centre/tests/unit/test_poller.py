"""Unit tests for the fixed-interval poller."""

import asyncio

from command_centre.client.poller import Poller


class TestPoller:
    """Tests for Poller start/stop behaviour."""

    def test_runs_immediately(self):
        calls = []

        async def callback():
            calls.append(1)

        async def run():
            poller = Poller("test", 60, callback)
            poller.start()
            await asyncio.sleep(0)
            running = poller.running
            await poller.stop()
            return running, poller.running

        running, after_stop = asyncio.run(run())

        assert calls == [1]
        assert running is True
        assert after_stop is False

    def test_repeats_and_survives_errors(self):
        calls = []

        async def callback():
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("network down")

        async def run():
            poller = Poller("test", 0.01, callback)
            poller.start()
            await asyncio.sleep(0.1)
            await poller.stop()

        asyncio.run(run())

        assert len(calls) >= 3

    def test_start_twice_keeps_one_task(self):
        calls = []

        async def callback():
            calls.append(1)

        async def run():
            poller = Poller("test", 60, callback)
            poller.start()
            poller.start()
            await asyncio.sleep(0)
            await poller.stop()

        asyncio.run(run())

        assert calls == [1]

    def test_stop_before_start(self):
        async def callback():
            pass

        asyncio.run(Poller("idle", 1, callback).stop())
