import asyncio

import pytest

from liirat_api.core.exceptions import UpstreamError, UpstreamRateLimitError
from liirat_api.schemas.quote import ConnectionStatus, Quote
from liirat_api.services.quote_batcher import QuoteBatcher, partition
from liirat_api.services.quote_cache import WILDCARD, QuoteCache
from liirat_api.services.quote_poller import QuotePoller


@pytest.fixture
def cache():
    return QuoteCache()


class _Sleeps:
    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)
        await asyncio.sleep(0)


class TestQuoteCache:
    def test_publish_notifies_symbol_and_wildcard(self, cache):
        seen, everything = [], []
        unsubscribe = cache.subscribe("aapl.us", seen.append)
        cache.subscribe(WILDCARD, everything.append)

        cache.publish(Quote(symbol="AAPL.US", price=1.0))
        cache.publish(Quote(symbol="MSFT.US", price=2.0))
        unsubscribe()
        cache.publish(Quote(symbol="AAPL.US", price=3.0))

        assert [q.price for q in seen] == [1.0]
        assert [q.symbol for q in everything] == ["AAPL.US", "MSFT.US", "AAPL.US"]

    def test_failing_subscriber_does_not_block_others(self, cache):
        seen = []

        def broken(quote):
            raise RuntimeError("boom")

        cache.subscribe("AAPL.US", broken)
        cache.subscribe("AAPL.US", seen.append)

        cache.publish(Quote(symbol="AAPL.US", price=1.0))

        assert len(seen) == 1

    def test_failure_keeps_last_known_quote(self, cache):
        cache.publish(Quote(symbol="AAPL.US", price=190.0))
        connected = cache.get("AAPL.US")

        entry = cache.mark_failure("AAPL.US", ConnectionStatus.DEGRADED, "rate limited")

        assert entry.quote.price == 190.0
        assert entry.status == ConnectionStatus.DEGRADED
        assert entry.lastUpdate == connected.lastUpdate
        assert entry.error == "rate limited"

    def test_snapshot_placeholders(self, cache):
        [entry] = cache.snapshot(["NEW.US"])
        assert entry.status == ConnectionStatus.CONNECTING
        assert entry.quote is None


class TestQuoteBatcher:
    def test_partition(self):
        assert partition(["a", "b", "c", "d"], 3) == [["a", "b", "c"], ["d"]]
        assert partition([], 3) == []

    def test_in_flight_symbol_is_not_fetched_twice(self, cache):
        calls = []

        async def fetcher(symbol):
            calls.append(symbol)
            await asyncio.sleep(0.01)
            return Quote(symbol=symbol, price=1.0)

        batcher = QuoteBatcher(fetcher, cache)

        async def scenario():
            await asyncio.gather(*(batcher.fetch_symbol("AAPL.US") for _ in range(5)))

        asyncio.run(scenario())

        assert calls == ["AAPL.US"]
        assert batcher.max_in_flight("AAPL.US") == 1
        assert not batcher.is_pending("AAPL.US")

    def test_batches_settle_before_next_starts(self, cache):
        active = {"now": 0, "peak": 0}
        order = []

        async def fetcher(symbol):
            active["now"] += 1
            active["peak"] = max(active["peak"], active["now"])
            order.append(symbol)
            await asyncio.sleep(0)
            active["now"] -= 1
            return Quote(symbol=symbol, price=10.0)

        sleeps = _Sleeps()
        batcher = QuoteBatcher(fetcher, cache, batch_size=3, batch_delay=2.0, sleep=sleeps)
        symbols = ["A", "B", "C", "D", "E", "F", "G", "A"]

        requested = asyncio.run(batcher.poll_once(symbols))

        assert requested == ["A", "B", "C", "D", "E", "F", "G"]
        assert active["peak"] <= 3
        assert sleeps.delays == [2.0, 2.0]
        assert sorted(order) == requested
        assert all(batcher.max_in_flight(s) == 1 for s in requested)

    def test_fresh_symbols_are_skipped(self, cache):
        calls = []

        async def fetcher(symbol):
            calls.append(symbol)
            return Quote(symbol=symbol, price=1.0)

        batcher = QuoteBatcher(fetcher, cache, interval=60, sleep=_Sleeps())

        async def scenario():
            await batcher.poll_once(["AAPL.US"])
            return await batcher.poll_once(["AAPL.US", "MSFT.US"])

        second = asyncio.run(scenario())

        assert second == ["MSFT.US"]
        assert calls == ["AAPL.US", "MSFT.US"]

    @pytest.mark.parametrize(
        "error,status",
        [
            (UpstreamRateLimitError("EODHD API error: 429", upstream_status=429), ConnectionStatus.DEGRADED),
            (UpstreamError("EODHD API unreachable"), ConnectionStatus.DISCONNECTED),
        ],
    )
    def test_failure_keeps_cached_value(self, cache, error, status):
        cache.publish(Quote(symbol="AAPL.US", price=190.0))

        async def fetcher(symbol):
            raise error

        batcher = QuoteBatcher(fetcher, cache)
        asyncio.run(batcher.fetch_symbol("AAPL.US"))

        entry = cache.get("AAPL.US")
        assert entry.status == status
        assert entry.quote.price == 190.0
        assert entry.error == error.message

    def test_missing_price_marks_disconnected(self, cache):
        async def fetcher(symbol):
            return Quote(symbol=symbol, price=None)

        batcher = QuoteBatcher(fetcher, cache)
        asyncio.run(batcher.fetch_symbol("AAPL.US"))

        assert cache.get("AAPL.US").status == ConnectionStatus.DISCONNECTED

    def test_unexpected_error_settles_batch_and_continues(self, cache):
        requested, settled = [], []

        async def fetcher(symbol):
            requested.append(symbol)
            if symbol == "A":
                raise RuntimeError("parser exploded")
            await asyncio.sleep(0)
            settled.append(symbol)
            return Quote(symbol=symbol, price=2.0)

        batcher = QuoteBatcher(fetcher, cache, batch_size=3, sleep=_Sleeps())

        asyncio.run(batcher.poll_once(["A", "B", "C", "D"]))

        assert requested == ["A", "B", "C", "D"]
        assert settled == ["B", "C", "D"]
        assert cache.get("A").status == ConnectionStatus.DISCONNECTED
        assert cache.get("A").error == "parser exploded"
        assert not batcher.is_pending("A")


class TestQuotePoller:
    def test_cycle_publishes_quotes(self, cache):
        async def fetcher(symbols):
            return [Quote(symbol=s, price=1.5) for s in symbols]

        poller = QuotePoller(fetcher, cache)

        assert asyncio.run(poller.poll_once(["eurusd.forex"])) is True
        assert cache.get("EURUSD.FOREX").quote.price == 1.5

    def test_stale_cycle_result_is_discarded(self, cache):
        prices = iter([1.0, 2.0])

        async def scenario():
            gate = asyncio.Event()
            first_call = {"pending": True}

            async def fetcher(symbols):
                price = next(prices)
                if first_call["pending"]:
                    first_call["pending"] = False
                    await gate.wait()
                return [Quote(symbol=s, price=price) for s in symbols]

            poller = QuotePoller(fetcher, cache)
            stale = asyncio.create_task(poller._cycle(["EURUSD.FOREX"], poller.generation))
            await asyncio.sleep(0)

            fresh = await poller.poll_once(["EURUSD.FOREX"])
            gate.set()
            return fresh, await stale

        fresh, stale_applied = asyncio.run(scenario())

        assert fresh is True
        assert stale_applied is False
        assert cache.get("EURUSD.FOREX").quote.price == 2.0

    def test_new_cycle_cancels_previous(self, cache):
        async def scenario():
            async def fetcher(symbols):
                await asyncio.sleep(10)
                return []

            poller = QuotePoller(fetcher, cache)
            first = poller.trigger(["A"])
            second = poller.trigger(["A"])
            await asyncio.wait({first})
            cancelled = first.cancelled()
            second.cancel()
            await asyncio.wait({second})
            return cancelled, poller.generation

        cancelled, generation = asyncio.run(scenario())

        assert cancelled is True
        assert generation == 2

    def test_failure_marks_all_symbols(self, cache):
        cache.publish(Quote(symbol="A", price=1.0))

        async def fetcher(symbols):
            raise UpstreamRateLimitError("EODHD API error: 429", upstream_status=429)

        poller = QuotePoller(fetcher, cache)

        assert asyncio.run(poller.poll_once(["A", "B"])) is False
        assert cache.get("A").status == ConnectionStatus.DEGRADED
        assert cache.get("A").quote.price == 1.0
        assert cache.get("B").status == ConnectionStatus.DEGRADED

    def test_unexpected_error_marks_disconnected(self, cache):
        async def fetcher(symbols):
            raise KeyError("data")

        poller = QuotePoller(fetcher, cache)

        assert asyncio.run(poller.poll_once(["A"])) is False
        assert cache.get("A").status == ConnectionStatus.DISCONNECTED

    def test_pause_and_resume(self, cache):
        calls = []

        async def fetcher(symbols):
            calls.append(list(symbols))
            return [Quote(symbol=s, price=1.0) for s in symbols]

        async def scenario():
            poller = QuotePoller(fetcher, cache, interval=3600)
            poller.start(["A"])
            await asyncio.sleep(0.01)
            poller.pause()
            paused = poller.running
            poller.resume()
            await asyncio.sleep(0.01)
            resumed = poller.running
            await poller.stop()
            return paused, resumed, poller.running

        paused, resumed, stopped = asyncio.run(scenario())

        assert paused is False
        assert resumed is True
        assert stopped is False
        assert len(calls) == 2
