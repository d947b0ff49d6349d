"""Unit tests for PriceMonitor."""

import asyncio
import time

import pytest

from pyth_submitter.src.clients import OracleError
from pyth_submitter.src.PriceMonitor import PriceMonitor
from pyth_submitter.src.PriceUpdate import PriceObservation

PRICE_ID = "0xff61491a931112ddf1bd8147cd1b641375f79f5825126d665480874634fd0ace"

# Allowed overshoot past the configured duration
EPSILON = 0.25


def obs(price: int) -> PriceObservation:
    return PriceObservation(price=price, expo=-2, publish_time=1700000000)


class PollingClient:
    """Client without subscription; fails on selected calls."""

    name = "polling"
    supports_subscription = False

    def __init__(self, prices: list[int], fail_on: set[int] | None = None) -> None:
        self.prices = prices
        self.fail_on = fail_on or set()
        self.calls = 0

    async def fetch_observation(self, price_id: str) -> PriceObservation:
        index = self.calls
        self.calls += 1
        if index in self.fail_on:
            raise OracleError("HTTP 503: unavailable")
        return obs(self.prices[min(index, len(self.prices) - 1)])


class StreamingClient(PollingClient):
    """Client that pushes a fixed set of updates, then optionally breaks."""

    supports_subscription = True

    def __init__(self, pushed: list[int], break_after: bool = False, **kwargs) -> None:
        super().__init__(**kwargs)
        self.pushed = pushed
        self.break_after = break_after

    async def subscribe(self, price_id: str):
        for price in self.pushed:
            yield obs(price)
        if self.break_after:
            raise OracleError("Stream failed: connection reset")
        # Keep the stream open without further events
        await asyncio.Event().wait()


class TestPriceMonitorRecord:
    def test_first_sample_has_zero_change(self, caplog: pytest.LogCaptureFixture) -> None:
        monitor = PriceMonitor(PollingClient([1]), PRICE_ID, label="ETH/USD")

        with caplog.at_level("INFO"):
            change = monitor.record(obs(200000))

        assert change == 0.0
        assert "ETH/USD: $2000.00 (+0.00%)" in caplog.text

    def test_percent_change(self, caplog: pytest.LogCaptureFixture) -> None:
        monitor = PriceMonitor(PollingClient([1]), PRICE_ID)
        monitor.record(obs(200000))

        with caplog.at_level("INFO"):
            up = monitor.record(obs(220000))
            down = monitor.record(obs(198000))

        assert up == pytest.approx(10.0)
        assert down == pytest.approx(-10.0)
        assert "(+10.00%)" in caplog.text
        assert "(-10.00%)" in caplog.text
        assert monitor.price_count == 3

    def test_invalid_poll_interval(self) -> None:
        with pytest.raises(ValueError, match="poll_interval must be positive"):
            PriceMonitor(PollingClient([1]), PRICE_ID, poll_interval=0)


class TestPriceMonitorPolling:
    @pytest.mark.asyncio
    async def test_stops_within_duration(self) -> None:
        client = PollingClient([100, 101, 102])
        monitor = PriceMonitor(client, PRICE_ID, poll_interval=0.05)

        start = time.monotonic()
        count = await monitor.run(0.3)
        elapsed = time.monotonic() - start

        assert 0.3 - 0.01 <= elapsed < 0.3 + EPSILON
        assert count == client.calls
        assert count >= 3

    @pytest.mark.asyncio
    async def test_poll_failure_does_not_stop_loop(self, caplog: pytest.LogCaptureFixture) -> None:
        client = PollingClient([100, 101, 102, 103], fail_on={1})
        monitor = PriceMonitor(client, PRICE_ID, poll_interval=0.05)

        count = await monitor.run(0.3)

        assert client.calls >= 3
        assert count == client.calls - 1
        assert "Error fetching price: HTTP 503: unavailable" in caplog.text

    @pytest.mark.asyncio
    async def test_no_output_after_duration(self) -> None:
        client = PollingClient([100])
        monitor = PriceMonitor(client, PRICE_ID, poll_interval=0.05)

        await monitor.run(0.2)
        calls_at_stop = client.calls
        await asyncio.sleep(0.15)

        assert client.calls == calls_at_stop


class TestPriceMonitorSubscription:
    @pytest.mark.asyncio
    async def test_uses_subscription(self) -> None:
        client = StreamingClient(pushed=[100, 110, 121], prices=[999])
        monitor = PriceMonitor(client, PRICE_ID, poll_interval=0.05)

        count = await monitor.run(0.2)

        assert count == 3
        assert client.calls == 0
        assert monitor.last_price == pytest.approx(1.21)

    @pytest.mark.asyncio
    async def test_broken_stream_falls_back_to_polling(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        client = StreamingClient(pushed=[100], break_after=True, prices=[105])
        monitor = PriceMonitor(client, PRICE_ID, poll_interval=0.05)

        count = await monitor.run(0.2)

        assert client.calls >= 1
        assert count == 1 + client.calls
        assert "switching to polling" in caplog.text
