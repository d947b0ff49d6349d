"""PriceMonitor: Bounded-duration price change reporting.

Uses the client's push subscription when available, otherwise polls at a
fixed interval. Monitoring has no effect on submission.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .clients import OracleClient
    from .PriceUpdate import PriceObservation

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 5.0


class PriceMonitor:
    """Reports price changes for a single feed for a fixed wall-clock duration.

    :ivar client: Oracle client used for polling or subscription.
    :ivar price_id: Price feed id being monitored.
    :ivar label: Display label (e.g., "ETH/USD").
    :ivar poll_interval: Seconds between polls when not subscribed.
    :ivar price_count: Samples received during the last run.
    :ivar last_price: Most recent decoded price, or None before the first sample.
    """

    def __init__(
        self,
        client: OracleClient,
        price_id: str,
        label: str = "ETH/USD",
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")

        self.client = client
        self.price_id = price_id
        self.label = label
        self.poll_interval = poll_interval
        self.price_count = 0
        self.last_price: float | None = None

    async def run(self, duration: float) -> int:
        """Monitor prices for duration seconds.

        :param duration: Wall-clock duration in seconds.
        :returns: Number of price samples received.
        """
        self.price_count = 0
        self.last_price = None

        logger.info("Starting price monitoring...")
        logger.info(f"Will monitor for {duration:g} seconds")

        try:
            await asyncio.wait_for(self._consume(), timeout=duration)
        except asyncio.TimeoutError:
            pass

        logger.info(f"Monitoring stopped. Received {self.price_count} price updates.")
        return self.price_count

    async def _consume(self) -> None:
        """Consume the subscription, then poll until cancelled."""
        if self.client.supports_subscription:
            try:
                async for observation in self.client.subscribe(self.price_id):
                    self.record(observation)
                logger.warning("Price subscription ended, switching to polling")
            except Exception as e:
                logger.warning(f"Price subscription failed ({e}), switching to polling")
        else:
            logger.info("Using manual price polling...")

        await self._poll_forever()

    async def _poll_forever(self) -> None:
        while True:
            try:
                observation = await self.client.fetch_observation(self.price_id)
                self.record(observation)
            except Exception as e:
                logger.warning(f"Error fetching price: {e}")
            await asyncio.sleep(self.poll_interval)

    def record(self, observation: PriceObservation) -> float:
        """Log a sample and its change against the previous one.

        :param observation: Newly received observation.
        :returns: Percent change vs the previous sample (0.0 for the first).
        """
        price = observation.decoded_price
        change = 0.0
        if self.last_price:
            change = (price - self.last_price) / self.last_price * 100

        self.price_count += 1
        self.last_price = price
        logger.info(f"{self.label}: ${price:.2f} ({change:+.2f}%)")
        return change
