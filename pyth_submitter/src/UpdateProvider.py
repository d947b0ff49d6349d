"""UpdateProvider: Price update acquisition with a single REST fallback."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .clients import OracleError

if TYPE_CHECKING:
    from .clients import OracleClient
    from .PriceUpdate import PriceUpdate

logger = logging.getLogger(__name__)


class UpdateProvider:
    """Fetches signed price updates from a primary client.

    If the primary client fails, the fallback client is tried exactly once.
    There is no retry beyond that.

    :ivar primary: Client selected at startup.
    :ivar fallback: Optional client used when the primary fails.
    """

    def __init__(
        self,
        primary: OracleClient,
        fallback: OracleClient | None = None,
    ) -> None:
        """Initialize the provider.

        :param primary: Primary oracle client.
        :param fallback: Fallback oracle client (None disables fallback).
        """
        self.primary = primary
        self.fallback = fallback

    async def get_update(self, price_id: str) -> PriceUpdate:
        """Fetch the latest update for a price feed.

        :param price_id: Price feed id.
        :returns: Freshly fetched PriceUpdate.
        :raises OracleError: If the primary and fallback paths both fail.
        """
        logger.info(f"Fetching latest price data via {self.primary.name}...")

        try:
            update = await self.primary.fetch_update(price_id)
        except OracleError as e:
            logger.error(f"Error fetching price data via {self.primary.name}: {e}")
            if self.fallback is None:
                raise

            logger.info(f"Trying alternative method using {self.fallback.name}...")
            try:
                update = await self.fallback.fetch_update(price_id)
            except OracleError as fallback_error:
                logger.error(f"REST API fallback failed: {fallback_error}")
                raise

        obs = update.observation
        logger.info(f"Current price: ${obs.decoded_price:.2f}")
        logger.info(f"Last updated: {obs.published_at:%Y-%m-%d %H:%M:%S} UTC")
        logger.info(
            f"Price update data ready via {update.source} "
            f"({len(update.update_data)} payload(s))"
        )
        return update
