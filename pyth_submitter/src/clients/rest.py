"""Hermes legacy REST client.

Endpoints:
    https://hermes.pyth.network/api/latest_price_feeds
    https://hermes.pyth.network/api/latest_vaas
Payload: base64 VAAs, converted to 0x-prefixed hex.
"""

import logging

from ..PriceUpdate import PriceObservation, PriceUpdate
from .base import (
    FetchStrategy,
    OracleClient,
    OracleError,
    encode_update_data,
    register_client,
    select_feed,
)

logger = logging.getLogger(__name__)


@register_client
class HermesRestClient(OracleClient):
    """Client for the legacy Hermes REST endpoints.

    Used as the fallback path: one call for the parsed price, a second one
    for the raw signed VAAs.
    """

    name = "hermes-rest"
    strategy = FetchStrategy.REST

    FEEDS_PATH = "/api/latest_price_feeds"
    VAAS_PATH = "/api/latest_vaas"

    async def fetch_observation(self, price_id: str) -> PriceObservation:
        """Fetch the latest observation without requesting VAAs.

        :param price_id: Price feed id.
        :returns: Latest PriceObservation.
        :raises OracleError: If no price data is available.
        """
        feeds = await self._get(self.FEEDS_PATH, params={"ids[]": price_id})
        if not isinstance(feeds, list) or not feeds:
            raise OracleError("No price data available from REST API")

        feed = select_feed(feeds, price_id)
        try:
            return PriceObservation.from_feed(feed)
        except (KeyError, ValueError, TypeError) as e:
            raise OracleError(f"Failed to parse price feed: {e}") from e

    async def fetch_update(self, price_id: str) -> PriceUpdate:
        """Fetch the latest observation and its signed VAAs.

        :param price_id: Price feed id.
        :returns: PriceUpdate with hex-encoded VAAs.
        :raises OracleError: If either request fails or returns no data.
        """
        observation = await self.fetch_observation(price_id)

        vaas = await self._get(self.VAAS_PATH, params={"ids[]": price_id})
        if not isinstance(vaas, list) or not vaas:
            raise OracleError("No VAA data available from REST API")

        update_data = [encode_update_data(vaa, "base64") for vaa in vaas]
        logger.debug("[hermes-rest] Received %d VAA(s) for %s", len(update_data), price_id)

        return PriceUpdate(
            price_id=price_id,
            observation=observation,
            update_data=update_data,
            source=self.name,
        )
