"""Hermes v2 client.

Endpoint: https://hermes.pyth.network/v2/updates/price/latest
Stream: https://hermes.pyth.network/v2/updates/price/stream (server-sent events)
Rate Limit: 30 requests / 10s per IP (no key required)
"""

import json
import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx

from ..PriceUpdate import PriceObservation, PriceUpdate
from .base import (
    FetchStrategy,
    OracleClient,
    OracleError,
    OracleHTTPError,
    encode_update_data,
    register_client,
    select_feed,
)

logger = logging.getLogger(__name__)


@register_client
class HermesClient(OracleClient):
    """Client for the Hermes v2 price update API.

    Returns parsed prices together with the accumulator update blobs
    accepted by the Pyth contract. Supports push subscription.
    """

    name = "hermes"
    strategy = FetchStrategy.HERMES

    LATEST_PATH = "/v2/updates/price/latest"
    STREAM_PATH = "/v2/updates/price/stream"

    async def fetch_update(self, price_id: str) -> PriceUpdate:
        """Fetch the latest price update from Hermes.

        :param price_id: Price feed id.
        :returns: PriceUpdate with hex-encoded update blobs.
        :raises OracleError: If the feed is missing or the response is malformed.
        """
        data = await self._get(
            self.LATEST_PATH,
            params={"ids[]": price_id, "encoding": "hex", "parsed": "true"},
        )
        if not isinstance(data, dict):
            raise OracleError("Unexpected response shape from Hermes")

        parsed = data.get("parsed") or []
        feed = select_feed(parsed, price_id)

        try:
            observation = PriceObservation.from_feed(feed)
        except (KeyError, ValueError, TypeError) as e:
            raise OracleError(f"Failed to parse price feed: {e}") from e

        return PriceUpdate(
            price_id=price_id,
            observation=observation,
            update_data=self._serialize(data, parsed),
            source=self.name,
        )

    @staticmethod
    def _serialize(data: dict[str, Any], parsed: list[dict[str, Any]]) -> list[str]:
        """Extract update blobs, preferring the response's binary block.

        :param data: Full response body.
        :param parsed: Parsed feed objects.
        :returns: List of 0x-prefixed hex blobs.
        :raises OracleError: If no update data is present.
        """
        binary = data.get("binary")
        if isinstance(binary, dict) and binary.get("data"):
            encoding = binary.get("encoding", "hex")
            return [encode_update_data(blob, encoding) for blob in binary["data"]]

        # Older deployments attach a base64 VAA to each feed instead
        vaas = [feed.get("vaa") for feed in parsed]
        if vaas and all(vaas):
            return [encode_update_data(vaa, "base64") for vaa in vaas]

        raise OracleError("Response carried no update data")

    @property
    def supports_subscription(self) -> bool:
        return True

    async def subscribe(self, price_id: str) -> AsyncIterator[PriceObservation]:
        """Stream observations from the Hermes server-sent event endpoint.

        :param price_id: Price feed id.
        :returns: Async iterator of observations, one per pushed update.
        :raises OracleError: If the stream cannot be opened or breaks.
        """
        url = f"{self.base_url}{self.STREAM_PATH}"
        params = {"ids[]": price_id, "parsed": "true", "encoding": "hex"}
        try:
            async with self.http.stream("GET", url, params=params, timeout=None) as response:
                if not response.is_success:
                    await response.aread()
                    raise OracleHTTPError(response.status_code, response.text[:200])

                async for line in response.aiter_lines():
                    if not line.startswith("data:"):
                        continue
                    try:
                        event = json.loads(line[len("data:"):])
                        feed = select_feed(event.get("parsed") or [], price_id)
                        yield PriceObservation.from_feed(feed)
                    except (KeyError, ValueError, TypeError, AttributeError, OracleError) as e:
                        logger.debug("[hermes] Skipping malformed stream event: %s", e)
        except httpx.TimeoutException as e:
            raise OracleError(f"Stream timeout: {e}") from e
        except httpx.RequestError as e:
            raise OracleError(f"Stream failed: {e}") from e
