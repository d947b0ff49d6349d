"""PriceUpdate: Price observations and signed update payloads.

A Hermes feed object looks like::

    {
        "id": "ff61491a...",
        "price": {"price": "186247000000", "conf": "93000000",
                  "expo": -8, "publish_time": 1700000000},
    }

.. code-block:: python

    >>> obs = PriceObservation.from_feed(feed)
    >>> obs.decoded_price
    1862.47
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


def normalize_price_id(price_id: str) -> str:
    """Strip the 0x prefix and lowercase a price feed id.

    :param price_id: Feed id with or without 0x prefix.
    :returns: Bare lowercase hex id.
    """
    price_id = price_id.strip().lower()
    return price_id[2:] if price_id.startswith("0x") else price_id


def to_hex(value: bytes | str) -> str:
    """Render a transaction hash as a 0x-prefixed hex string."""
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    return str(value)


@dataclass(frozen=True)
class PriceObservation:
    """A single price observation published by the oracle network.

    :ivar price: Raw integer price.
    :ivar expo: Base-10 exponent applied to price and conf.
    :ivar publish_time: Unix timestamp of publication.
    :ivar conf: Raw confidence interval.
    """

    price: int
    expo: int
    publish_time: int
    conf: int = 0

    @property
    def decoded_price(self) -> float:
        """Human-readable price (price * 10^expo)."""
        return self.price * 10 ** self.expo

    @property
    def published_at(self) -> datetime:
        """Publish time as a UTC datetime."""
        return datetime.fromtimestamp(self.publish_time, tz=timezone.utc)

    @classmethod
    def from_feed(cls, feed: dict[str, Any]) -> PriceObservation:
        """Build an observation from a Hermes price feed object.

        :param feed: Feed dict carrying a "price" sub-object.
        :returns: New PriceObservation.
        :raises KeyError: If required fields are missing.
        :raises ValueError: If numeric fields cannot be parsed.
        """
        price = feed["price"]
        return cls(
            price=int(price["price"]),
            expo=int(price["expo"]),
            publish_time=int(price["publish_time"]),
            conf=int(price.get("conf", 0)),
        )


@dataclass
class PriceUpdate:
    """Signed update payload together with the observation it attests.

    :ivar price_id: Feed id the update was fetched for.
    :ivar observation: Decoded observation for logging.
    :ivar update_data: 0x-prefixed hex blobs passed unmodified to the contracts.
    :ivar source: Name of the client that produced the update.
    """

    price_id: str
    observation: PriceObservation
    update_data: list[str] = field(default_factory=list)
    source: str = ""

    def __post_init__(self) -> None:
        if not self.update_data:
            raise ValueError("update_data must contain at least one payload")
        for blob in self.update_data:
            if not blob.startswith("0x") or len(blob) <= 2:
                raise ValueError(f"Invalid update payload: {blob[:16]!r}")


@dataclass(frozen=True)
class SubmissionReceipt:
    """Summary of a confirmed update transaction."""

    tx_hash: str
    block_number: int
    gas_used: int
    status: int

    @classmethod
    def from_receipt(cls, receipt: Any) -> SubmissionReceipt:
        """Build a summary from a web3 transaction receipt."""
        return cls(
            tx_hash=to_hex(receipt["transactionHash"]),
            block_number=int(receipt["blockNumber"]),
            gas_used=int(receipt["gasUsed"]),
            status=int(receipt["status"]),
        )
