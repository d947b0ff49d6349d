"""Base oracle client interface and shared HTTP client management.

All oracle clients inherit from OracleClient and implement fetch_update().
A shared httpx.AsyncClient is used across all clients to avoid connection
overhead; tests and callers may inject their own client instead.

Clients are registered per FetchStrategy so that the fetch path is picked
once at startup from configuration:

.. code-block:: python

    @register_client
    class MyClient(OracleClient):
        name = "myclient"
        strategy = FetchStrategy.REST

        async def fetch_update(self, price_id: str) -> PriceUpdate:
            response = await self._get("/latest", params={"id": price_id})
            ...
"""

import base64
import binascii
import enum
import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from typing import Any, ClassVar

import httpx

from ..PriceUpdate import PriceObservation, PriceUpdate, normalize_price_id

logger = logging.getLogger(__name__)

DEFAULT_HERMES_URL = "https://hermes.pyth.network"


class FetchStrategy(str, enum.Enum):
    """How update payloads are obtained from the price service."""

    HERMES = "hermes"
    REST = "rest"


class OracleError(Exception):
    """Base exception for oracle client errors."""

    pass


class OracleHTTPError(OracleError):
    """Raised when an HTTP request to the price service fails.

    :ivar status_code: HTTP status code from the failed request.
    """

    def __init__(self, status_code: int, message: str):
        """Initialize the HTTP error.

        :param status_code: HTTP status code.
        :param message: Error message from response.
        """
        self.status_code = status_code
        super().__init__(f"HTTP {status_code}: {message}")


def encode_update_data(blob: str, encoding: str = "hex") -> str:
    """Convert an update blob into the 0x-prefixed hex form contracts accept.

    :param blob: Blob as returned by the price service.
    :param encoding: "hex" or "base64".
    :returns: 0x-prefixed hex string.
    :raises OracleError: If the blob is empty or cannot be decoded.
    """
    if not blob:
        raise OracleError("Empty update payload")

    if encoding == "hex":
        raw = blob[2:] if blob.startswith("0x") else blob
        try:
            bytes.fromhex(raw)
        except ValueError as e:
            raise OracleError(f"Invalid hex update payload: {e}") from e
        return "0x" + raw.lower()

    if encoding == "base64":
        try:
            return "0x" + base64.b64decode(blob, validate=True).hex()
        except (binascii.Error, ValueError) as e:
            raise OracleError(f"Invalid base64 update payload: {e}") from e

    raise OracleError(f"Unsupported payload encoding: {encoding}")


def select_feed(feeds: Any, price_id: str) -> dict[str, Any]:
    """Pick the feed matching price_id out of a Hermes feed list.

    :param feeds: List of feed dicts.
    :param price_id: Requested feed id.
    :returns: Matching feed dict.
    :raises OracleError: If no feed matches.
    """
    if not isinstance(feeds, list) or not feeds:
        raise OracleError("No price feeds available")

    wanted = normalize_price_id(price_id)
    for feed in feeds:
        if isinstance(feed, dict) and normalize_price_id(str(feed.get("id", ""))) == wanted:
            return feed
    raise OracleError(f"No price feed for {price_id} in response")


class OracleClient(ABC):
    """Abstract base class for price service clients.

    Subclasses must implement:
        - name: Class variable identifying the client
        - strategy: FetchStrategy this client implements
        - fetch_update(): Async method returning a PriceUpdate

    :cvar name: Unique identifier for this client.
    :cvar strategy: Fetch strategy this client implements.
    :cvar DEFAULT_TIMEOUT: Default HTTP request timeout in seconds.
    :ivar base_url: Price service base URL.
    :ivar timeout: Request timeout in seconds.
    """

    # Class-level shared HTTP client
    _shared_client: ClassVar[httpx.AsyncClient | None] = None

    name: ClassVar[str] = ""
    strategy: ClassVar[FetchStrategy]

    DEFAULT_TIMEOUT = 10.0

    def __init__(
        self,
        base_url: str = DEFAULT_HERMES_URL,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the client.

        :param base_url: Price service base URL.
        :param timeout: Request timeout in seconds (default: 10).
        :param client: Optional HTTP client used instead of the shared one.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout or self.DEFAULT_TIMEOUT
        self._client = client

    @classmethod
    def get_shared_client(cls) -> httpx.AsyncClient:
        """Get or create the shared HTTP client.

        :returns: Shared httpx.AsyncClient instance.
        """
        if cls._shared_client is None or cls._shared_client.is_closed:
            cls._shared_client = httpx.AsyncClient(
                timeout=httpx.Timeout(30.0, connect=10.0),
                follow_redirects=True,
            )
        return cls._shared_client

    @classmethod
    async def close_shared_client(cls) -> None:
        """Close the shared HTTP client."""
        if cls._shared_client is not None and not cls._shared_client.is_closed:
            await cls._shared_client.aclose()
            cls._shared_client = None

    @property
    def http(self) -> httpx.AsyncClient:
        """HTTP client used for requests."""
        return self._client if self._client is not None else self.get_shared_client()

    @abstractmethod
    async def fetch_update(self, price_id: str) -> PriceUpdate:
        """Fetch the latest signed update for a price feed.

        :param price_id: Price feed id (hex, 0x prefix optional).
        :returns: PriceUpdate with observation and payload.
        :raises OracleError: If the update cannot be obtained.
        """
        pass

    async def fetch_observation(self, price_id: str) -> PriceObservation:
        """Fetch only the latest observation for a price feed.

        Default implementation derives it from fetch_update().

        :param price_id: Price feed id.
        :returns: Latest PriceObservation.
        """
        update = await self.fetch_update(price_id)
        return update.observation

    @property
    def supports_subscription(self) -> bool:
        """Whether subscribe() streams pushed updates.

        :returns: True if push subscription is available.
        """
        return False

    async def subscribe(self, price_id: str) -> AsyncIterator[PriceObservation]:
        """Stream observations pushed by the price service.

        :param price_id: Price feed id.
        :raises NotImplementedError: If the client has no push channel.
        """
        raise NotImplementedError(f"{self.name} does not support subscriptions")
        yield  # pragma: no cover

    async def _get(
        self,
        path: str,
        *,
        params: dict | None = None,
    ) -> Any:
        """Make an HTTP GET request and decode the JSON body.

        :param path: Path relative to base_url.
        :param params: Optional query parameters.
        :returns: Decoded JSON body.
        :raises OracleHTTPError: On non-2xx response.
        :raises OracleError: On network/timeout errors or invalid JSON.
        """
        url = f"{self.base_url}{path}"
        try:
            response = await self.http.get(url, params=params, timeout=self.timeout)
        except httpx.TimeoutException as e:
            raise OracleError(f"Request timeout: {e}") from e
        except httpx.RequestError as e:
            raise OracleError(f"Request failed: {e}") from e

        if not response.is_success:
            logger.debug(
                "HTTP GET %s failed with status %s: %s",
                url,
                response.status_code,
                response.text[:200],
            )
            raise OracleHTTPError(response.status_code, response.text[:200])

        try:
            return response.json()
        except ValueError as e:
            raise OracleError(f"Invalid JSON from {path}: {e}") from e


# Registry of available clients (populated by subclass imports)
CLIENT_REGISTRY: dict[FetchStrategy, type[OracleClient]] = {}


def register_client(cls: type[OracleClient]) -> type[OracleClient]:
    """Decorator to register a client class for its fetch strategy.

    :param cls: Client class to register.
    :returns: The registered class (unchanged).
    :raises ValueError: If the client has no name or strategy defined.
    """
    if not cls.name or not hasattr(cls, "strategy"):
        raise ValueError(f"Client {cls.__name__} must define 'name' and 'strategy'")
    CLIENT_REGISTRY[cls.strategy] = cls
    return cls


def get_client(
    strategy: FetchStrategy | str,
    base_url: str = DEFAULT_HERMES_URL,
    client: httpx.AsyncClient | None = None,
) -> OracleClient:
    """Get a client instance for a fetch strategy.

    :param strategy: FetchStrategy or its string value.
    :param base_url: Price service base URL.
    :param client: Optional HTTP client to inject.
    :returns: Client instance.
    :raises ValueError: If the strategy is unknown.
    """
    try:
        strategy = FetchStrategy(strategy)
    except ValueError:
        available = ", ".join(get_available_strategies())
        raise ValueError(f"Unknown strategy '{strategy}'. Available: {available}") from None
    if strategy not in CLIENT_REGISTRY:
        raise ValueError(f"No client registered for strategy '{strategy.value}'")
    return CLIENT_REGISTRY[strategy](base_url=base_url, client=client)


def get_available_strategies() -> list[str]:
    """Get list of registered strategy names.

    :returns: Sorted list of strategy values.
    """
    return sorted(s.value for s in CLIENT_REGISTRY)
