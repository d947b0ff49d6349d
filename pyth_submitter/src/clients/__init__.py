"""
Price service clients for the Pyth oracle network.

Usage:
    from pyth_submitter.src.clients import FetchStrategy, get_client

    client = get_client(FetchStrategy.HERMES, base_url="https://hermes.pyth.network")
    update = await client.fetch_update(price_id)
"""

# Import base classes and utilities
from .base import (
    CLIENT_REGISTRY,
    DEFAULT_HERMES_URL,
    FetchStrategy,
    OracleClient,
    OracleError,
    OracleHTTPError,
    encode_update_data,
    get_available_strategies,
    get_client,
    register_client,
)

# Import all client implementations to trigger registration
from .hermes import HermesClient
from .rest import HermesRestClient

__all__ = [
    # Base classes
    "OracleClient",
    "OracleError",
    "OracleHTTPError",
    "FetchStrategy",
    "DEFAULT_HERMES_URL",
    "encode_update_data",
    # Registry functions
    "register_client",
    "get_client",
    "get_available_strategies",
    "CLIENT_REGISTRY",
    # Client implementations
    "HermesClient",
    "HermesRestClient",
]
