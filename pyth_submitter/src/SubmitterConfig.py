"""SubmitterConfig: Configuration from environment variables and .env files."""

from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from dotenv import load_dotenv
from web3 import Web3

from .clients import DEFAULT_HERMES_URL, FetchStrategy

DEFAULT_RPC_URL = "https://sepolia.infura.io/v3/YOUR_INFURA_KEY"
CONTRACT_ADDRESS_PLACEHOLDER = "0x..."

# Pyth contract on Sepolia
DEFAULT_PYTH_CONTRACT_ADDRESS = "0xDd24F84d36BF92C65F92307595335bdFab5Bbd21"

ETH_USD_PRICE_ID = "0xff61491a931112ddf1bd8147cd1b641375f79f5825126d665480874634fd0ace"


class ConfigError(ValueError):
    """Raised when required configuration is missing or invalid."""

    pass


def _is_placeholder(value: str) -> bool:
    return not value or value == CONTRACT_ADDRESS_PLACEHOLDER or "your_" in value.lower()


@dataclass
class SubmitterConfig:
    """Runtime configuration.

    :ivar rpc_url: JSON-RPC endpoint of the target network.
    :ivar private_key: Private key of the paying wallet.
    :ivar contract_address: Deployed consumer contract address.
    :ivar pyth_address: Pyth contract address on the target network.
    :ivar price_id: Price feed id to fetch.
    :ivar price_label: Display label for the feed.
    :ivar hermes_url: Price service base URL.
    :ivar strategy: Primary fetch strategy.
    :ivar gas_limit: Gas ceiling for the update transaction.
    :ivar min_balance_eth: Balance threshold below which a warning is logged.
    :ivar monitor_duration: Seconds of price monitoring after submission (0 disables).
    :ivar poll_interval: Seconds between monitor polls.
    """

    rpc_url: str = DEFAULT_RPC_URL
    private_key: str = ""
    contract_address: str = CONTRACT_ADDRESS_PLACEHOLDER
    pyth_address: str = DEFAULT_PYTH_CONTRACT_ADDRESS
    price_id: str = ETH_USD_PRICE_ID
    price_label: str = "ETH/USD"
    hermes_url: str = DEFAULT_HERMES_URL
    strategy: FetchStrategy = FetchStrategy.HERMES
    gas_limit: int = 500_000
    min_balance_eth: Decimal = Decimal("0.01")
    monitor_duration: float = 30.0
    poll_interval: float = 5.0

    @classmethod
    def from_env(cls) -> SubmitterConfig:
        """Create a config instance from environment variables.

        Values from a local .env file are loaded first; variables already
        set in the environment take precedence.

        :returns: New SubmitterConfig.
        :raises ConfigError: If a value cannot be parsed.
        """
        load_dotenv()

        try:
            return cls(
                rpc_url=os.environ.get("SEPOLIA_RPC_URL") or os.environ.get("RPC_URL") or DEFAULT_RPC_URL,
                private_key=os.environ.get("PRIVATE_KEY", ""),
                contract_address=os.environ.get("CONTRACT_ADDRESS") or CONTRACT_ADDRESS_PLACEHOLDER,
                pyth_address=os.environ.get("PYTH_CONTRACT_ADDRESS") or DEFAULT_PYTH_CONTRACT_ADDRESS,
                price_id=os.environ.get("PRICE_FEED_ID") or ETH_USD_PRICE_ID,
                price_label=os.environ.get("PRICE_LABEL") or "ETH/USD",
                hermes_url=os.environ.get("HERMES_URL") or DEFAULT_HERMES_URL,
                strategy=FetchStrategy((os.environ.get("ORACLE_STRATEGY") or "hermes").lower()),
                gas_limit=int(os.environ.get("GAS_LIMIT") or "500000"),
                min_balance_eth=Decimal(os.environ.get("MIN_BALANCE_ETH") or "0.01"),
                monitor_duration=float(os.environ.get("MONITOR_DURATION") or "30"),
                poll_interval=float(os.environ.get("POLL_INTERVAL") or "5"),
            )
        except (ValueError, InvalidOperation) as e:
            raise ConfigError(f"Invalid configuration value: {e}") from e

    def validate(self, require_contract: bool = True) -> None:
        """Check that required values are present and not placeholders.

        :param require_contract: Whether the consumer contract address is needed.
        :raises ConfigError: On the first invalid value found.
        """
        if _is_placeholder(self.rpc_url):
            raise ConfigError("Please set SEPOLIA_RPC_URL in .env file or environment variable")

        if _is_placeholder(self.private_key):
            raise ConfigError("Please set your PRIVATE_KEY in .env file or environment variable")

        if require_contract:
            if _is_placeholder(self.contract_address):
                raise ConfigError("Please set your deployed CONTRACT_ADDRESS")
            if not Web3.is_address(self.contract_address):
                raise ConfigError(f"CONTRACT_ADDRESS is not a valid address: {self.contract_address}")

        if self.gas_limit <= 0:
            raise ConfigError("GAS_LIMIT must be positive")

        if self.monitor_duration < 0:
            raise ConfigError("MONITOR_DURATION must not be negative")

        if self.poll_interval <= 0:
            raise ConfigError("POLL_INTERVAL must be positive")
