"""PriceSubmitter: Main orchestrator for fetching and submitting price updates.

Workflow:
    - Check the wallet balance (warn only)
    - Fetch the latest signed update (primary client, single REST fallback)
    - Query the update fee from the Pyth contract
    - Submit the update with exactly that fee and wait for confirmation
    - Optionally monitor the price for a bounded duration
"""

from __future__ import annotations

import logging

from .clients import FetchStrategy, OracleClient, get_client
from .ContractUtility import ContractUtility
from .FeeCalculator import FeeCalculator
from .PriceMonitor import PriceMonitor
from .PriceUpdate import SubmissionReceipt
from .SubmitterConfig import SubmitterConfig
from .UpdateProvider import UpdateProvider
from .UpdateSubmitter import UpdateSubmitter

logger = logging.getLogger(__name__)


def create_provider(config: SubmitterConfig) -> UpdateProvider:
    """Build the update provider for the configured strategy.

    The REST client serves as fallback unless it is already the primary.

    :param config: Runtime configuration.
    :returns: Configured UpdateProvider.
    """
    primary = get_client(config.strategy, base_url=config.hermes_url)
    fallback = None
    if primary.strategy != FetchStrategy.REST:
        fallback = get_client(FetchStrategy.REST, base_url=config.hermes_url)
    return UpdateProvider(primary, fallback)


class PriceSubmitter:
    """Orchestrates one fetch-and-submit cycle plus optional monitoring.

    :ivar config: Runtime configuration.
    :ivar contract_utility: Web3 connection and signing account.
    :ivar provider: Update provider with fallback.
    :ivar fee_calculator: Pyth fee query.
    :ivar submitter: Consumer contract submitter.
    """

    def __init__(
        self,
        config: SubmitterConfig,
        contract_utility: ContractUtility | None = None,
        provider: UpdateProvider | None = None,
    ) -> None:
        """Initialize the price submitter.

        :param config: Validated runtime configuration.
        :param contract_utility: Optional pre-built contract utility.
        :param provider: Optional pre-built update provider.
        """
        self.config = config
        self.contract_utility = contract_utility or ContractUtility(
            config.rpc_url, config.private_key
        )
        self.provider = provider or create_provider(config)

        self.fee_calculator = FeeCalculator(
            self.contract_utility.get_pyth_contract(config.pyth_address)
        )
        self.submitter = UpdateSubmitter(
            w3=self.contract_utility.w3,
            contract=self.contract_utility.get_contract(config.contract_address),
            sender=self.contract_utility.address,
            gas_limit=config.gas_limit,
        )

        logger.info("Script initialized!")
        logger.info(f"Wallet address: {self.contract_utility.address}")
        logger.info(f"Contract address: {config.contract_address}")

    @property
    def monitor_client(self) -> OracleClient:
        """Client used for monitoring (the primary client)."""
        return self.provider.primary

    def check_balance(self) -> int:
        """Log the wallet balance, warning when below the threshold.

        :returns: Balance in wei.
        """
        logger.info("Checking wallet balance...")
        return self.contract_utility.check_balance(self.config.min_balance_eth)

    async def submit_latest(self) -> SubmissionReceipt:
        """Fetch a fresh update, pay its fee and submit it.

        :returns: Summary of the confirmed transaction.
        """
        update = await self.provider.get_update(self.config.price_id)
        fee = self.fee_calculator.get_update_fee(update.update_data)
        return self.submitter.submit(update.update_data, fee)

    async def monitor(self, duration: float) -> int:
        """Monitor the configured price feed for duration seconds.

        :param duration: Seconds to monitor.
        :returns: Number of samples received.
        """
        monitor = PriceMonitor(
            client=self.monitor_client,
            price_id=self.config.price_id,
            label=self.config.price_label,
            poll_interval=self.config.poll_interval,
        )
        return await monitor.run(duration)

    async def run(self) -> SubmissionReceipt:
        """Run the full workflow.

        :returns: Summary of the submitted transaction.
        """
        try:
            self.check_balance()
            receipt = await self.submit_latest()

            if self.config.monitor_duration > 0:
                await self.monitor(self.config.monitor_duration)

            return receipt
        finally:
            # Clean up shared HTTP client
            await OracleClient.close_shared_client()
