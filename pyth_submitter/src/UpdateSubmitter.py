"""UpdateSubmitter: Sends price updates to the consumer contract.

Failures are logged with a hint when a known pattern is recognized and
always re-raised; a failed submission is terminal.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .PriceUpdate import SubmissionReceipt, to_hex

if TYPE_CHECKING:
    from web3 import Web3
    from web3.contract import Contract

logger = logging.getLogger(__name__)

# Gas ceiling for fetchUSDPrice
DEFAULT_GAS_LIMIT = 500_000

FAILURE_HINTS: dict[str, str] = {
    "insufficient funds": (
        "You need more ETH in your wallet for gas fees and Pyth update fees."
    ),
    "execution reverted": (
        "The contract call failed. Check if the price data is valid "
        "or if you have enough ETH for fees."
    ),
}


def classify_failure(exc: BaseException) -> str | None:
    """Map a submission failure to a user-facing hint.

    :param exc: Exception raised while submitting.
    :returns: Hint text, or None if the failure is not recognized.
    """
    message = str(exc).lower()
    for pattern, hint in FAILURE_HINTS.items():
        if pattern in message:
            return hint
    return None


class UpdateSubmitter:
    """Submits update payloads to the consumer contract's fetchUSDPrice.

    :ivar w3: Web3 instance with signing middleware.
    :ivar contract: Consumer contract instance.
    :ivar sender: Address paying for the transaction.
    :ivar gas_limit: Fixed gas ceiling per transaction.
    """

    def __init__(
        self,
        w3: Web3,
        contract: Contract,
        sender: str,
        gas_limit: int = DEFAULT_GAS_LIMIT,
    ) -> None:
        self.w3 = w3
        self.contract = contract
        self.sender = sender
        self.gas_limit = gas_limit

    def submit(self, update_data: list[str], fee: int) -> SubmissionReceipt:
        """Send update_data with exactly fee wei attached and wait for the receipt.

        :param update_data: 0x-prefixed hex update blobs.
        :param fee: Update fee in wei, as returned by the fee query.
        :returns: Summary of the confirmed transaction.
        :raises RuntimeError: If the transaction was mined but reverted.
        """
        logger.info("Calling contract's fetchUSDPrice...")
        try:
            tx_params = self.contract.functions.fetchUSDPrice(update_data).build_transaction(
                {"from": self.sender, "value": fee, "gas": self.gas_limit}
            )

            logger.info("Sending transaction...")
            tx_hash = self.w3.eth.send_transaction(tx_params)
            logger.info(f"Transaction hash: {to_hex(tx_hash)}")
            logger.info("Waiting for confirmation...")

            tx_receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash)
            receipt = SubmissionReceipt.from_receipt(tx_receipt)
            if receipt.status != 1:
                raise RuntimeError(f"execution reverted in transaction {receipt.tx_hash}")
        except Exception as e:
            logger.error(f"Error calling contract method: {e}")
            hint = classify_failure(e)
            if hint:
                logger.info(f"Tip: {hint}")
            raise

        logger.info(f"Transaction confirmed in block {receipt.block_number}!")
        logger.info(f"Gas used: {receipt.gas_used}")
        return receipt

