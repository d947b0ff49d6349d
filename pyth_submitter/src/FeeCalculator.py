"""FeeCalculator: On-chain update fee query."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from web3 import Web3

if TYPE_CHECKING:
    from web3.contract import Contract

logger = logging.getLogger(__name__)


class FeeCalculator:
    """Queries the Pyth contract for the fee required by an update.

    :ivar pyth_contract: On-chain Pyth contract instance.
    """

    def __init__(self, pyth_contract: Contract) -> None:
        self.pyth_contract = pyth_contract

    def get_update_fee(self, update_data: list[str]) -> int:
        """Return the fee in wei the Pyth contract charges for update_data.

        Read-only call; failures propagate to the caller.

        :param update_data: 0x-prefixed hex update blobs.
        :returns: Fee in wei.
        """
        fee = int(self.pyth_contract.functions.getUpdateFee(update_data).call())
        logger.info(f"Update fee required: {Web3.from_wei(fee, 'ether')} ETH")
        return fee
