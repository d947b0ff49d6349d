"""ContractUtility: Web3 initialization, signing account and contract ABIs."""

import logging
from decimal import Decimal

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import Web3
from web3.contract import Contract
from web3.middleware import SignAndSendRawMiddlewareBuilder

logger = logging.getLogger(__name__)

# Consumer contract: constructor(address pythContract), fetchUSDPrice(bytes[]) payable
CONSUMER_ABI = [
    {
        "inputs": [
            {"internalType": "address", "name": "pythContract", "type": "address"},
        ],
        "stateMutability": "nonpayable",
        "type": "constructor",
    },
    {
        "inputs": [
            {"internalType": "bytes[]", "name": "priceUpdate", "type": "bytes[]"},
        ],
        "name": "fetchUSDPrice",
        "outputs": [],
        "stateMutability": "payable",
        "type": "function",
    },
]

PYTH_ABI = [
    {
        "inputs": [
            {"internalType": "bytes[]", "name": "updateData", "type": "bytes[]"},
        ],
        "name": "getUpdateFee",
        "outputs": [{"internalType": "uint256", "name": "feeAmount", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
]


class ContractUtility:
    """Utility for Web3 connection, signing and contract loading.

    :ivar rpc_url: Network RPC URL.
    :ivar account: Local signing account.
    :ivar w3: Web3 instance with the signing middleware installed.
    """

    def __init__(self, rpc_url: str, private_key: str, w3: Web3 | None = None) -> None:
        """Initialize the contract utility.

        :param rpc_url: JSON-RPC endpoint of the target network.
        :param private_key: Hex private key of the paying wallet.
        :param w3: Optional Web3 instance. Creates an HTTP one if not provided.
        """
        self.rpc_url = rpc_url
        self.account: LocalAccount = Account.from_key(private_key)

        self.w3 = w3 if w3 is not None else Web3(Web3.HTTPProvider(rpc_url))
        self.w3.middleware_onion.add(SignAndSendRawMiddlewareBuilder.build(self.account))
        self.w3.eth.default_account = self.account.address

    @property
    def address(self) -> str:
        """Checksummed wallet address."""
        return self.account.address

    def get_contract(self, address: str) -> Contract:
        """Load the consumer contract that accepts price updates.

        :param address: Deployed consumer contract address.
        :returns: Contract instance.
        """
        return self.w3.eth.contract(address=Web3.to_checksum_address(address), abi=CONSUMER_ABI)

    def get_pyth_contract(self, address: str) -> Contract:
        """Load the on-chain Pyth contract.

        :param address: Pyth contract address on the target network.
        :returns: Contract instance.
        """
        return self.w3.eth.contract(address=Web3.to_checksum_address(address), abi=PYTH_ABI)

    def get_balance(self) -> int:
        """Return the wallet balance in wei."""
        return self.w3.eth.get_balance(self.address)

    def check_balance(self, min_balance_eth: Decimal = Decimal("0.01")) -> int:
        """Log the wallet balance and warn when it is low.

        A low balance never stops execution.

        :param min_balance_eth: Threshold in ETH below which a warning is logged.
        :returns: Balance in wei.
        """
        balance = self.get_balance()
        balance_eth = Web3.from_wei(balance, "ether")
        logger.info(f"Wallet balance: {balance_eth} ETH")

        if balance_eth < min_balance_eth:
            logger.warning("Low balance! You might need more ETH for gas fees.")

        return balance
