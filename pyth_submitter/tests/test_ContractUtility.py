"""Unit tests for ContractUtility."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from pyth_submitter.src.ContractUtility import CONSUMER_ABI, PYTH_ABI, ContractUtility

# Well-known local development key
TEST_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TEST_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"


def make_utility(balance_wei: int = 0) -> tuple[ContractUtility, MagicMock]:
    w3 = MagicMock()
    w3.eth.get_balance.return_value = balance_wei
    return ContractUtility("http://localhost:8545", TEST_KEY, w3=w3), w3


class TestContractUtilityInit:
    def test_account_and_middleware(self) -> None:
        """Signing middleware is installed and default account set."""
        utility, w3 = make_utility()

        assert utility.address == TEST_ADDRESS
        assert w3.eth.default_account == TEST_ADDRESS
        w3.middleware_onion.add.assert_called_once()

    def test_invalid_key(self) -> None:
        with pytest.raises(ValueError):
            ContractUtility("http://localhost:8545", "0x1234", w3=MagicMock())

    def test_contracts_use_checksum_addresses(self) -> None:
        utility, w3 = make_utility()

        utility.get_contract("0xdd24f84d36bf92c65f92307595335bdfab5bbd21")
        utility.get_pyth_contract("0xdd24f84d36bf92c65f92307595335bdfab5bbd21")

        consumer_call, pyth_call = w3.eth.contract.call_args_list
        assert consumer_call.kwargs == {
            "address": "0xDd24F84d36BF92C65F92307595335bdFab5Bbd21",
            "abi": CONSUMER_ABI,
        }
        assert pyth_call.kwargs["abi"] == PYTH_ABI


class TestCheckBalance:
    def test_low_balance_warns_and_continues(self, caplog: pytest.LogCaptureFixture) -> None:
        """Below 0.01 ETH a warning is logged but nothing is raised."""
        utility, w3 = make_utility(balance_wei=5 * 10**15)

        balance = utility.check_balance(Decimal("0.01"))

        assert balance == 5 * 10**15
        w3.eth.get_balance.assert_called_once_with(TEST_ADDRESS)
        warnings = [r for r in caplog.records if r.levelname == "WARNING"]
        assert len(warnings) == 1
        assert "Low balance" in warnings[0].getMessage()

    def test_sufficient_balance_no_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        utility, _ = make_utility(balance_wei=10**18)

        with caplog.at_level("INFO"):
            utility.check_balance(Decimal("0.01"))

        assert "Wallet balance: 1 ETH" in caplog.text
        assert not [r for r in caplog.records if r.levelname == "WARNING"]

    def test_threshold_is_exclusive(self, caplog: pytest.LogCaptureFixture) -> None:
        utility, _ = make_utility(balance_wei=10**16)
        utility.check_balance(Decimal("0.01"))
        assert "Low balance" not in caplog.text
