"""Unit tests for the PriceSubmitter workflow."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from pyth_submitter.src.clients import OracleError
from pyth_submitter.src.ContractUtility import ContractUtility
from pyth_submitter.src.PriceSubmitter import PriceSubmitter
from pyth_submitter.src.PriceUpdate import PriceObservation, PriceUpdate
from pyth_submitter.src.SubmitterConfig import SubmitterConfig
from pyth_submitter.src.UpdateProvider import UpdateProvider

TEST_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
CONSUMER = "0x1111111111111111111111111111111111111111"
UPDATE_DATA = ["0x504e4155abcd"]
FEE = 7


def make_config(**overrides) -> SubmitterConfig:
    values = {
        "rpc_url": "http://localhost:8545",
        "private_key": TEST_KEY,
        "contract_address": CONSUMER,
        "monitor_duration": 0,
    }
    values.update(overrides)
    return SubmitterConfig(**values)


def make_provider(**kwargs) -> UpdateProvider:
    update = PriceUpdate(
        price_id=SubmitterConfig.price_id,
        observation=PriceObservation(price=186247000000, expo=-8, publish_time=1700000000),
        update_data=list(UPDATE_DATA),
        source="hermes",
    )
    primary = MagicMock()
    primary.name = "hermes"
    primary.fetch_update = AsyncMock(return_value=update, **kwargs)
    return UpdateProvider(primary)


def make_w3(balance_wei: int) -> tuple[MagicMock, MagicMock, MagicMock]:
    """Web3 mock returning a Pyth contract, then a consumer contract."""
    pyth = MagicMock()
    pyth.functions.getUpdateFee.return_value.call.return_value = FEE
    consumer = MagicMock()
    consumer.functions.fetchUSDPrice.return_value.build_transaction.return_value = {}

    w3 = MagicMock()
    w3.eth.get_balance.return_value = balance_wei
    w3.eth.contract.side_effect = [pyth, consumer]
    w3.eth.send_transaction.return_value = b"\x01" * 32
    w3.eth.wait_for_transaction_receipt.return_value = {
        "transactionHash": b"\x01" * 32,
        "blockNumber": 10,
        "gasUsed": 90000,
        "status": 1,
    }
    return w3, pyth, consumer


class TestPriceSubmitterWorkflow:
    @pytest.mark.asyncio
    async def test_submits_fetched_payload_with_queried_fee(self) -> None:
        w3, pyth, consumer = make_w3(balance_wei=10**18)
        utility = ContractUtility("http://localhost:8545", TEST_KEY, w3=w3)
        submitter = PriceSubmitter(make_config(), contract_utility=utility, provider=make_provider())

        receipt = await submitter.run()

        pyth.functions.getUpdateFee.assert_called_once_with(UPDATE_DATA)
        consumer.functions.fetchUSDPrice.assert_called_once_with(UPDATE_DATA)
        tx = consumer.functions.fetchUSDPrice.return_value.build_transaction.call_args.args[0]
        assert tx["value"] == FEE
        assert tx["gas"] == 500_000
        assert tx["from"] == utility.address
        assert receipt.block_number == 10

    @pytest.mark.asyncio
    async def test_low_balance_continues(self, caplog: pytest.LogCaptureFixture) -> None:
        """A low balance warns but the update is still submitted."""
        w3, _, consumer = make_w3(balance_wei=10**15)
        utility = ContractUtility("http://localhost:8545", TEST_KEY, w3=w3)
        submitter = PriceSubmitter(make_config(), contract_utility=utility, provider=make_provider())

        await submitter.run()

        assert "Low balance" in caplog.text
        w3.eth.send_transaction.assert_called_once()
        consumer.functions.fetchUSDPrice.assert_called_once()

    @pytest.mark.asyncio
    async def test_fetch_failure_is_terminal(self) -> None:
        w3, pyth, _ = make_w3(balance_wei=10**18)
        utility = ContractUtility("http://localhost:8545", TEST_KEY, w3=w3)
        provider = make_provider(side_effect=OracleError("No price feeds available"))
        submitter = PriceSubmitter(make_config(), contract_utility=utility, provider=provider)

        with pytest.raises(OracleError):
            await submitter.run()

        pyth.functions.getUpdateFee.assert_not_called()
        w3.eth.send_transaction.assert_not_called()

    @pytest.mark.asyncio
    async def test_monitor_runs_after_submission(self) -> None:
        w3, _, _ = make_w3(balance_wei=10**18)
        utility = ContractUtility("http://localhost:8545", TEST_KEY, w3=w3)
        submitter = PriceSubmitter(
            make_config(monitor_duration=12), contract_utility=utility, provider=make_provider()
        )

        with patch.object(PriceSubmitter, "monitor", AsyncMock(return_value=2)) as monitor:
            await submitter.run()

        monitor.assert_awaited_once_with(12)

    @pytest.mark.asyncio
    async def test_shared_client_closed(self) -> None:
        w3, _, _ = make_w3(balance_wei=10**18)
        utility = ContractUtility("http://localhost:8545", TEST_KEY, w3=w3)
        submitter = PriceSubmitter(make_config(), contract_utility=utility, provider=make_provider())

        with patch(
            "pyth_submitter.src.PriceSubmitter.OracleClient.close_shared_client",
            new_callable=AsyncMock,
        ) as close:
            await submitter.run()

        close.assert_awaited_once()
