"""
Tests for the token service: transfers, WIP wrapping, token info and balances.
"""
from unittest.mock import MagicMock

import pytest

from story_build.contracts import WIP_TOKEN_ADDRESS
from story_build.errors import ChainError, InsufficientBalanceError, ValidationError
from story_build.services import (
    get_account_balances,
    get_token_info,
    send_native,
    send_token,
    unwrap_wip,
    wrap_ip,
)

from conftest import TX_HASH, address, reads

WEI = 10 ** 18
TOKEN = address("77")
RECIPIENT = address("cd")


@pytest.fixture
def native_agent(agent):
    agent.get_balance = MagicMock(return_value=2 * WEI)
    agent.estimate_native_transfer = MagicMock(return_value={"gas": 21000, "gas_price": 10 ** 9})
    agent.send_native = MagicMock(return_value={
        "tx_hash": TX_HASH,
        "receipt": {"status": 1, "blockNumber": 5, "gasUsed": 21000},
    })
    return agent


class TestSendNative:

    def test_sends_with_estimated_gas(self, native_agent):
        result = send_native(native_agent, RECIPIENT.lower(), "0.5", memo="rent")

        native_agent.send_native.assert_called_once_with(RECIPIENT, WEI // 2, gas=21000, gas_price=10 ** 9)
        details = result["transfer_details"]
        assert details["amount"] == "0.5 IP"
        assert details["amount_wei"] == str(WEI // 2)
        assert details["total_cost"] == "0.500021 IP"
        assert details["memo"] == "rent"
        assert result["transaction_info"]["block_number"] == "5"

    def test_balance_below_amount(self, native_agent):
        with pytest.raises(InsufficientBalanceError, match="Available: 2 IP"):
            send_native(native_agent, RECIPIENT, 3)
        native_agent.send_native.assert_not_called()

    def test_balance_below_amount_plus_gas(self, native_agent):
        with pytest.raises(InsufficientBalanceError, match="plus gas"):
            send_native(native_agent, RECIPIENT, 2)
        native_agent.send_native.assert_not_called()

    def test_rejected_estimate_propagates(self, native_agent):
        native_agent.estimate_native_transfer.side_effect = ChainError("would fail")
        with pytest.raises(ChainError):
            send_native(native_agent, RECIPIENT, 1)

    @pytest.mark.parametrize("amount", [0, "0", -1, "abc"])
    def test_bad_amount_rejected_before_chain(self, native_agent, amount):
        native_agent.connect = MagicMock()
        with pytest.raises(ValidationError):
            send_native(native_agent, RECIPIENT, amount)
        native_agent.connect.assert_not_called()


class TestSendToken:

    def test_scales_by_token_decimals(self, agent):
        agent.read.side_effect = reads({"symbol": "USDC", "decimals": 6, "balanceOf": 10_000_000})

        result = send_token(agent, TOKEN, RECIPIENT, "2.5")

        assert agent.simulate.call_args.args[0] == TOKEN
        assert agent.simulate.call_args.args[2:] == ("transfer", RECIPIENT, 2_500_000)
        assert agent.transact.call_args.args[2:] == ("transfer", RECIPIENT, 2_500_000)
        assert result["transfer_details"]["amount"] == "2.5 USDC"
        assert result["token_info"]["is_story_protocol_token"] is False

    def test_wip_shortcut(self, agent):
        agent.read.side_effect = reads({"symbol": "WIP", "decimals": 18, "balanceOf": 5 * WEI})
        result = send_token(agent, "wip", RECIPIENT, 1)
        assert agent.transact.call_args.args[0] == WIP_TOKEN_ADDRESS
        assert result["token_info"]["is_story_protocol_token"] is True

    def test_insufficient_token_balance(self, agent):
        agent.read.side_effect = reads({"symbol": "WIP", "decimals": 18, "balanceOf": WEI // 2})
        with pytest.raises(InsufficientBalanceError, match="Insufficient WIP balance"):
            send_token(agent, "WIP", RECIPIENT, 1)
        agent.transact.assert_not_called()

    def test_too_many_decimals(self, agent):
        agent.read.side_effect = reads({"symbol": "USDC", "decimals": 6, "balanceOf": 10 ** 12})
        with pytest.raises(ValidationError, match="decimal places"):
            send_token(agent, TOKEN, RECIPIENT, "0.0000001")

    def test_bad_destination(self, agent):
        with pytest.raises(ValidationError, match="destination"):
            send_token(agent, TOKEN, "0x123", 1)
        agent.read.assert_not_called()


class TestWrapIp:

    def test_deposits_native_value(self, agent):
        agent.get_balance = MagicMock(return_value=3 * WEI)
        agent.read.side_effect = reads({"balanceOf": 4 * WEI})

        result = wrap_ip(agent, "1.5")

        assert agent.simulate.call_args.kwargs == {"value": 3 * WEI // 2}
        assert agent.transact.call_args.args[0] == WIP_TOKEN_ADDRESS
        assert agent.transact.call_args.args[2] == "deposit"
        assert agent.transact.call_args.kwargs == {"value": 3 * WEI // 2}
        assert result["wip_balance"] == "4 WIP"
        assert result["wrap_details"]["received"] == "1.5 WIP"

    def test_low_balance_refused(self, agent):
        agent.get_balance = MagicMock(return_value=WEI)
        with pytest.raises(InsufficientBalanceError, match="Insufficient IP balance"):
            wrap_ip(agent, 2)
        agent.transact.assert_not_called()

    def test_balance_check_can_be_skipped(self, agent):
        agent.get_balance = MagicMock(return_value=0)
        agent.read.side_effect = reads({"balanceOf": 2 * WEI})
        wrap_ip(agent, 2, check_balance=False)
        agent.transact.assert_called_once()


class TestUnwrapWip:

    def test_withdraws(self, agent):
        agent.read.side_effect = reads({"balanceOf": 5 * WEI})
        agent.get_balance = MagicMock(return_value=7 * WEI)

        result = unwrap_wip(agent, 2)

        assert agent.transact.call_args.args[2:] == ("withdraw", 2 * WEI)
        assert result["ip_balance"] == "7 IP"
        assert result["transaction_info"]["tx_hash"] == TX_HASH

    def test_low_wip_balance_refused(self, agent):
        agent.read.side_effect = reads({"balanceOf": WEI})
        with pytest.raises(InsufficientBalanceError, match="Insufficient WIP balance"):
            unwrap_wip(agent, 2)
        agent.transact.assert_not_called()


class TestGetTokenInfo:

    def _token_reads(self, balance):
        return reads({
            "name": "Wrapped IP",
            "symbol": "WIP",
            "decimals": 18,
            "totalSupply": 1000 * WEI,
            "balanceOf": balance,
        })

    def test_wip_holder(self, agent):
        agent.read.side_effect = self._token_reads(50 * WEI)
        agent.is_contract = MagicMock(return_value=True)

        result = get_token_info(agent, "WIP")

        assert result["token_metadata"]["total_supply"] == "1000"
        assert result["token_metadata"]["is_story_protocol_token"] is True
        assert result["account_balance"]["percentage_of_supply"] == "5.000000%"
        assert result["account_balance"]["supply_concentration"] == "significant_holder"
        assert result["account_balance"]["is_own_wallet"] is True
        assert result["can_use_for_licensing"] is True

    def test_other_account_without_balance(self, agent):
        agent.read.side_effect = self._token_reads(0)
        agent.is_contract = MagicMock(return_value=True)

        result = get_token_info(agent, TOKEN, account_address=RECIPIENT)

        assert result["account_balance"]["address"] == RECIPIENT
        assert result["account_balance"]["supply_concentration"] == "non_holder"
        assert result["account_balance"]["is_own_wallet"] is False
        assert result["can_use_for_licensing"] is False


class TestGetAccountBalances:

    def test_funded_wallet(self, agent):
        agent.get_balance = MagicMock(return_value=WEI)
        agent.read.side_effect = reads({"balanceOf": 3 * WEI})

        result = get_account_balances(agent)

        assert result["native_balance"]["balance"] == "1"
        assert result["wip_balance"]["balance"] == "3"
        assert result["summary"] == {"can_pay_gas": True, "can_pay_licensing_fees": True}
        assert result["next_steps"] == ["Ready to register IP assets and mint licenses"]

    def test_empty_account(self, agent):
        agent.get_balance = MagicMock(return_value=0)
        agent.read.side_effect = reads({"balanceOf": 0})

        result = get_account_balances(agent, RECIPIENT.lower())

        agent.get_balance.assert_called_once_with(RECIPIENT)
        assert result["account"]["is_own_wallet"] is False
        assert result["summary"]["can_pay_gas"] is False
        assert "Fund the wallet" in result["next_steps"][0]
