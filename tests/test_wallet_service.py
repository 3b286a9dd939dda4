"""
Tests for the wallet service: info, address validation, allowances, approvals.
"""
import pytest

from story_build.contracts import ROYALTY_MODULE, WIP_TOKEN_ADDRESS
from story_build.errors import ValidationError
from story_build.services import approve_token, check_allowance, get_wallet_info, validate_address
from story_build.units import MAX_UINT256

from conftest import address, reads

WEI = 10 ** 18


def _token_reads(allowance, balance=10 * WEI):
    return reads({
        "allowance": allowance,
        "balanceOf": balance,
        "symbol": "WIP",
        "decimals": 18,
        "name": "Wrapped IP",
    })


class TestGetWalletInfo:

    def test_reports_balance_and_network(self, agent):
        agent.web3.eth.get_balance.return_value = 1500000000000000000
        result = get_wallet_info(agent)
        assert result["wallet"]["address"] == agent.address
        assert result["wallet"]["balance"] == "1.5 IP"
        assert result["network"]["chain_id"] == 1315
        assert result["network"]["name"] == "aeneid"
        assert result["explorer_url"] == f"https://aeneid.storyscan.io/address/{agent.address}"


class TestValidateAddress:

    def test_checksummed_address(self):
        result = validate_address(address("ab"))
        assert result["is_valid"] is True
        assert result["checksum_address"] == address("ab")
        assert result["is_zero_address"] is False

    def test_lowercase_is_valid_without_checksum(self):
        result = validate_address("0x" + "ab" * 20)
        assert result["is_valid"] is True
        assert result["has_checksum"] is False
        assert result["checksum_address"] == address("ab")

    def test_wrong_checksum_is_invalid(self):
        good = address("ab")
        index = next(i for i, ch in enumerate(good) if i > 1 and ch.isalpha())
        bad = good[:index] + good[index].swapcase() + good[index + 1:]
        result = validate_address(bad)
        assert result["is_valid"] is False
        assert "checksum" in result["reason"]

    def test_zero_address(self):
        assert validate_address("0x" + "0" * 40)["is_zero_address"] is True

    def test_protocol_token(self):
        assert validate_address(WIP_TOKEN_ADDRESS)["is_protocol_token"] is True

    @pytest.mark.parametrize("value", ["", "0x1234", "hello", "0x" + "g" * 40])
    def test_malformed(self, value):
        result = validate_address(value)
        assert result["is_valid"] is False
        assert "reason" in result


class TestCheckAllowance:

    def test_zero_allowance_needs_approval(self, agent):
        agent.read.side_effect = _token_reads(0)
        result = check_allowance(agent, "wip", ROYALTY_MODULE.lower())
        details = result["allowance_details"]
        assert details["token_address"] == WIP_TOKEN_ADDRESS
        assert details["owner"] == agent.address
        assert details["is_zero"] is True
        assert result["contract_info"]["spender_is_royalty_module"] is True
        assert result["contract_info"]["is_story_protocol_token"] is True
        assert result["recommendations"][0] == "No allowance set - approval required"

    def test_unlimited_allowance(self, agent):
        agent.read.side_effect = _token_reads(MAX_UINT256)
        result = check_allowance(agent, WIP_TOKEN_ADDRESS, address("cd"))
        assert result["allowance_details"]["allowance"] == "Unlimited"
        assert result["balance_comparison"]["can_spend_full_balance"] is True

    def test_partial_allowance(self, agent):
        agent.read.side_effect = _token_reads(2 * WEI)
        result = check_allowance(agent, WIP_TOKEN_ADDRESS, address("cd"), owner=address("ef"))
        assert result["allowance_details"]["allowance"] == "2"
        assert result["allowance_details"]["owner"] == address("ef")
        assert result["contract_info"]["is_own_wallet"] is False
        assert result["recommendations"][0] == "Allowance is less than current balance"

    def test_bad_spender(self, agent):
        with pytest.raises(ValidationError, match="spender"):
            check_allowance(agent, "WIP", "royalty module")


class TestApproveToken:

    def test_existing_allowance_skips_transaction(self, agent):
        agent.read.side_effect = _token_reads(10 * WEI)
        result = approve_token(agent, "WIP", address("cd"), amount="1")
        assert result["approval_details"]["transaction_needed"] is False
        agent.simulate.assert_not_called()
        agent.transact.assert_not_called()

    def test_approves_amount_in_base_units(self, agent):
        allowances = iter([0, 3 * WEI])
        agent.read.side_effect = reads({"allowance": lambda *a: next(allowances), "symbol": "WIP"})

        result = approve_token(agent, "WIP", address("cd"), amount="3")

        agent.transact.assert_called_once()
        assert agent.transact.call_args.args[2:] == ("approve", address("cd"), 3 * WEI)
        assert result["approval_details"]["new_allowance"] == "3"
        assert result["approval_details"]["previous_allowance"] == "0"

    def test_unlimited_always_sends(self, agent):
        allowances = iter([10 * WEI, MAX_UINT256])
        agent.read.side_effect = reads({"allowance": lambda *a: next(allowances), "symbol": "WIP"})

        result = approve_token(agent, "WIP", address("cd"), unlimited=True)

        assert agent.transact.call_args.args[2:] == ("approve", address("cd"), MAX_UINT256)
        assert result["approval_details"]["new_allowance"] == "Unlimited"

    def test_amount_required(self, agent):
        with pytest.raises(ValidationError, match="amount"):
            approve_token(agent, "WIP", address("cd"))
