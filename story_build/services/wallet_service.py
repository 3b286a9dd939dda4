"""
Wallet service for story-build.

Balance, address validation, and ERC20 allowance queries/approvals.
"""

import logging
from typing import Any, Dict, Optional

from story_build.chain import checksum
from story_build.contracts import ERC20_ABI, ROYALTY_MODULE
from story_build.errors import ValidationError
from story_build.tokens import is_protocol_token, resolve_token
from story_build.units import MAX_UINT256, format_ether, is_unlimited, parse_ether

logger = logging.getLogger(__name__)


def get_wallet_info(agent) -> Dict[str, Any]:
    """Address, native IP balance and network details of the configured wallet."""
    chain_id = agent.connect()
    balance = agent.get_balance()
    return {
        "status": "success",
        "wallet": {
            "address": agent.address,
            "balance": f"{format_ether(balance)} IP",
            "balance_wei": str(balance),
        },
        "network": {
            "name": agent.network,
            "chain_id": chain_id,
            "rpc_url": agent.network_info.rpc_url,
            "block_explorer": agent.network_info.block_explorer,
            "protocol_explorer": agent.network_info.protocol_explorer,
        },
        "explorer_url": agent.address_url(agent.address),
    }


def validate_address(address: str) -> Dict[str, Any]:
    """
    Check address format and checksum. Pure; no RPC call.

    An all-lowercase or all-uppercase hex address is valid but carries no
    checksum. A mixed-case address must match its EIP-55 checksum.
    """
    candidate = (address or "").strip()
    try:
        normalized = checksum(candidate)
    except ValidationError as e:
        return {"status": "success", "address": candidate, "is_valid": False, "reason": str(e)}

    body = candidate[2:]
    has_checksum = body != body.lower() and body != body.upper()
    checksum_ok = not has_checksum or candidate == normalized

    result = {
        "status": "success",
        "address": candidate,
        "is_valid": checksum_ok,
        "checksum_address": normalized,
        "has_checksum": has_checksum,
        "is_zero_address": int(body, 16) == 0,
        "is_protocol_token": is_protocol_token(normalized),
    }
    if not checksum_ok:
        result["reason"] = "Mixed-case address does not match its EIP-55 checksum"
    return result


def _token_snapshot(agent, token: str, owner: str, spender: str) -> Dict[str, Any]:
    return {
        "allowance": agent.read(token, ERC20_ABI, "allowance", owner, spender),
        "balance": agent.read(token, ERC20_ABI, "balanceOf", owner),
        "symbol": agent.read(token, ERC20_ABI, "symbol"),
        "decimals": agent.read(token, ERC20_ABI, "decimals"),
        "name": agent.read(token, ERC20_ABI, "name"),
    }


def check_allowance(
    agent,
    token_address: str,
    spender: str,
    owner: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Report how much of a token a spender may move on the owner's behalf.

    Args:
        token_address: Token address, or the WIP / IP shortcuts
        spender: Contract allowed to spend
        owner: Token owner, defaults to the wallet
    """
    token = checksum(resolve_token(token_address), "token_address")
    spender = checksum(spender, "spender")
    owner = checksum(owner, "owner") if owner else None

    agent.connect()
    owner = owner or agent.address
    snap = _token_snapshot(agent, token, owner, spender)
    allowance, balance, symbol = snap["allowance"], snap["balance"], snap["symbol"]

    unlimited = is_unlimited(allowance)
    needs_approval = allowance == 0
    can_spend_balance = allowance >= balance

    if needs_approval:
        recommendations = [
            "No allowance set - approval required",
            f"Use story_approve_token to approve {symbol} spending",
        ]
    elif unlimited:
        recommendations = ["Unlimited allowance set", "No further approvals needed for this token"]
    elif not can_spend_balance:
        recommendations = [
            "Allowance is less than current balance",
            "Consider increasing allowance for full balance access",
        ]
    else:
        recommendations = [f"Can spend up to {format_ether(allowance)} {symbol}"]

    return {
        "status": "success",
        "message": f"Allowance checked for {symbol} token",
        "allowance_details": {
            "token_address": token,
            "token_name": snap["name"],
            "token_symbol": symbol,
            "token_decimals": snap["decimals"],
            "owner": owner,
            "spender": spender,
            "allowance": "Unlimited" if unlimited else format_ether(allowance),
            "allowance_wei": str(allowance),
            "is_unlimited": unlimited,
            "is_zero": needs_approval,
        },
        "balance_comparison": {
            "owner_balance": format_ether(balance),
            "owner_balance_wei": str(balance),
            "can_spend_full_balance": can_spend_balance,
        },
        "contract_info": {
            "is_story_protocol_token": is_protocol_token(token),
            "spender_is_royalty_module": spender == ROYALTY_MODULE,
            "is_own_wallet": owner == agent.address,
        },
        "token_explorer_url": agent.token_url(token),
        "recommendations": recommendations,
    }


def approve_token(
    agent,
    token_address: str,
    spender: str,
    amount: Optional[Any] = None,
    unlimited: bool = False,
) -> Dict[str, Any]:
    """
    Approve a spender for a token amount (decimal, in token units) or unlimited.

    Skips the transaction when the current allowance already covers a finite
    amount.
    """
    token = checksum(resolve_token(token_address), "token_address")
    spender = checksum(spender, "spender")
    if unlimited:
        value = MAX_UINT256
    elif amount is None:
        raise ValidationError("Provide an amount or set unlimited=True")
    else:
        value = parse_ether(amount, "amount")

    agent.connect()
    current = agent.read(token, ERC20_ABI, "allowance", agent.address, spender)
    symbol = agent.read(token, ERC20_ABI, "symbol")

    if current >= value and not unlimited:
        return {
            "status": "success",
            "message": f"Existing allowance already covers {format_ether(value)} {symbol}",
            "approval_details": {
                "token_address": token,
                "spender": spender,
                "current_allowance": "Unlimited" if is_unlimited(current) else format_ether(current),
                "transaction_needed": False,
            },
        }

    agent.simulate(token, ERC20_ABI, "approve", spender, value)
    sent = agent.transact(token, ERC20_ABI, "approve", spender, value)
    new_allowance = agent.read(token, ERC20_ABI, "allowance", agent.address, spender)
    logger.info("Approved %s for %s on %s", spender, "unlimited" if unlimited else value, token)

    return {
        "status": "success",
        "message": f"Approved {spender} to spend {'unlimited' if unlimited else format_ether(value)} {symbol}",
        "approval_details": {
            "token_address": token,
            "token_symbol": symbol,
            "spender": spender,
            "previous_allowance": "Unlimited" if is_unlimited(current) else format_ether(current),
            "new_allowance": "Unlimited" if is_unlimited(new_allowance) else format_ether(new_allowance),
            "is_unlimited": unlimited,
            "transaction_needed": True,
        },
        "transaction_info": {
            "tx_hash": sent["tx_hash"],
            "block_explorer": agent.tx_url(sent["tx_hash"]),
        },
    }
