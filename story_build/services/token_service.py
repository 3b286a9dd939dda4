"""
Token service for story-build.

Native IP and ERC20 transfers, WIP wrapping, token metadata and balance
overviews. Amounts are decimal token units on the way in and formatted
strings plus base-unit strings on the way out.
"""

import logging
from typing import Any, Dict, Optional

from story_build.chain import checksum
from story_build.contracts import ERC20_ABI, WIP_ABI, WIP_TOKEN_ADDRESS
from story_build.errors import InsufficientBalanceError, ValidationError
from story_build.tokens import is_protocol_token, resolve_token
from story_build.units import format_ether, format_units, parse_ether, to_base_units, to_decimal

logger = logging.getLogger(__name__)

# Below this much native IP the wallet cannot reliably pay for gas
MIN_GAS_BALANCE = 10 ** 15


def _positive(amount: Any, field: str = "amount") -> None:
    if to_decimal(amount, field) == 0:
        raise ValidationError(f"{field} must be greater than 0")


def _receipt_info(agent, sent: Dict[str, Any]) -> Dict[str, Any]:
    receipt = sent["receipt"]
    return {
        "tx_hash": sent["tx_hash"],
        "block_number": str(receipt["blockNumber"]),
        "gas_used": str(receipt["gasUsed"]),
        "block_explorer": agent.tx_url(sent["tx_hash"]),
    }


def send_native(agent, destination: str, amount: Any, memo: Optional[str] = None) -> Dict[str, Any]:
    """
    Send native IP from the wallet.

    Raises:
        InsufficientBalanceError: balance below amount, or below amount plus gas
    """
    destination = checksum(destination, "destination")
    _positive(amount)
    value = parse_ether(amount, "amount")

    agent.connect()
    balance = agent.get_balance()
    if balance < value:
        raise InsufficientBalanceError(
            f"Insufficient balance. Available: {format_ether(balance)} IP, Required: {format_ether(value)} IP"
        )

    estimate = agent.estimate_native_transfer(destination, value)
    gas_cost = estimate["gas"] * estimate["gas_price"]
    if balance < value + gas_cost:
        raise InsufficientBalanceError(
            f"Insufficient balance for transfer plus gas. Total needed: {format_ether(value + gas_cost)} IP"
        )

    sent = agent.send_native(destination, value, **estimate)
    logger.info("Sent %s IP to %s", format_ether(value), destination)
    spent = value + sent["receipt"]["gasUsed"] * estimate["gas_price"]

    return {
        "status": "success",
        "message": f"Sent {format_ether(value)} IP to {destination}",
        "transfer_details": {
            "from": agent.address,
            "to": destination,
            "amount": f"{format_ether(value)} IP",
            "amount_wei": str(value),
            "gas_price": str(estimate["gas_price"]),
            "total_cost": f"{format_ether(spent)} IP",
            "memo": memo or "N/A",
        },
        "transaction_info": _receipt_info(agent, sent),
        "network": agent.network,
    }


def send_token(
    agent,
    token_address: str,
    destination: str,
    amount: Any,
    memo: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Transfer an ERC20 token (address, or the WIP shortcut) from the wallet.

    The amount is scaled by the token's own decimals.
    """
    token = checksum(resolve_token(token_address), "token_address")
    destination = checksum(destination, "destination")
    _positive(amount)

    agent.connect()
    symbol = agent.read(token, ERC20_ABI, "symbol")
    decimals = agent.read(token, ERC20_ABI, "decimals")
    value = to_base_units(amount, decimals, "amount")
    balance = agent.read(token, ERC20_ABI, "balanceOf", agent.address)
    if balance < value:
        raise InsufficientBalanceError(
            f"Insufficient {symbol} balance. Available: {format_units(balance, decimals)}, "
            f"Required: {format_units(value, decimals)}"
        )

    agent.simulate(token, ERC20_ABI, "transfer", destination, value)
    sent = agent.transact(token, ERC20_ABI, "transfer", destination, value)
    logger.info("Sent %s %s to %s", format_units(value, decimals), symbol, destination)

    return {
        "status": "success",
        "message": f"Sent {format_units(value, decimals)} {symbol} to {destination}",
        "transfer_details": {
            "from": agent.address,
            "to": destination,
            "amount": f"{format_units(value, decimals)} {symbol}",
            "amount_base_units": str(value),
            "memo": memo or "N/A",
        },
        "token_info": {
            "contract_address": token,
            "symbol": symbol,
            "decimals": decimals,
            "is_story_protocol_token": is_protocol_token(token),
        },
        "transaction_info": _receipt_info(agent, sent),
        "network": agent.network,
    }


def wrap_ip(agent, amount: Any, check_balance: bool = True) -> Dict[str, Any]:
    """Deposit native IP into the WIP contract, 1:1."""
    _positive(amount)
    value = parse_ether(amount, "amount")

    agent.connect()
    if check_balance:
        balance = agent.get_balance()
        if balance < value:
            raise InsufficientBalanceError(
                f"Insufficient IP balance. Required: {format_ether(value)} IP, "
                f"Available: {format_ether(balance)} IP"
            )

    agent.simulate(WIP_TOKEN_ADDRESS, WIP_ABI, "deposit", value=value)
    sent = agent.transact(WIP_TOKEN_ADDRESS, WIP_ABI, "deposit", value=value)
    wip_balance = agent.read(WIP_TOKEN_ADDRESS, WIP_ABI, "balanceOf", agent.address)
    logger.info("Wrapped %s IP", format_ether(value))

    return {
        "status": "success",
        "message": f"Wrapped {format_ether(value)} IP to WIP",
        "wrap_details": {
            "amount_wrapped": f"{format_ether(value)} IP",
            "received": f"{format_ether(value)} WIP",
            "exchange_rate": "1:1",
        },
        "transaction_info": _receipt_info(agent, sent),
        "wip_balance": f"{format_ether(wip_balance)} WIP",
        "next_steps": [
            "Use WIP for license minting fees (story_mint_license)",
            "Unwrap back to IP with story_unwrap_wip",
        ],
    }


def unwrap_wip(agent, amount: Any, check_balance: bool = True) -> Dict[str, Any]:
    """Withdraw WIP back to native IP, 1:1."""
    _positive(amount)
    value = parse_ether(amount, "amount")

    agent.connect()
    if check_balance:
        balance = agent.read(WIP_TOKEN_ADDRESS, WIP_ABI, "balanceOf", agent.address)
        if balance < value:
            raise InsufficientBalanceError(
                f"Insufficient WIP balance. Required: {format_ether(value)} WIP, "
                f"Available: {format_ether(balance)} WIP"
            )

    agent.simulate(WIP_TOKEN_ADDRESS, WIP_ABI, "withdraw", value)
    sent = agent.transact(WIP_TOKEN_ADDRESS, WIP_ABI, "withdraw", value)
    ip_balance = agent.get_balance()
    logger.info("Unwrapped %s WIP", format_ether(value))

    return {
        "status": "success",
        "message": f"Unwrapped {format_ether(value)} WIP to IP",
        "unwrap_details": {
            "amount_unwrapped": f"{format_ether(value)} WIP",
            "received": f"{format_ether(value)} IP",
            "exchange_rate": "1:1",
        },
        "transaction_info": _receipt_info(agent, sent),
        "ip_balance": f"{format_ether(ip_balance)} IP",
        "next_steps": ["Wrap again with story_wrap_ip when you need WIP for licensing"],
    }


def _concentration(percent: float) -> str:
    if percent > 1:
        return "significant_holder"
    if percent > 0.1:
        return "moderate_holder"
    if percent > 0:
        return "small_holder"
    return "non_holder"


def get_token_info(agent, token_address: str, account_address: Optional[str] = None) -> Dict[str, Any]:
    """ERC20 metadata plus one account's balance and share of supply."""
    token = checksum(resolve_token(token_address), "token_address")
    account = checksum(account_address, "account_address") if account_address else None

    agent.connect()
    account = account or agent.address
    name = agent.read(token, ERC20_ABI, "name")
    symbol = agent.read(token, ERC20_ABI, "symbol")
    decimals = agent.read(token, ERC20_ABI, "decimals")
    total_supply = agent.read(token, ERC20_ABI, "totalSupply")
    balance = agent.read(token, ERC20_ABI, "balanceOf", account)

    official = token == WIP_TOKEN_ADDRESS
    percent = balance * 100 / total_supply if total_supply else 0.0

    return {
        "status": "success",
        "message": f"Token information retrieved for {symbol}",
        "token_metadata": {
            "contract_address": token,
            "name": name,
            "symbol": symbol,
            "decimals": decimals,
            "total_supply": format_units(total_supply, decimals),
            "total_supply_base_units": str(total_supply),
            "is_contract": agent.is_contract(token),
            "is_story_protocol_token": official,
            "purpose": (
                "Licensing fees and royalty payments on Story Protocol" if official
                else "Custom ERC20 token; verify legitimacy before use"
            ),
        },
        "account_balance": {
            "address": account,
            "balance": format_units(balance, decimals),
            "balance_base_units": str(balance),
            "percentage_of_supply": f"{percent:.6f}%",
            "supply_concentration": _concentration(percent),
            "is_own_wallet": account == agent.address,
        },
        "token_explorer_url": agent.token_url(token),
        "can_use_for_licensing": official,
    }


def get_account_balances(agent, account_address: Optional[str] = None) -> Dict[str, Any]:
    """Native IP and WIP balances of an account (defaults to the wallet)."""
    account = checksum(account_address, "account_address") if account_address else None

    agent.connect()
    account = account or agent.address
    native = agent.get_balance(account)
    wip = agent.read(WIP_TOKEN_ADDRESS, ERC20_ABI, "balanceOf", account)
    can_pay_gas = native >= MIN_GAS_BALANCE

    if not can_pay_gas:
        next_steps = ["Fund the wallet with IP for gas", "Wrap IP to WIP for licensing fees"]
    elif wip == 0:
        next_steps = ["Wrap IP to WIP with story_wrap_ip before minting paid licenses"]
    else:
        next_steps = ["Ready to register IP assets and mint licenses"]

    return {
        "status": "success",
        "account": {
            "address": account,
            "network": agent.network,
            "is_own_wallet": account == agent.address,
        },
        "native_balance": {
            "symbol": "IP",
            "balance": format_ether(native),
            "balance_wei": str(native),
        },
        "wip_balance": {
            "symbol": "WIP",
            "balance": format_ether(wip),
            "balance_wei": str(wip),
            "contract_address": WIP_TOKEN_ADDRESS,
        },
        "summary": {
            "can_pay_gas": can_pay_gas,
            "can_pay_licensing_fees": wip > 0,
        },
        "explorer_url": agent.address_url(account),
        "next_steps": next_steps,
    }
