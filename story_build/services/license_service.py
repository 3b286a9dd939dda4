"""
License service for story-build.

Creates PIL terms, attaches them to IP assets, and mints license tokens.
Every function takes a StoryAgent; the agent's licensing client is the only
thing that talks to the chain.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from story_build.chain import checksum
from story_build.contracts import PIL_FLAVORS, ROYALTY_MODULE, WIP_TOKEN_ADDRESS, ERC20_ABI
from story_build.errors import InsufficientAllowanceError, ValidationError
from story_build.fees import quote
from story_build.license_terms import LicenseTerms, build_license_terms, to_non_negative_int, to_rev_share
from story_build.units import format_ether, parse_ether

logger = logging.getLogger(__name__)


def _expires(expiration: int) -> str:
    if expiration > 0:
        return datetime.fromtimestamp(expiration, tz=timezone.utc).isoformat()
    return "Never"


def _flavor_description(license_terms_id: int) -> str:
    if license_terms_id in PIL_FLAVORS:
        return f"{PIL_FLAVORS[license_terms_id]} (PIL Flavor #{license_terms_id})"
    return "Custom License Terms"


def _terms_id(value: Any) -> int:
    terms_id = to_non_negative_int(value, "license_terms_id")
    if terms_id == 0:
        raise ValidationError("license_terms_id must be >= 1")
    return terms_id


def terms_details(terms: LicenseTerms) -> Dict[str, Any]:
    """Human-facing view of a LicenseTerms record."""
    return {
        "commercial_use": terms.commercial_use,
        "derivatives_allowed": terms.derivatives_allowed,
        "minting_fee": f"{format_ether(terms.default_minting_fee)} WIP",
        "minting_fee_wei": str(terms.default_minting_fee),
        "commercial_rev_share": f"{terms.commercial_rev_share}%",
        "commercial_rev_ceiling": terms.commercial_rev_ceiling,
        "commercial_attribution": terms.commercial_attribution,
        "derivatives_attribution": terms.derivatives_attribution,
        "derivatives_approval": terms.derivatives_approval,
        "derivatives_reciprocal": terms.derivatives_reciprocal,
        "transferable": terms.transferable,
        "royalty_policy": terms.royalty_policy or "None",
        "expires": _expires(terms.expiration),
        "currency": "WIP Token" if terms.currency == WIP_TOKEN_ADDRESS else (terms.currency or "None"),
        "uri": terms.uri,
    }


def preview_license_terms(
    license_type: str = "custom",
    description: Optional[str] = None,
    **params: Any,
) -> Dict[str, Any]:
    """
    Build license terms without touching the chain.

    Args:
        license_type: Preset name
        description: Natural-language overrides (custom preset only)
        **params: License parameters (commercial_use, minting_fee, ...)

    Returns:
        Dict with the summary, terms details, the raw record and overrides applied
    """
    result = build_license_terms(license_type, params, description)
    return {
        "status": "success",
        "license_type": result.preset,
        "summary": result.summary,
        "terms_details": terms_details(result.terms),
        "license_terms": result.terms.to_dict(),
        "overrides_applied": [
            {**o, "value": str(o["value"])} for o in result.overrides
        ],
    }


def create_license_terms(
    agent,
    license_type: str = "custom",
    description: Optional[str] = None,
    **params: Any,
) -> Dict[str, Any]:
    """
    Build and register PIL terms.

    Input is validated before the agent connects. Identical terms already
    registered on-chain resolve to the existing id.
    """
    result = build_license_terms(license_type, params, description)
    summary = description if (description and result.preset == "custom") else result.summary

    agent.connect()
    logger.info("Registering %s license terms", result.preset)
    response = agent.licensing.register_license_terms(result.terms)
    terms_id = response["license_terms_id"]
    tx_hash = response["tx_hash"]

    return {
        "status": "success",
        "message": f"Successfully created license terms: {summary}",
        "license_terms": {
            "license_terms_id": str(terms_id),
            "description": summary,
            "type": result.preset,
            "created_by": agent.address,
            "already_registered": response["already_registered"],
        },
        "transaction_info": {
            "tx_hash": tx_hash,
            "block_explorer": agent.tx_url(tx_hash) if tx_hash else None,
        },
        "terms_details": terms_details(result.terms),
        "overrides_applied": [
            {**o, "value": str(o["value"])} for o in result.overrides
        ],
        "pil_flavors_info": {
            "available_flavors": [
                f"{name} (ID: {flavor_id}) - Built-in" for flavor_id, name in PIL_FLAVORS.items()
            ] + [f"Custom License (ID: {terms_id}) - Your creation"],
            "note": "Built-in PIL flavor IDs (1, 2, 3) or your custom ID can be attached to IP assets",
        },
        "next_steps": [
            f"Attach to IP: story_attach_license with license_terms_id: {terms_id}",
            "Mint license tokens with story_mint_license after attaching",
            f"Reuse license_terms_id {terms_id} across multiple IP assets",
        ],
    }


def attach_license(agent, ip_id: str, license_terms_id: Any) -> Dict[str, Any]:
    """Attach registered terms to an IP asset."""
    ip_id = checksum(ip_id, "ip_id")
    terms_id = _terms_id(license_terms_id)

    agent.connect()
    terms = agent.licensing.get_license_terms(terms_id)
    logger.info("Attaching license terms %s to IP %s", terms_id, ip_id)
    response = agent.licensing.attach_license_terms(ip_id, terms_id)

    fee = format_ether(terms.default_minting_fee)
    if terms.commercial_use:
        revenue_model = "Fee + Revenue Share" if terms.commercial_rev_share > 0 else "Fee Only"
        earnings = f"{fee} WIP per license + {terms.commercial_rev_share}% of derivative revenue"
    else:
        revenue_model = "Non-Commercial"
        earnings = "Non-commercial use only"

    next_steps = [
        "License terms attached - IP is now licensable",
        "Mint license tokens using story_mint_license",
        "Derivatives are allowed" if terms.derivatives_allowed else "Derivatives not allowed with these terms",
    ]
    if terms.commercial_rev_share > 0:
        next_steps.append("You'll earn revenue share from all derivatives")

    return {
        "status": "success",
        "message": "Successfully attached license terms to IP asset",
        "attachment_info": {
            "ip_id": ip_id,
            "license_terms_id": str(terms_id),
            "license_description": _flavor_description(terms_id),
            "attached_at": datetime.now(timezone.utc).isoformat(),
            "attached_by": agent.address,
        },
        "transaction_info": {
            "tx_hash": response["tx_hash"],
            "block_explorer": agent.tx_url(response["tx_hash"]),
            "explorer_url": agent.ip_url(ip_id),
        },
        "license_terms_details": terms_details(terms),
        "monetization_info": {
            "revenue_model": revenue_model,
            "earnings_potential": earnings,
            "license_token_price": f"{fee} WIP",
        },
        "next_steps": next_steps,
    }


def _usage_rights(terms: LicenseTerms) -> Dict[str, List[str]]:
    can = [
        "Use for commercial purposes" if terms.commercial_use else "No commercial use allowed",
        "Create derivative works" if terms.derivatives_allowed else "No derivatives allowed",
        "Transfer license tokens" if terms.transferable else "Cannot transfer tokens",
    ]
    obligations = []
    if terms.commercial_attribution:
        obligations.append("Provide attribution for commercial use")
    if terms.derivatives_attribution:
        obligations.append("Provide attribution for derivatives")
    if terms.commercial_rev_share > 0:
        obligations.append(f"Pay {terms.commercial_rev_share}% revenue share")
    obligations.append("Follow all license terms")
    return {"what_you_can_do": can, "obligations": obligations}


def mint_license(
    agent,
    licensor_ip_id: str,
    license_terms_id: Any,
    amount: int = 1,
    receiver: Optional[str] = None,
    max_minting_fee: Optional[Any] = None,
    max_revenue_share: int = 100,
) -> Dict[str, Any]:
    """
    Mint license tokens from an IP asset with attached terms.

    Args:
        licensor_ip_id: IP asset issuing the tokens
        license_terms_id: Terms attached to the IP
        amount: Number of tokens (>= 1)
        receiver: Token recipient, defaults to the wallet
        max_minting_fee: Ceiling in WIP; defaults to total fee + 10%
        max_revenue_share: Highest revenue share accepted (0-100)

    Raises:
        InvalidQuantityError: amount < 1
        InsufficientAllowanceError: WIP allowance to the royalty module is below the total fee
    """
    licensor_ip_id = checksum(licensor_ip_id, "licensor_ip_id")
    terms_id = _terms_id(license_terms_id)
    receiver = checksum(receiver, "receiver") if receiver else None
    caller_max_fee = parse_ether(max_minting_fee, "max_minting_fee") if max_minting_fee is not None else None
    max_revenue_share = to_rev_share(max_revenue_share, "max_revenue_share")
    quote(0, amount, caller_max_fee)  # rejects a bad amount before connecting

    agent.connect()
    receiver = receiver or agent.address
    terms = agent.licensing.get_license_terms(terms_id)
    per_token_fee = agent.licensing.get_minting_fee(licensor_ip_id, terms_id, terms)
    fee_quote = quote(per_token_fee, amount, caller_max_fee)

    balance_check = None
    if fee_quote.total > 0:
        balance = agent.read(WIP_TOKEN_ADDRESS, ERC20_ABI, "balanceOf", agent.address)
        allowance = agent.read(WIP_TOKEN_ADDRESS, ERC20_ABI, "allowance", agent.address, ROYALTY_MODULE)
        balance_check = {
            "wip_balance": f"{format_ether(balance)} WIP",
            "sufficient": balance >= fee_quote.total,
        }
        if balance < fee_quote.total:
            logger.warning(
                "WIP balance %s below minting fee %s", format_ether(balance), format_ether(fee_quote.total)
            )
        if allowance < fee_quote.total:
            raise InsufficientAllowanceError(
                f"WIP allowance for the royalty module ({ROYALTY_MODULE}) is "
                f"{format_ether(allowance)} WIP but minting costs {format_ether(fee_quote.total)} WIP. "
                f"Run story_approve_token with token_address=WIP and spender={ROYALTY_MODULE} first."
            )

    logger.info("Minting %s license token(s) from IP %s (terms %s)", amount, licensor_ip_id, terms_id)
    response = agent.licensing.mint_license_tokens(
        licensor_ip_id=licensor_ip_id,
        license_terms_id=terms_id,
        amount=amount,
        receiver=receiver,
        max_minting_fee=fee_quote.ceiling,
        max_revenue_share=max_revenue_share,
    )
    token_ids = [str(t) for t in response["license_token_ids"]]
    total = format_ether(fee_quote.total)

    return {
        "status": "success",
        "message": f"Successfully minted {amount} license token(s)",
        "minting_info": {
            "license_token_ids": token_ids,
            "amount_minted": amount,
            "receiver": receiver,
            "licensor_ip_id": licensor_ip_id,
            "license_terms_id": str(terms_id),
            "license_description": _flavor_description(terms_id),
        },
        "transaction_info": {
            "tx_hash": response["tx_hash"],
            "block_explorer": agent.tx_url(response["tx_hash"]),
            "ip_explorer": agent.ip_url(licensor_ip_id),
        },
        "cost_breakdown": {
            **fee_quote.to_dict(),
            "gas_fee": "Paid in IP (see transaction)",
            "total_cost": f"{total} WIP + gas" if fee_quote.total > 0 else "Only gas fees",
        },
        "balance_check": balance_check,
        "license_terms_summary": {
            "commercial_use": terms.commercial_use,
            "derivatives_allowed": terms.derivatives_allowed,
            "transferable": terms.transferable,
            "revenue_share": f"{terms.commercial_rev_share}%",
            "expires": _expires(terms.expiration),
        },
        "usage_rights": _usage_rights(terms),
    }
