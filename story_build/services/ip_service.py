"""
IP asset service for story-build.
"""

import logging
from typing import Any, Dict, List, Optional

from story_build.chain import checksum
from story_build.contracts import (
    EMPTY_LICENSING_CONFIG,
    IP_ASSET_REGISTRY,
    IP_ASSET_REGISTRY_ABI,
    LICENSE_ATTACHMENT_WORKFLOWS,
    LICENSE_ATTACHMENT_WORKFLOWS_ABI,
    PIL_FLAVORS,
)
from story_build.errors import ConfigurationError
from story_build.license_terms import COMMERCIAL_REMIX, build_license_terms, to_non_negative_int
from story_build.pinata import PinataClient
from story_build.services.license_service import terms_details
from story_build.services.metadata_service import build_content, pin_metadata

logger = logging.getLogger(__name__)


def get_ip_info(agent, ip_id: str) -> Dict[str, Any]:
    """Registration status and attached license terms of an IP asset."""
    ip_id = checksum(ip_id, "ip_id")

    agent.connect()
    registered = agent.read(IP_ASSET_REGISTRY, IP_ASSET_REGISTRY_ABI, "isRegistered", ip_id)
    if not registered:
        return {
            "status": "success",
            "ip_id": ip_id,
            "is_registered": False,
            "message": f"{ip_id} is not a registered IP asset on {agent.network}",
        }

    attached = agent.licensing.get_attached_license_terms(ip_id)
    return {
        "status": "success",
        "ip_id": ip_id,
        "is_registered": True,
        "attached_license_terms": [
            {
                "license_terms_id": str(entry["license_terms_id"]),
                "license_template": entry["license_template"],
                "flavor": PIL_FLAVORS.get(entry["license_terms_id"], "Custom"),
            }
            for entry in attached
        ],
        "is_licensable": bool(attached),
        "explorer_url": agent.ip_url(ip_id),
        "next_steps": (
            ["Mint license tokens with story_mint_license"] if attached
            else ["Attach license terms with story_attach_license"]
        ),
    }


def register_ip(agent, nft_contract: str, token_id: Any) -> Dict[str, Any]:
    """
    Register an existing ERC-721 token as an IP asset.

    Registration is idempotent on-chain; an already-registered token returns
    its existing IP id without a transaction.
    """
    nft_contract = checksum(nft_contract, "nft_contract")
    token_id = to_non_negative_int(token_id, "token_id")

    chain_id = agent.connect()
    ip_id = agent.read(IP_ASSET_REGISTRY, IP_ASSET_REGISTRY_ABI, "ipId", chain_id, nft_contract, token_id)
    if agent.read(IP_ASSET_REGISTRY, IP_ASSET_REGISTRY_ABI, "isRegistered", ip_id):
        return {
            "status": "success",
            "message": "NFT is already registered as an IP asset",
            "ip_id": ip_id,
            "already_registered": True,
            "explorer_url": agent.ip_url(ip_id),
        }

    args = (chain_id, nft_contract, token_id)
    ip_id = agent.simulate(IP_ASSET_REGISTRY, IP_ASSET_REGISTRY_ABI, "register", *args)
    sent = agent.transact(IP_ASSET_REGISTRY, IP_ASSET_REGISTRY_ABI, "register", *args)
    logger.info("Registered %s #%s as IP %s", nft_contract, token_id, ip_id)

    return {
        "status": "success",
        "message": "Successfully registered IP asset",
        "ip_id": ip_id,
        "already_registered": False,
        "nft": {"contract": nft_contract, "token_id": str(token_id)},
        "transaction_info": {
            "tx_hash": sent["tx_hash"],
            "block_explorer": agent.tx_url(sent["tx_hash"]),
        },
        "explorer_url": agent.ip_url(ip_id),
        "next_steps": [
            "Create license terms with story_create_license_terms",
            f"Attach them with story_attach_license using ip_id {ip_id}",
        ],
    }


def mint_and_register_ip(
    agent,
    pinata: PinataClient,
    content_url: Optional[str] = None,
    title: Optional[str] = None,
    description: Optional[str] = None,
    image_url: Optional[str] = None,
    media_url: Optional[str] = None,
    creator_name: Optional[str] = None,
    attributes: Optional[List[Dict[str, str]]] = None,
    commercial_rev_share: Any = 5,
    minting_fee: Any = 1,
    spg_nft_contract: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Register new content as an IP asset in one transaction.

    Parses the content (URL and/or explicit fields), pins IP and NFT metadata
    to IPFS, then mints an NFT from the SPG collection, registers it as an IP
    asset and attaches commercial remix terms with the given fee and revenue
    share.

    Args:
        pinata: Client used to pin the metadata documents
        commercial_rev_share: Revenue share percent for the attached terms
        minting_fee: License minting fee in WIP
        spg_nft_contract: SPG collection, defaults to the network's public one

    Raises:
        ValidationError: bad terms, address or missing title/description
        ConfigurationError: no SPG collection for this network
    """
    terms = build_license_terms(
        COMMERCIAL_REMIX, {"minting_fee": minting_fee, "commercial_rev_share": commercial_rev_share}
    ).terms
    if spg_nft_contract:
        spg_nft_contract = checksum(spg_nft_contract, "spg_nft_contract")
    else:
        default = agent.network_info.default_spg_nft_contract
        if not default:
            raise ConfigurationError(f"No SPG NFT contract configured for {agent.network}")
        spg_nft_contract = checksum(default, "spg_nft_contract")
    content = build_content(
        content_url, title, description, image_url, media_url, creator_name, attributes
    )

    agent.connect()
    pinned = pin_metadata(content, agent.address, pinata)
    ip_meta, nft_meta = pinned["ip_metadata"], pinned["nft_metadata"]

    args = (
        spg_nft_contract,
        agent.address,
        (
            ip_meta["uri"],
            bytes.fromhex(ip_meta["hash"][2:]),
            nft_meta["uri"],
            bytes.fromhex(nft_meta["hash"][2:]),
        ),
        [(terms.to_contract_tuple(), EMPTY_LICENSING_CONFIG)],
        True,
    )
    fn = "mintAndRegisterIpAndAttachPILTerms"
    ip_id, token_id, terms_ids = agent.simulate(
        LICENSE_ATTACHMENT_WORKFLOWS, LICENSE_ATTACHMENT_WORKFLOWS_ABI, fn, *args
    )
    sent = agent.transact(LICENSE_ATTACHMENT_WORKFLOWS, LICENSE_ATTACHMENT_WORKFLOWS_ABI, fn, *args)
    logger.info("Minted %s #%s and registered it as IP %s", spg_nft_contract, token_id, ip_id)

    return {
        "status": "success",
        "message": f"Successfully registered IP: {content.title}",
        "ip_details": {
            "ip_id": ip_id,
            "token_id": str(token_id),
            "spg_nft_contract": spg_nft_contract,
            "title": content.title,
            "description": content.description,
            "creator": content.creator or "Content Creator",
            "creator_address": agent.address,
        },
        "transaction_info": {
            "tx_hash": sent["tx_hash"],
            "block_explorer": agent.tx_url(sent["tx_hash"]),
            "explorer_url": agent.ip_url(ip_id),
        },
        "metadata": {
            "ip_metadata_uri": ip_meta["uri"],
            "ip_metadata_hash": ip_meta["hash"],
            "nft_metadata_uri": nft_meta["uri"],
            "nft_metadata_hash": nft_meta["hash"],
            "gateway_urls": [ip_meta["gateway_url"], nft_meta["gateway_url"]],
        },
        "license_info": {
            "attached": True,
            "license_terms_ids": [str(t) for t in terms_ids],
            "terms_details": terms_details(terms),
        },
        "content_source": {
            "original_url": content.original_url,
            "platform": content.platform,
            "parsed_automatically": bool(content_url),
        },
        "next_steps": [
            f"Mint license tokens with story_mint_license using licensor_ip_id {ip_id}",
            "Share the explorer URL above",
        ],
    }
