"""
Mint-and-register IP tool for the story-build MCP server.
"""
from typing import Any, Optional, Union

from story_build.config import load_config
from story_build.pinata import PinataClient
from story_build.services import mint_and_register_ip
from mcp_server.agent import get_agent, run_service
from mcp_server.toon_wrapper import toon_response


def _mint_and_register(**kwargs):
    config = load_config()
    return mint_and_register_ip(get_agent(), PinataClient.from_config(config), **kwargs)


def register_mint_and_register_ip(mcp):
    """Register the mint-and-register IP tool with the MCP server."""

    @mcp.tool()
    @toon_response
    async def story_mint_and_register_ip(
        content_url: Optional[str] = None,
        title: Optional[str] = None,
        description: Optional[str] = None,
        image_url: Optional[str] = None,
        media_url: Optional[str] = None,
        creator_name: Optional[str] = None,
        attributes: Optional[list[dict[str, str]]] = None,
        commercial_rev_share: Union[int, str] = 5,
        minting_fee: Union[float, str] = 1,
        spg_nft_contract: Optional[str] = None,
        toon: Optional[bool] = None
    ) -> dict[str, Any]:
        """
        Register new content as an IP asset with commercial remix terms attached.

        Parses the content URL (or uses the fields given), pins IP and NFT
        metadata to IPFS, then mints an NFT from the SPG collection, registers
        it and attaches the terms in one transaction. Needs PINATA_JWT.

        Args:
            content_url: Instagram, Twitter/X, ArtStation, Behance, YouTube or image URL
            title: Title; required without content_url
            description: Description; required without content_url
            image_url: Image URL, overrides the parsed one
            media_url: Video/audio URL, overrides the parsed one
            creator_name: Creator shown in the metadata
            attributes: Extra [{"trait_type", "value"}] entries
            commercial_rev_share: Revenue share percent for derivatives (0-100)
            minting_fee: License minting fee in WIP
            spg_nft_contract: SPG collection, defaults to the network's public one

        Returns:
            ip_details (ip_id, token_id), transaction_info, metadata URIs and
            hashes, license_info (attached terms ids) and next_steps
        """
        return await run_service(
            _mint_and_register,
            content_url=content_url,
            title=title,
            description=description,
            image_url=image_url,
            media_url=media_url,
            creator_name=creator_name,
            attributes=attributes,
            commercial_rev_share=commercial_rev_share,
            minting_fee=minting_fee,
            spg_nft_contract=spg_nft_contract,
        )
