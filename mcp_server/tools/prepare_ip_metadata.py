"""
Prepare IP metadata tool for the story-build MCP server.
"""
from typing import Any, Optional

from story_build.config import load_config
from story_build.pinata import PinataClient
from story_build.services import prepare_ip_metadata
from mcp_server.agent import get_agent, run_service
from mcp_server.toon_wrapper import toon_response


def _prepare(url, creator_address, title, description, additional_creators):
    pinata = PinataClient.from_config(load_config())
    return prepare_ip_metadata(
        url,
        creator_address=creator_address or get_agent().address,
        pinata=pinata,
        title=title,
        description=description,
        additional_creators=additional_creators,
    )


def register_prepare_ip_metadata(mcp):
    """Register the prepare IP metadata tool with the MCP server."""

    @mcp.tool()
    @toon_response
    async def story_prepare_ip_metadata(
        url: str,
        creator_address: Optional[str] = None,
        title: Optional[str] = None,
        description: Optional[str] = None,
        additional_creators: Optional[list[dict[str, Any]]] = None,
        toon: Optional[bool] = None
    ) -> dict[str, Any]:
        """
        Build IP and NFT metadata from a content URL and pin both to IPFS.

        Needs PINATA_JWT. story_mint_and_register_ip pins its own metadata;
        use this tool to inspect or reuse the documents first.

        Args:
            url: Content URL (see story_parse_content_url)
            creator_address: Primary creator, defaults to your wallet
            title: Replace the parsed title
            description: Replace the parsed description
            additional_creators: [{"name", "address", "contribution_percent"}]

        Returns:
            content, ip_metadata and nft_metadata (uri, gateway_url, hash, document)
        """
        return await run_service(_prepare, url, creator_address, title, description, additional_creators)
