"""
Register IP tool for the story-build MCP server.
"""
from typing import Any, Optional

from story_build.services import register_ip
from mcp_server.agent import run_with_agent
from mcp_server.toon_wrapper import toon_response


def register_register_ip(mcp):
    """Register the register IP tool with the MCP server."""

    @mcp.tool()
    @toon_response
    async def story_register_ip(
        nft_contract: str,
        token_id: int,
        toon: Optional[bool] = None
    ) -> dict[str, Any]:
        """
        Register an existing ERC-721 token as a Story Protocol IP asset.

        Args:
            nft_contract: NFT contract address
            token_id: Token id within that contract

        Returns:
            ip_id, already_registered, transaction_info, explorer_url
        """
        return await run_with_agent(register_ip, nft_contract=nft_contract, token_id=token_id)
