"""
Wallet info tool for the story-build MCP server.
"""
from typing import Any, Optional

from story_build.services import get_wallet_info
from mcp_server.agent import run_with_agent
from mcp_server.toon_wrapper import toon_response


def register_get_wallet_info(mcp):
    """Register the wallet info tool with the MCP server."""

    @mcp.tool()
    @toon_response
    async def story_get_wallet_info(toon: Optional[bool] = None) -> dict[str, Any]:
        """
        Show the configured wallet's address, IP balance and network.

        Returns:
            wallet (address, balance), network (name, chain id, explorers)
        """
        return await run_with_agent(get_wallet_info)
