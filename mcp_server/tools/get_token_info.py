"""
Token info tool for the story-build MCP server.
"""
from typing import Any, Optional

from story_build.services import get_token_info
from mcp_server.agent import run_with_agent
from mcp_server.toon_wrapper import toon_response


def register_get_token_info(mcp):
    """Register the token info tool with the MCP server."""

    @mcp.tool()
    @toon_response
    async def story_get_token_info(
        token_address: str,
        account_address: Optional[str] = None,
        toon: Optional[bool] = None
    ) -> dict[str, Any]:
        """
        Show an ERC20 token's metadata and an account's holding.

        Args:
            token_address: Token contract, or "WIP" / "IP"
            account_address: Holder to inspect, defaults to your wallet

        Returns:
            token_metadata (name, symbol, decimals, supply), account_balance
            (balance, share of supply)
        """
        return await run_with_agent(
            get_token_info, token_address=token_address, account_address=account_address
        )
