"""
Check allowance tool for the story-build MCP server.
"""
from typing import Any, Optional

from story_build.services import check_allowance
from mcp_server.agent import run_with_agent
from mcp_server.toon_wrapper import toon_response


def register_check_allowance(mcp):
    """Register the check allowance tool with the MCP server."""

    @mcp.tool()
    @toon_response
    async def story_check_allowance(
        token_address: str,
        spender: str,
        owner: Optional[str] = None,
        toon: Optional[bool] = None
    ) -> dict[str, Any]:
        """
        Check how much of a token a spender may move for an owner.

        Args:
            token_address: ERC20 address, or "WIP" / "IP"
            spender: Spender contract (e.g. the royalty module)
            owner: Token owner, defaults to your wallet

        Returns:
            allowance_details, balance_comparison, contract_info, recommendations
        """
        return await run_with_agent(
            check_allowance, token_address=token_address, spender=spender, owner=owner
        )
