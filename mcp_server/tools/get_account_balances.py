"""
Account balances tool for the story-build MCP server.
"""
from typing import Any, Optional

from story_build.services import get_account_balances
from mcp_server.agent import run_with_agent
from mcp_server.toon_wrapper import toon_response


def register_get_account_balances(mcp):
    """Register the account balances tool with the MCP server."""

    @mcp.tool()
    @toon_response
    async def story_get_account_balances(
        account_address: Optional[str] = None,
        toon: Optional[bool] = None
    ) -> dict[str, Any]:
        """
        Show native IP and WIP balances for an account.

        Args:
            account_address: Account to inspect, defaults to your wallet

        Returns:
            native_balance, wip_balance, summary (can pay gas / licensing fees)
        """
        return await run_with_agent(get_account_balances, account_address=account_address)
